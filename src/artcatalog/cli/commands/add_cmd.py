# ABOUTME: The `artcatalog add` command for submitting a single artwork.
# ABOUTME: Warns about likely duplicates nearby before storing the new record.

from pathlib import Path

import click
from rich.console import Console

from artcatalog.cli.options import db_option, tag_option
from artcatalog.db.catalog import ArtworkCatalog
from artcatalog.db.connection import DEFAULT_DB_PATH, open_catalog
from artcatalog.db.mapping import Artwork
from artcatalog.similarity.config import load_similarity_config
from artcatalog.similarity.geo import is_valid_coordinate, normalize_coordinate
from artcatalog.similarity.service import create_similarity_service
from artcatalog.similarity.types import Coordinate, SimilarityQuery


@click.command("add")
@click.argument("title")
@click.option("--lat", type=float, required=True, help="Latitude in decimal degrees.")
@click.option("--lon", type=float, required=True, help="Longitude in decimal degrees.")
@click.option("--artist", default=None, help="Artist name(s), comma separated.")
@click.option("--type", "type_name", default=None, help="Artwork type, e.g. sculpture.")
@click.option("--description", default=None, help="Free-text description.")
@tag_option
@db_option
def add(
    title: str,
    lat: float,
    lon: float,
    artist: str | None,
    type_name: str | None,
    description: str | None,
    tags: dict[str, str],
    db_path: Path | None,
) -> None:
    """Add an artwork to the catalogue."""
    console = Console()
    point = Coordinate(lat, lon)
    if not is_valid_coordinate(point):
        console.print(f"[red]Invalid coordinates ({lat}, {lon}).[/red]")
        raise SystemExit(1)
    point = normalize_coordinate(point)

    conn = open_catalog(db_path or DEFAULT_DB_PATH)
    try:
        catalog = ArtworkCatalog(conn)
        service = create_similarity_service(load_similarity_config())

        nearby = catalog.find_nearby_artworks(
            point.lat, point.lon, service.config.distance_cutoff_meters,
        )
        query = SimilarityQuery(coordinates=point, title=title, tags=tags, artist=artist)
        check = service.check_for_duplicates(query, [a.to_candidate() for a in nearby])

        for match in check.high_similarity_matches:
            console.print(
                f"[yellow]Possible duplicate:[/yellow] {match.artwork_id} ({match.explanation})"
            )

        artwork_id = catalog.add_artwork(
            Artwork(
                title=title,
                lat=point.lat,
                lon=point.lon,
                description=description,
                artist=artist,
                tags=tags,
                type_name=type_name,
            )
        )
    finally:
        conn.close()

    console.print(f"Added [bold]{title}[/bold] as {artwork_id}")
