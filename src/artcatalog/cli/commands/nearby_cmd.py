# ABOUTME: The `artcatalog nearby` command for previewing likely duplicates at a location.
# ABOUTME: Lists nearby artworks ranked by similarity with band, score, and explanation.

from pathlib import Path

import click
from rich.console import Console
from rich.table import Table

from artcatalog.cli.options import db_option, tag_option
from artcatalog.db.catalog import ArtworkCatalog
from artcatalog.db.connection import DEFAULT_DB_PATH, open_catalog
from artcatalog.similarity.config import load_similarity_config
from artcatalog.similarity.service import (
    create_dev_similarity_service,
    create_similarity_service,
    with_threshold,
)
from artcatalog.similarity.types import (
    Coordinate,
    EnhancedArtwork,
    SimilarityBand,
    SimilarityQuery,
)

_BAND_STYLES = {
    SimilarityBand.HIGH: "red",
    SimilarityBand.WARNING: "yellow",
    SimilarityBand.NONE: "dim",
}


def _signals_text(item: EnhancedArtwork) -> str:
    if not item.signals:
        return ""
    return " ".join(
        f"{signal.type.value}={signal.raw_score:.2f}x{signal.weight:g}" for signal in item.signals
    )


@click.command("nearby")
@click.option("--lat", type=float, required=True, help="Latitude in decimal degrees.")
@click.option("--lon", type=float, required=True, help="Longitude in decimal degrees.")
@click.option("--title", default=None, help="Title of the artwork being submitted.")
@click.option("--artist", default=None, help="Artist of the artwork being submitted.")
@tag_option
@click.option(
    "-r", "--radius",
    type=click.FloatRange(min=0.0, min_open=True),
    default=None,
    help="Search radius in meters (default: the similarity distance cutoff).",
)
@click.option("-n", "--limit", type=click.IntRange(min=1), default=20, help="Max results.")
@click.option(
    "-t", "--threshold",
    type=click.FloatRange(0.0, 1.0),
    default=None,
    help="Override the high-similarity cutoff (0.0-1.0).",
)
@click.option(
    "--debug-signals",
    is_flag=True,
    default=False,
    help="Show the raw score and weight of each similarity signal.",
)
@db_option
def nearby(
    lat: float,
    lon: float,
    title: str | None,
    artist: str | None,
    tags: dict[str, str],
    radius: float | None,
    limit: int,
    threshold: float | None,
    debug_signals: bool,
    db_path: Path | None,
) -> None:
    """Rank artworks near a location by how likely they duplicate a submission."""
    console = Console()
    config = load_similarity_config()
    if threshold is not None:
        config = with_threshold(config, threshold)
    if debug_signals:
        service = create_dev_similarity_service(config)
    else:
        service = create_similarity_service(config)

    conn = open_catalog(db_path or DEFAULT_DB_PATH)
    try:
        found = ArtworkCatalog(conn).find_nearby_artworks(
            lat, lon, radius or config.distance_cutoff_meters, limit,
        )
    finally:
        conn.close()

    if not found:
        console.print("[yellow]No artworks nearby.[/yellow]")
        return

    query = SimilarityQuery(
        coordinates=Coordinate(lat, lon), title=title, tags=tags or None, artist=artist,
    )
    ranked = service.enhance_nearby_results(query, found)
    check = service.check_for_duplicates(query, [a.to_candidate() for a in found])

    table = Table(title=f"{len(ranked)} artwork(s) nearby")
    table.add_column("ID", style="dim", no_wrap=True)
    table.add_column("Title")
    table.add_column("Distance", justify="right")
    table.add_column("Score", justify="right")
    table.add_column("Band")
    table.add_column("Why")
    if debug_signals:
        table.add_column("Signals")

    for item in ranked:
        band = item.similarity_band
        band_text = (
            f"[{_BAND_STYLES[band]}]{band.value.upper()}[/{_BAND_STYLES[band]}]" if band else "-"
        )
        score = f"{item.similarity_score:.2f}" if item.similarity_score is not None else "-"
        row = [
            item.artwork.id[:8],
            item.artwork.title or "untitled",
            f"{item.distance_meters:.0f}m",
            score,
            band_text,
            item.explanation or "",
        ]
        if debug_signals:
            row.append(_signals_text(item))
        table.add_row(*row)

    console.print(table)

    if check.has_high_similarity:
        console.print(
            f"\n[bold red]{len(check.high_similarity_matches)} likely duplicate(s) found.[/bold red]"
        )
    elif check.has_warning_similarity:
        console.print(
            f"\n[yellow]{len(check.warning_similarity_matches)} similar artwork(s) nearby.[/yellow]"
        )
