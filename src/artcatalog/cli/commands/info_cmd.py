# ABOUTME: The `artcatalog info` command for displaying a catalogued artwork.
# ABOUTME: Shows all fields, including tags, for a single artwork by ID.

from pathlib import Path

import click
from rich.console import Console
from rich.table import Table

from artcatalog.cli.options import db_option
from artcatalog.db.catalog import ArtworkCatalog
from artcatalog.db.connection import DEFAULT_DB_PATH, open_catalog


@click.command("info")
@click.argument("artwork_id")
@db_option
def info(artwork_id: str, db_path: Path | None) -> None:
    """Show detailed fields for an artwork by ID."""
    console = Console()
    conn = open_catalog(db_path or DEFAULT_DB_PATH)
    try:
        record = ArtworkCatalog(conn).get_by_id(artwork_id)
    finally:
        conn.close()

    if record is None:
        console.print(f"[red]Artwork {artwork_id} not found.[/red]")
        raise SystemExit(1)

    artwork = record.artwork
    table = Table(show_header=False, box=None, pad_edge=False)
    table.add_column("Field", style="bold", width=12)
    table.add_column("Value")

    table.add_row("ID", record.id)
    table.add_row("Title", artwork.title or "untitled")
    table.add_row("Artist", artwork.artist or "unknown")
    table.add_row("Location", f"{artwork.lat:.5f}, {artwork.lon:.5f}")
    if artwork.type_name:
        table.add_row("Type", artwork.type_name)
    if artwork.description:
        table.add_row("Description", artwork.description)
    if artwork.source_id:
        table.add_row("Source ID", artwork.source_id)
    for key in sorted(artwork.tags):
        table.add_row(f"tag:{key}", str(artwork.tags[key]))
    table.add_row("Status", record.status)
    table.add_row("Added", record.date_added)
    table.add_row("Modified", record.date_modified)

    console.print(table)
