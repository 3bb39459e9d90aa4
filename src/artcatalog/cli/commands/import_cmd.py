# ABOUTME: The `artcatalog import` command for mass-importing open-data artwork feeds.
# ABOUTME: Loads records from a file or URL, skips duplicates, and reports a breakdown.

from pathlib import Path

import click
from rich.console import Console
from rich.table import Table

from artcatalog.cli.options import db_option
from artcatalog.core.importer import ImportResult, import_artworks
from artcatalog.core.sources import ImportSourceError, load_import_records
from artcatalog.db.catalog import ArtworkCatalog
from artcatalog.db.connection import DEFAULT_DB_PATH, open_catalog
from artcatalog.similarity.mass_import import create_mass_import_duplicate_detection_service


def _print_duplicates(console: Console, result: ImportResult) -> None:
    table = Table(title="Duplicates")
    table.add_column("Record")
    table.add_column("Existing", style="dim", no_wrap=True)
    table.add_column("Score", justify="right")
    table.add_column("Title", justify="right")
    table.add_column("Artist", justify="right")
    table.add_column("Location", justify="right")
    table.add_column("Tags", justify="right")
    table.add_column("Ref", justify="right")
    table.add_column("New tags", justify="right")

    for report in result.duplicate_details:
        info = report.info
        breakdown = info.score_breakdown
        table.add_row(
            info.title,
            info.existing_artwork_id[:8],
            f"{info.confidence_score:.2f}",
            f"{breakdown.title:.2f}",
            f"{breakdown.artist:.2f}",
            f"{breakdown.location:.2f}",
            f"{breakdown.tags:.2f}",
            f"{breakdown.reference:.2f}",
            str(report.new_tags_added),
        )

    console.print(table)


@click.command("import")
@click.argument("source")
@db_option
@click.option(
    "-t", "--threshold",
    type=click.FloatRange(0.0, 1.0),
    default=None,
    help="Duplicate confidence cutoff (0.0-1.0, default 0.7).",
)
@click.option(
    "--page-size",
    type=click.IntRange(min=1),
    default=None,
    help="Read a URL feed in pages of this many records (limit/offset paging).",
)
@click.option(
    "--merge-tags/--no-merge-tags",
    default=True,
    help="Merge tags from duplicate records into the existing artwork.",
)
def import_command(
    source: str,
    db_path: Path | None,
    threshold: float | None,
    page_size: int | None,
    merge_tags: bool,
) -> None:
    """Import artworks from a JSON file or http(s) URL, skipping duplicates."""
    console = Console()
    try:
        records = load_import_records(source, page_size=page_size)
    except ImportSourceError as exc:
        console.print(f"[red]{exc}[/red]")
        raise SystemExit(1) from exc

    if not records:
        console.print(f"[yellow]No records found in {source}[/yellow]")
        return

    console.print(f"Found [bold]{len(records)}[/bold] record(s)\n")

    conn = open_catalog(db_path or DEFAULT_DB_PATH)
    try:
        catalog = ArtworkCatalog(conn)
        detector = create_mass_import_duplicate_detection_service(catalog)
        result = import_artworks(
            records,
            catalog,
            detector,
            duplicate_threshold=threshold,
            merge_duplicate_tags=merge_tags,
        )
    finally:
        conn.close()

    console.print(
        f"[green]{result.added} added[/green], "
        f"[yellow]{result.duplicates} duplicate(s)[/yellow], "
        f"[red]{result.errors} error(s)[/red]"
    )
    if result.merged_tags:
        console.print(f"Merged {result.merged_tags} new tag(s) into existing artworks")

    if result.duplicate_details:
        console.print()
        _print_duplicates(console, result)

    if result.error_details:
        console.print(f"\n[yellow]{result.errors} record(s) could not be imported:[/yellow]")
        for title, msg in result.error_details:
            console.print(f"  [dim]{title}:[/dim] {msg}")
