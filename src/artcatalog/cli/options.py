# ABOUTME: Shared Click options for artcatalog CLI commands.
# ABOUTME: Provides reusable decorators for --db and repeatable --tag key=value flags.

from pathlib import Path

import click

from artcatalog.db.connection import DEFAULT_DB_PATH

db_option = click.option(
    "--db",
    "db_path",
    type=click.Path(path_type=Path),
    default=None,
    help=f"Path to catalogue database (default: {DEFAULT_DB_PATH})",
)


def _parse_tag_pairs(
    ctx: click.Context, param: click.Parameter, values: tuple[str, ...],
) -> dict[str, str]:
    """Turn repeated key=value strings into a tag map."""
    tags: dict[str, str] = {}
    for value in values:
        key, sep, tag_value = value.partition("=")
        if not sep or not key.strip():
            raise click.BadParameter(f"expected key=value, got {value!r}")
        tags[key.strip()] = tag_value.strip()
    return tags


tag_option = click.option(
    "--tag",
    "tags",
    multiple=True,
    callback=_parse_tag_pairs,
    help="Tag as key=value (repeatable), e.g. --tag material=bronze.",
)
