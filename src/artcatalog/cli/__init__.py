# ABOUTME: CLI package for artcatalog, built on Click.
# ABOUTME: Defines the root command group, configures logging, and registers subcommands.

import logging

import click

from artcatalog.cli.commands import add_cmd, import_cmd, info_cmd, nearby_cmd


@click.group()
@click.version_option(package_name="artcatalog")
@click.option("-v", "--verbose", is_flag=True, default=False, help="Enable debug logging.")
def cli(verbose: bool) -> None:
    """artcatalog - a public-art catalogue with duplicate detection."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


cli.add_command(add_cmd.add)
cli.add_command(info_cmd.info)
cli.add_command(nearby_cmd.nearby)
cli.add_command(import_cmd.import_command)
