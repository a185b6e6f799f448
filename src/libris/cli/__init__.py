# ABOUTME: CLI package for Libris, built on Click.
# ABOUTME: Defines the root command group and registers subcommands.

import click

from libris.cli.commands import convert_cmd, import_cmd, info_cmd, search_cmd


@click.group()
@click.version_option(package_name="libris")
def cli() -> None:
    """Libris - a personal catalog of books and the files that hold them."""


cli.add_command(import_cmd.import_command)
cli.add_command(search_cmd.search)
cli.add_command(info_cmd.info)
cli.add_command(convert_cmd.convert)
