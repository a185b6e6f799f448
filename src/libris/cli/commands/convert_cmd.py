# ABOUTME: The `libris convert` command for producing a cached EPUB copy of a stored file.
# ABOUTME: Shells out to Calibre's ebook-convert (or --converter) and prints the cached path.

from pathlib import Path

import click
from rich.console import Console

from libris.cli.options import library_options, open_catalog
from libris.core.convert import DEFAULT_CONVERTER, convert_to_epub
from libris.db.errors import ConversionError

console = Console()


@click.command("convert")
@click.argument("file_id", type=int)
@library_options
@click.option(
    "--converter",
    default=DEFAULT_CONVERTER,
    show_default=True,
    help="Conversion program, called as: converter SOURCE DESTINATION.",
)
def convert(
    file_id: int,
    db_path: Path | None,
    books_root: Path | None,
    relaxed: bool,
    verbose: bool,
    converter: str,
) -> None:
    """Convert a stored file to EPUB in the library cache."""
    catalog = open_catalog(db_path, books_root, relaxed, verbose)
    try:
        files = catalog.get_files_by_id([file_id])
        if not files:
            console.print(f"[red]File {file_id} not found.[/red]")
            raise SystemExit(1)
        destination = convert_to_epub(catalog, files[0], command=converter)
    except ConversionError as exc:
        console.print(f"[red]Conversion failed:[/red] {exc}")
        raise SystemExit(1) from exc
    finally:
        catalog.conn.close()

    console.print(f"Converted to [bold]{destination}[/bold]")
