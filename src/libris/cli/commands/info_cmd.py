# ABOUTME: The `libris info` command for displaying one book with its files and tags.
# ABOUTME: Shows the hydrated catalog entry for a book ID.

from pathlib import Path

import click
from rich.console import Console
from rich.table import Table

from libris.cli.options import library_options, open_catalog

console = Console()


@click.command("info")
@click.argument("book_id", type=int)
@library_options
def info(
    book_id: int,
    db_path: Path | None,
    books_root: Path | None,
    relaxed: bool,
    verbose: bool,
) -> None:
    """Show a book, its authors, and every file cataloged for it."""
    catalog = open_catalog(db_path, books_root, relaxed, verbose)
    try:
        book = catalog.get_book(book_id)
    finally:
        catalog.conn.close()

    if book is None:
        console.print(f"[red]Book {book_id} not found.[/red]")
        raise SystemExit(1)

    table = Table(show_header=False, box=None, pad_edge=False)
    table.add_column("Field", style="bold", width=10)
    table.add_column("Value")

    table.add_row("ID", str(book.id))
    table.add_row("Title", book.title)
    table.add_row("Authors", book.author or "unknown")
    if book.series:
        table.add_row("Series", book.series)
    console.print(table)

    files = Table(title="Files")
    files.add_column("ID", style="dim", width=5)
    files.add_column("Format")
    files.add_column("Path")
    files.add_column("Size", justify="right")
    files.add_column("Tags", style="cyan")
    files.add_column("Hash", style="dim")
    for bf in book.files:
        files.add_row(
            str(bf.id),
            bf.extension,
            bf.current_filename,
            str(bf.file_size),
            ", ".join(bf.tags),
            bf.hash[:12],
        )
    console.print(files)
