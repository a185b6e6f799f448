# ABOUTME: The `libris search` command for paged full-text search of the catalog.
# ABOUTME: Supports field-scoped terms like author:King and reports how many more results exist.

from pathlib import Path

import click
from rich.console import Console
from rich.table import Table

from libris.cli.options import library_options, open_catalog
from libris.db.errors import StoreError

console = Console()


@click.command("search")
@click.argument("query")
@library_options
@click.option("--offset", type=click.IntRange(min=0), default=0, help="Results to skip.")
@click.option(
    "--limit",
    type=click.IntRange(min=0),
    default=20,
    help="Results per page; 0 shows everything.",
)
@click.option(
    "--more-cap",
    type=click.IntRange(min=0),
    default=100,
    help="Stop counting further results past this many.",
)
def search(
    query: str,
    db_path: Path | None,
    books_root: Path | None,
    relaxed: bool,
    verbose: bool,
    offset: int,
    limit: int,
    more_cap: int,
) -> None:
    """Search the library by author, title, series, extension, tags, or source."""
    catalog = open_catalog(db_path, books_root, relaxed, verbose)
    try:
        books, more = catalog.search_paged(query, offset, limit, more_cap)
    except StoreError as exc:
        console.print(f"[red]Search failed:[/red] {exc}")
        raise SystemExit(1) from exc
    finally:
        catalog.conn.close()

    if not books:
        console.print("[yellow]No results found.[/yellow]")
        return

    table = Table()
    table.add_column("ID", style="dim", width=5)
    table.add_column("Title", style="bold")
    table.add_column("Authors")
    table.add_column("Series")
    table.add_column("Formats")

    for book in books:
        table.add_row(
            str(book.id),
            book.title,
            book.author or "[dim]unknown[/dim]",
            book.series,
            ", ".join(bf.extension for bf in book.files),
        )

    console.print(table)
    if more:
        count = f"{more}+" if more >= more_cap else str(more)
        console.print(f"\n[dim]... and {count} more[/dim]")
