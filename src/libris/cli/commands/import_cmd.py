# ABOUTME: The `libris import` command for adding book files to the library.
# ABOUTME: Reads title/author/series from file names and imports each file atomically.

from pathlib import Path

import click
from rich.console import Console

from libris.cli.options import library_options, open_catalog
from libris.core.importer import import_paths

console = Console()


def _collect(paths: tuple[Path, ...]) -> list[Path]:
    """Expand directories to the files beneath them, skipping hidden files."""
    files: list[Path] = []
    for path in paths:
        if path.is_dir():
            files.extend(
                p for p in sorted(path.rglob("*"))
                if p.is_file() and not p.name.startswith(".")
            )
        else:
            files.append(path)
    return files


@click.command("import")
@click.argument(
    "paths",
    nargs=-1,
    required=True,
    type=click.Path(exists=True, path_type=Path),
)
@library_options
@click.option("--move", is_flag=True, default=False, help="Move files instead of copying them.")
@click.option("-t", "--tag", "tags", multiple=True, help="Tag every imported file (repeatable).")
@click.option("--source", default="", help="Where these files came from.")
def import_command(
    paths: tuple[Path, ...],
    db_path: Path | None,
    books_root: Path | None,
    relaxed: bool,
    verbose: bool,
    move: bool,
    tags: tuple[str, ...],
    source: str,
) -> None:
    """Import book files (or directories of them) into the library."""
    files = _collect(paths)
    if not files:
        console.print("[yellow]No files found.[/yellow]")
        return

    console.print(f"Found [bold]{len(files)}[/bold] file(s)\n")

    catalog = open_catalog(db_path, books_root, relaxed, verbose)
    try:
        result = import_paths(files, catalog, move=move, tags=tags, source=source)
    finally:
        catalog.conn.close()

    parts = []
    if result.added:
        parts.append(f"[green]{result.added} added[/green]")
    if result.skipped:
        parts.append(f"[yellow]{result.skipped} skipped[/yellow]")
    if result.errors:
        parts.append(f"[red]{result.errors} error(s)[/red]")
    console.print(", ".join(parts))

    if result.error_details:
        console.print(f"\n[yellow]{result.errors} file(s) could not be imported:[/yellow]")
        for path, msg in result.error_details:
            console.print(f"  [dim]{path.name}:[/dim] {msg}")
