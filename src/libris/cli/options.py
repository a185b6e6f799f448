# ABOUTME: Shared Click options and library-opening helper for Libris CLI commands.
# ABOUTME: Provides --db, --root, --relaxed/--strict, and --verbose for every command.

import logging
from collections.abc import Callable
from pathlib import Path
from typing import Any

import click
from rich.logging import RichHandler

from libris.db.catalog import LibraryCatalog
from libris.db.connection import DEFAULT_BOOKS_ROOT, DEFAULT_DB_PATH, Durability, open_library

db_option = click.option(
    "--db",
    "db_path",
    type=click.Path(path_type=Path),
    default=None,
    envvar="LIBRIS_DB",
    help=f"Path to library database (default: {DEFAULT_DB_PATH})",
)

root_option = click.option(
    "--root",
    "books_root",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    envvar="LIBRIS_ROOT",
    help=f"Directory holding the library's book files (default: {DEFAULT_BOOKS_ROOT})",
)

durability_option = click.option(
    "--relaxed/--strict",
    "relaxed",
    default=False,
    help="Skip fsync on commit. Faster, but a crash can lose recent imports.",
)

verbose_option = click.option(
    "-v",
    "--verbose",
    is_flag=True,
    default=False,
    help="Log what the library is doing.",
)


def library_options(func: Callable[..., Any]) -> Callable[..., Any]:
    """Apply the options every library command shares."""
    for option in (verbose_option, durability_option, root_option, db_option):
        func = option(func)
    return func


def open_catalog(
    db_path: Path | None,
    books_root: Path | None,
    relaxed: bool,
    verbose: bool,
) -> LibraryCatalog:
    """Configure logging and open the catalog the shared options point at."""
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(message)s",
            handlers=[RichHandler(show_path=False)],
        )
    db_path = db_path or DEFAULT_DB_PATH
    conn = open_library(
        db_path,
        durability=Durability.RELAXED if relaxed else Durability.STRICT,
    )
    return LibraryCatalog(conn, books_root or DEFAULT_BOOKS_ROOT, db_path=db_path)
