# ABOUTME: Import pipeline for cataloging book files into the Libris library.
# ABOUTME: Each file is deduplicated, resolved, linked, indexed, and placed in one transaction.

import copy
import logging
import sqlite3
from collections.abc import Iterable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field
from pathlib import Path

from libris.core.naming import destination_for, parse_filename
from libris.core.placement import move_or_copy, unique_name
from libris.db.catalog import LibraryCatalog
from libris.db.connection import transaction
from libris.db.entities import link_author, link_tag
from libris.db.errors import DuplicateBookError, LibraryError, MalformedBookError, StoreError
from libris.db.hashing import fingerprint
from libris.db.mapping import Book, BookFile, file_to_row
from libris.db.resolver import find_book_id
from libris.db.search_index import index_book

logger = logging.getLogger(__name__)


@dataclass
class ImportResult:
    """Summary of a batch import."""

    added: int = 0
    skipped: int = 0
    errors: int = 0
    imported: list[Book] = field(default_factory=list)
    error_details: list[tuple[Path, str]] = field(default_factory=list)


@contextmanager
def _step(context: str) -> Iterator[None]:
    """Re-raise database failures as StoreError, prefixed with what was being done."""
    try:
        yield
    except sqlite3.Error as exc:
        raise StoreError(f"{context}: {exc}") from exc


def _insert_file(conn: sqlite3.Connection, bf: BookFile, book_id: int) -> int:
    row = file_to_row(bf, book_id)
    columns = ", ".join(row.keys())
    placeholders = ", ".join("?" for _ in row)
    cursor = conn.execute(
        f"INSERT INTO files ({columns}) VALUES ({placeholders})",
        list(row.values()),
    )
    return cursor.lastrowid  # type: ignore[return-value]


def import_book(catalog: LibraryCatalog, book: Book, *, move: bool = False) -> Book:
    """Add a book file to the library.

    The file at ``book.files[0].original_filename`` is moved or copied to
    ``current_filename`` under the books root. Catalog writes are committed
    only once the file is in place; any failure before that rolls every
    write back. A file that was already placed is not removed again.

    The file joins an existing book when one has the same title and the same
    authors in the same order; otherwise a new book is created, and its
    author order becomes part of its identity. A name listed more than once
    counts only at its first position.

    Args:
        catalog: The catalog to import into.
        book: Title, ordered authors, series, and exactly one file.
        move: Move the file instead of copying it.

    Returns:
        A copy of ``book`` with the book and file ids filled in.

    Raises:
        MalformedBookError: If the book doesn't have exactly one file or has no title.
        DuplicateBookError: If a file with the same hash is already cataloged.
        StoreError: If a database statement fails, or the transaction cannot
            be opened or committed.
        PlacementError: If the file cannot be moved or copied.
    """
    if len(book.files) != 1:
        raise MalformedBookError("Book to import must contain only one file")
    if not book.title:
        raise MalformedBookError("Book to import must have a title")

    book = copy.deepcopy(book)
    # Links are unique per (book, author), so a repeated name is stored once
    book.authors = list(dict.fromkeys(book.authors))
    bf = book.files[0]
    conn = catalog.conn

    with transaction(conn, immediate=True):
        file_id = catalog.find_file_by_hash(bf.hash)
        if file_id is not None:
            raise DuplicateBookError(file_id, bf.hash)

        with _step("Find existing book"):
            existing_id, found = find_book_id(conn, book.title, book.authors)

        if found:
            book.id = existing_id
        else:
            with _step("Insert new book"):
                cursor = conn.execute(
                    "INSERT INTO books (series, title) VALUES (?, ?)",
                    (book.series, book.title),
                )
            book.id = cursor.lastrowid
            for author in book.authors:
                with _step(f"Inserting author {author}"):
                    link_author(conn, book.id, author)  # type: ignore[arg-type]

        with _step("Inserting book file into the db"):
            bf.id = _insert_file(conn, bf, book.id)  # type: ignore[arg-type]

        for tag in bf.tags:
            with _step(f"Inserting tag {tag}"):
                link_tag(conn, bf.id, tag)

        with _step("Index book in search"):
            index_book(conn, book, is_new=not found)

        move_or_copy(
            Path(bf.original_filename),
            catalog.books_root / bf.current_filename,
            move=move,
        )

    logger.info("Imported book: %s: %s, ID = %d", book.author, book.title, book.id)
    return book


def book_from_path(
    path: Path,
    books_root: Path,
    *,
    tags: Iterable[str] = (),
    source: str = "",
) -> Book:
    """Build an importable Book for a file from its name and contents.

    Title, authors, and series come from the file name. The stored name is
    rendered from the default template and made unique under books_root.

    Raises:
        MalformedBookError: If no title can be recovered from the file name.
        FileNotFoundError: If the file does not exist.
    """
    parsed = parse_filename(path)
    if parsed is None:
        raise MalformedBookError(f"Cannot read a title from {path.name}")

    fp = fingerprint(path)
    bf = BookFile(
        extension=path.suffix.lstrip(".").lower(),
        original_filename=str(path),
        current_filename="",
        file_size=fp.size,
        file_mtime=fp.mtime,
        hash=fp.hash,
        regexp_name=parsed.pattern,
        source=source,
        tags=list(tags),
    )
    book = Book(title=parsed.title, authors=parsed.authors, series=parsed.series, files=[bf])
    destination = unique_name(books_root / destination_for(book))
    bf.current_filename = destination.relative_to(books_root).as_posix()
    return book


def import_paths(
    paths: list[Path],
    catalog: LibraryCatalog,
    *,
    move: bool = False,
    tags: Iterable[str] = (),
    source: str = "",
) -> ImportResult:
    """Import files into the library one transaction at a time.

    Files whose hash is already cataloged are skipped. Unreadable files and
    failed imports are recorded as errors; they never stop the batch.

    Args:
        paths: Files to import.
        catalog: The library catalog to add books to.
        move: Move files into the library instead of copying them.
        tags: Tags attached to every imported file.
        source: Where the files came from, recorded on every imported file.

    Returns:
        ImportResult with counts of added, skipped, and errored files.
    """
    result = ImportResult()
    tags = list(tags)

    for path in paths:
        try:
            book = book_from_path(path, catalog.books_root, tags=tags, source=source)
        except (OSError, MalformedBookError) as exc:
            result.errors += 1
            result.error_details.append((path, str(exc)))
            continue

        try:
            imported = import_book(catalog, book, move=move)
        except DuplicateBookError:
            result.skipped += 1
            continue
        except LibraryError as exc:
            logger.warning("Import of %s failed: %s", path, exc)
            result.errors += 1
            result.error_details.append((path, str(exc)))
            continue

        result.added += 1
        result.imported.append(imported)

    return result
