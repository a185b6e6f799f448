# ABOUTME: Maintains the one-per-book FTS5 search document.
# ABOUTME: Creates the document for a new book, or appends a new file's fields to an existing one.

import logging
import sqlite3

from libris.db.errors import IndexConsistencyError, MalformedBookError
from libris.db.mapping import Book

logger = logging.getLogger(__name__)


def index_book(conn: sqlite3.Connection, book: Book, *, is_new: bool) -> None:
    """Write ``book``'s single file into the search index.

    A new book gets a fresh document. For an existing book, the file's tags,
    extension, and source are appended to the stored text, space separated.
    Tokens already present are appended again; repeated tags are kept.

    Raises:
        MalformedBookError: If the book does not carry exactly one file.
        IndexConsistencyError: If an existing book has no search document.
    """
    if len(book.files) != 1:
        raise MalformedBookError("Book to index must contain only one file")
    if book.id is None:
        raise MalformedBookError("Book to index has no id")
    bf = book.files[0]
    joined_tags = " ".join(bf.tags)

    if is_new:
        conn.execute(
            "INSERT INTO books_fts (rowid, author, series, title, extension, tags, source) "
            "VALUES (?, ?, ?, ?, ?, ?, ?)",
            (book.id, book.author, book.series, book.title, bf.extension, joined_tags, bf.source),
        )
        logger.debug("Indexed new book %d", book.id)
        return

    row = conn.execute(
        "SELECT tags, extension, source FROM books_fts WHERE rowid = ?", (book.id,)
    ).fetchone()
    if row is None:
        raise IndexConsistencyError(f"Existing book {book.id} not found in search index")

    conn.execute(
        "UPDATE books_fts SET tags = ?, extension = ?, source = ? WHERE rowid = ?",
        (
            f"{row['tags'] or ''} {joined_tags}",
            f"{row['extension'] or ''} {bf.extension}",
            f"{row['source'] or ''} {bf.source}",
            book.id,
        ),
    )
    logger.debug("Merged file %s into search document for book %d", bf.hash, book.id)
