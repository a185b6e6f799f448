# ABOUTME: Identity resolution for books: title plus the exact, ordered author list.
# ABOUTME: Decides whether an imported file belongs to an existing book or a new one.

import logging
import sqlite3
from collections.abc import Sequence

from libris.db.hydrate import authors_by_book_ids

logger = logging.getLogger(__name__)


def find_book_id(
    conn: sqlite3.Connection, title: str, authors: Sequence[str]
) -> tuple[int | None, bool]:
    """Find the book with this exact title and author sequence.

    Titles match case-sensitively. Author lists must be equal element for
    element, so ``["A", "B"]`` and ``["B", "A"]`` are different books.
    Candidates are tried in ascending id order.

    Returns:
        ``(book_id, True)`` for the first match, ``(None, False)`` otherwise.
    """
    cursor = conn.execute("SELECT id FROM books WHERE title = ? ORDER BY id", (title,))
    candidates = [row[0] for row in cursor]
    if not candidates:
        return None, False

    wanted = list(authors)
    author_map = authors_by_book_ids(conn, candidates)
    for book_id in candidates:
        if author_map.get(book_id, []) == wanted:
            logger.debug("Resolved %r by %s to existing book %d", title, wanted, book_id)
            return book_id, True

    logger.debug("No existing book for %r by %s among %d candidate(s)", title, wanted, len(candidates))
    return None, False
