# ABOUTME: Read side of the Libris catalog: full-text search, paging, and bulk hydration.
# ABOUTME: LibraryCatalog binds a SQLite connection to the managed books root directory.

import logging
import sqlite3
from pathlib import Path

from libris.db.connection import transaction
from libris.db.errors import StoreError
from libris.db.hydrate import books_by_id, files_by_id
from libris.db.mapping import Book, BookFile

logger = logging.getLogger(__name__)


class LibraryCatalog:
    """Wraps a sqlite3 connection and the directory that holds the book files."""

    def __init__(
        self,
        conn: sqlite3.Connection,
        books_root: Path,
        *,
        db_path: Path | None = None,
    ) -> None:
        self.conn = conn
        self.books_root = books_root
        self.db_path = db_path

    @property
    def cache_dir(self) -> Path:
        """Directory for converted files, next to the database file."""
        if self.db_path is None:
            return self.books_root.parent / "cache"
        return self.db_path.parent / "cache"

    def find_file_by_hash(self, file_hash: str) -> int | None:
        """Return the id of the file with this content hash, if cataloged."""
        try:
            row = self.conn.execute("SELECT id FROM files WHERE hash = ?", (file_hash,)).fetchone()
        except sqlite3.Error as exc:
            raise StoreError(f"Searching for file by hash {file_hash}: {exc}") from exc
        return row[0] if row else None

    def search(self, terms: str) -> list[Book]:
        """Return every book matching ``terms``. See :meth:`search_paged`."""
        books, _ = self.search_paged(terms, 0, 0, 0)
        return books

    def search_paged(
        self,
        terms: str,
        offset: int,
        limit: int,
        more_results_cap: int,
    ) -> tuple[list[Book], int]:
        """Search the catalog and hydrate one page of matching books.

        All fields are searched by default; ``field:terms`` limits a term to
        one field (author, title, series, extension, tags, filename, source).
        ``terms`` is handed to FTS5 verbatim.

        Rather than counting every match, up to ``more_results_cap`` extra ids
        past the page are fetched and counted.

        Args:
            terms: FTS5 query string, e.g. ``author:King title:Shining``.
            offset: Number of matches to skip.
            limit: Page size; 0 returns every match.
            more_results_cap: Largest "more results" count worth computing.

        Returns:
            ``(books, more_results)`` where ``more_results`` is the number of
            matches past this page, capped at ``more_results_cap``.
        """
        if offset < 0 or limit < 0 or more_results_cap < 0:
            raise ValueError("offset, limit and more_results_cap must not be negative")

        if limit == 0:
            query = "SELECT rowid FROM books_fts WHERE books_fts MATCH ? ORDER BY rowid"
            params: tuple[object, ...] = (terms,)
        else:
            query = (
                "SELECT rowid FROM books_fts WHERE books_fts MATCH ? "
                "ORDER BY rowid LIMIT ? OFFSET ?"
            )
            params = (terms, limit + more_results_cap, offset)

        try:
            ids = [row[0] for row in self.conn.execute(query, params)]
        except sqlite3.Error as exc:
            raise StoreError(f"Querying db for search terms {terms!r}") from exc

        more_results = 0
        if limit > 0 and len(ids) > limit:
            more_results = len(ids) - limit
            ids = ids[:limit]

        logger.debug("Search %r matched %d id(s), %d more", terms, len(ids), more_results)
        return self.get_books_by_id(ids), more_results

    def get_books_by_id(self, ids: list[int]) -> list[Book]:
        """Load books with their authors, files, and tags, in the order given."""
        if not ids:
            return []
        try:
            with transaction(self.conn):
                return books_by_id(self.conn, ids)
        except sqlite3.Error as exc:
            raise StoreError("Fetching books from database by ID") from exc

    def get_book(self, book_id: int) -> Book | None:
        """Load a single book, or None if it doesn't exist."""
        books = self.get_books_by_id([book_id])
        return books[0] if books else None

    def get_files_by_id(self, ids: list[int]) -> list[BookFile]:
        """Load files with their tags, ordered by id."""
        if not ids:
            return []
        try:
            with transaction(self.conn):
                return files_by_id(self.conn, ids)
        except sqlite3.Error as exc:
            raise StoreError("Fetching files from database by ID") from exc
