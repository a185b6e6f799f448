# ABOUTME: Unit tests for maintaining the per-book FTS5 search document.
# ABOUTME: Validates document creation, additive merging, and consistency errors.

import sqlite3
from collections.abc import Iterator
from pathlib import Path

import pytest

from libris.db.connection import open_library
from libris.db.errors import IndexConsistencyError, MalformedBookError
from libris.db.mapping import Book, BookFile
from libris.db.search_index import index_book


def _file(extension: str, tags: list[str], source: str) -> BookFile:
    return BookFile(
        extension=extension,
        original_filename="in",
        current_filename="out",
        file_size=1,
        file_mtime="2020-01-01T00:00:00",
        hash=f"{extension}-{source}",
        source=source,
        tags=tags,
    )


def _doc(conn: sqlite3.Connection, rowid: int) -> sqlite3.Row:
    return conn.execute("SELECT * FROM books_fts WHERE rowid = ?", (rowid,)).fetchone()


@pytest.fixture()
def conn(tmp_path: Path) -> Iterator[sqlite3.Connection]:
    conn = open_library(tmp_path / "fts.db")
    yield conn
    conn.close()


class TestIndexBook:
    """Tests for index_book."""

    def test_new_book_creates_document(self, conn: sqlite3.Connection) -> None:
        book = Book(
            id=5,
            title="Good Omens",
            authors=["Terry Pratchett", "Neil Gaiman"],
            series="",
            files=[_file("epub", ["fantasy", "humour"], "shop")],
        )
        index_book(conn, book, is_new=True)
        doc = _doc(conn, 5)
        assert doc["author"] == "Terry Pratchett & Neil Gaiman"
        assert doc["title"] == "Good Omens"
        assert doc["extension"] == "epub"
        assert doc["tags"] == "fantasy humour"
        assert doc["source"] == "shop"

    def test_existing_book_appends_fields(self, conn: sqlite3.Connection) -> None:
        first = Book(id=5, title="Dune", authors=["Frank Herbert"], files=[_file("epub", ["scifi"], "shop")])
        index_book(conn, first, is_new=True)
        second = Book(id=5, title="Dune", authors=["Frank Herbert"], files=[_file("mobi", ["classic"], "web")])
        index_book(conn, second, is_new=False)

        doc = _doc(conn, 5)
        assert doc["extension"] == "epub mobi"
        assert doc["tags"] == "scifi classic"
        assert doc["source"] == "shop web"
        assert doc["author"] == "Frank Herbert"

    def test_repeated_tags_are_not_deduplicated(self, conn: sqlite3.Connection) -> None:
        index_book(conn, Book(id=1, title="Dune", files=[_file("epub", ["scifi"], "a")]), is_new=True)
        index_book(conn, Book(id=1, title="Dune", files=[_file("pdf", ["scifi"], "b")]), is_new=False)
        assert _doc(conn, 1)["tags"] == "scifi scifi"

    def test_missing_document_for_existing_book(self, conn: sqlite3.Connection) -> None:
        book = Book(id=9, title="Dune", files=[_file("epub", [], "")])
        with pytest.raises(IndexConsistencyError, match="9"):
            index_book(conn, book, is_new=False)

    def test_requires_exactly_one_file(self, conn: sqlite3.Connection) -> None:
        book = Book(id=1, title="Dune", files=[_file("epub", [], ""), _file("pdf", [], "")])
        with pytest.raises(MalformedBookError):
            index_book(conn, book, is_new=True)

    def test_document_is_searchable_by_field(self, conn: sqlite3.Connection) -> None:
        index_book(
            conn,
            Book(id=3, title="Dune", authors=["Frank Herbert"], files=[_file("epub", ["scifi"], "")]),
            is_new=True,
        )
        rows = conn.execute("SELECT rowid FROM books_fts WHERE books_fts MATCH 'tags:scifi'").fetchall()
        assert [r[0] for r in rows] == [3]
        rows = conn.execute("SELECT rowid FROM books_fts WHERE books_fts MATCH 'title:scifi'").fetchall()
        assert rows == []
