# ABOUTME: Unit tests for identity resolution by title and ordered author list.
# ABOUTME: Author order is part of a book's identity; titles compare case-sensitively.

import sqlite3
from collections.abc import Iterator
from pathlib import Path

import pytest

from libris.db.connection import open_library
from libris.db.entities import link_author
from libris.db.resolver import find_book_id


@pytest.fixture()
def conn(tmp_path: Path) -> Iterator[sqlite3.Connection]:
    conn = open_library(tmp_path / "resolver.db")
    conn.execute("INSERT INTO books (id, title) VALUES (1, 'Good Omens')")
    link_author(conn, 1, "Terry Pratchett")
    link_author(conn, 1, "Neil Gaiman")
    conn.execute("INSERT INTO books (id, title) VALUES (2, 'Good Omens')")
    link_author(conn, 2, "Neil Gaiman")
    link_author(conn, 2, "Terry Pratchett")
    conn.execute("INSERT INTO books (id, title) VALUES (3, 'Beowulf')")
    yield conn
    conn.close()


class TestFindBookId:
    """Tests for find_book_id."""

    def test_exact_match(self, conn: sqlite3.Connection) -> None:
        assert find_book_id(conn, "Good Omens", ["Terry Pratchett", "Neil Gaiman"]) == (1, True)

    def test_author_order_distinguishes_books(self, conn: sqlite3.Connection) -> None:
        assert find_book_id(conn, "Good Omens", ["Neil Gaiman", "Terry Pratchett"]) == (2, True)

    def test_author_subset_does_not_match(self, conn: sqlite3.Connection) -> None:
        assert find_book_id(conn, "Good Omens", ["Terry Pratchett"]) == (None, False)

    def test_title_is_case_sensitive(self, conn: sqlite3.Connection) -> None:
        assert find_book_id(conn, "good omens", ["Terry Pratchett", "Neil Gaiman"]) == (None, False)

    def test_book_without_authors(self, conn: sqlite3.Connection) -> None:
        assert find_book_id(conn, "Beowulf", []) == (3, True)
        assert find_book_id(conn, "Beowulf", ["Anonymous"]) == (None, False)

    def test_unknown_title(self, conn: sqlite3.Connection) -> None:
        assert find_book_id(conn, "Dune", ["Frank Herbert"]) == (None, False)
