# ABOUTME: Bulk reconstruction of Book and BookFile graphs from flat SQLite rows.
# ABOUTME: Fetches parents and children with one query each, then groups children by parent id.

import sqlite3
from collections import defaultdict
from collections.abc import Iterable, Sequence

from libris.db.mapping import Book, BookFile, row_to_book, row_to_file


def join_ids(ids: Iterable[int], sep: str = ",") -> str:
    """Render integer ids as a literal list for an ``IN (...)`` clause.

    SQLite caps the number of bound parameters per statement, so bulk lookups
    inline the ids instead. Each id must be a real int; anything else would be
    spliced into SQL, so it is rejected.

    Raises:
        TypeError: If any id is not an int (bools included).
    """
    parts = []
    for item in ids:
        if not isinstance(item, int) or isinstance(item, bool):
            raise TypeError(f"Refusing to inline non-integer id {item!r} into SQL")
        parts.append(str(item))
    return sep.join(parts)


def authors_by_book_ids(conn: sqlite3.Connection, ids: Sequence[int]) -> dict[int, list[str]]:
    """Map each book id to its author names, in the order they were linked."""
    authors: dict[int, list[str]] = defaultdict(list)
    if not ids:
        return authors

    cursor = conn.execute(
        "SELECT ba.book_id, a.name FROM books_authors ba "
        "JOIN authors a ON ba.author_id = a.id "
        f"WHERE ba.book_id IN ({join_ids(ids)}) "
        "ORDER BY ba.id"
    )
    for book_id, name in cursor:
        authors[book_id].append(name)
    return authors


def tags_by_file_ids(conn: sqlite3.Connection, ids: Sequence[int]) -> dict[int, list[str]]:
    """Map each file id to its tag names, in the order they were linked."""
    tags: dict[int, list[str]] = defaultdict(list)
    if not ids:
        return tags

    cursor = conn.execute(
        "SELECT ft.file_id, t.name FROM files_tags ft "
        "JOIN tags t ON ft.tag_id = t.id "
        f"WHERE ft.file_id IN ({join_ids(ids)}) "
        "ORDER BY ft.id"
    )
    for file_id, name in cursor:
        tags[file_id].append(name)
    return tags


def _attach_tags(conn: sqlite3.Connection, files: list[BookFile]) -> list[BookFile]:
    tag_map = tags_by_file_ids(conn, [bf.id for bf in files if bf.id is not None])
    for bf in files:
        bf.tags = list(tag_map.get(bf.id, []))
    return files


def files_by_id(conn: sqlite3.Connection, ids: Sequence[int]) -> list[BookFile]:
    """Load files (with their tags) by file id, ordered by id."""
    if not ids:
        return []
    cursor = conn.execute(f"SELECT * FROM files WHERE id IN ({join_ids(ids)}) ORDER BY id")
    return _attach_tags(conn, [row_to_file(row) for row in cursor])


def files_by_book_ids(conn: sqlite3.Connection, ids: Sequence[int]) -> dict[int, list[BookFile]]:
    """Map each book id to its files (with tags), ordered by file id."""
    files: dict[int, list[BookFile]] = defaultdict(list)
    if not ids:
        return files

    cursor = conn.execute(
        f"SELECT * FROM files WHERE book_id IN ({join_ids(ids)}) ORDER BY id"
    )
    rows = cursor.fetchall()
    loaded = _attach_tags(conn, [row_to_file(row) for row in rows])
    for row, bf in zip(rows, loaded, strict=True):
        files[row["book_id"]].append(bf)
    return files


def books_by_id(conn: sqlite3.Connection, ids: Sequence[int]) -> list[Book]:
    """Load books with authors, files, and tags, in the order of ``ids``.

    Loading happens in two phases: flat rows first, indexed by id, then
    children are attached by looking their parent id up in that index.
    Ids with no matching book are skipped.
    """
    if not ids:
        return []

    cursor = conn.execute(f"SELECT id, series, title FROM books WHERE id IN ({join_ids(ids)})")
    index: dict[int, Book] = {row["id"]: row_to_book(row) for row in cursor}

    author_map = authors_by_book_ids(conn, list(index))
    file_map = files_by_book_ids(conn, list(index))
    for book_id, book in index.items():
        book.authors = list(author_map.get(book_id, []))
        book.files = list(file_map.get(book_id, []))

    return [index[book_id] for book_id in dict.fromkeys(ids) if book_id in index]
