# ABOUTME: Idempotent creation of name-keyed authors and tags and their link rows.
# ABOUTME: Looks a name up first, inserts on a miss, and ignores links that already exist.

import sqlite3


def _upsert_name(conn: sqlite3.Connection, table: str, name: str) -> int:
    """Return the id of the row named ``name`` in ``table``, creating it if needed.

    A concurrent insert of the same name surfaces as a uniqueness violation;
    that means the row now exists, so it is looked up again.
    """
    row = conn.execute(f"SELECT id FROM {table} WHERE name = ?", (name,)).fetchone()
    if row is not None:
        return row[0]

    try:
        cursor = conn.execute(f"INSERT INTO {table} (name) VALUES (?)", (name,))
    except sqlite3.IntegrityError:
        row = conn.execute(f"SELECT id FROM {table} WHERE name = ?", (name,)).fetchone()
        if row is None:
            raise
        return row[0]
    return cursor.lastrowid  # type: ignore[return-value]


def upsert_author(conn: sqlite3.Connection, name: str) -> int:
    """Return the id of the author named ``name``, creating the author if needed."""
    return _upsert_name(conn, "authors", name)


def upsert_tag(conn: sqlite3.Connection, name: str) -> int:
    """Return the id of the tag named ``name``, creating the tag if needed."""
    return _upsert_name(conn, "tags", name)


def link_author(conn: sqlite3.Connection, book_id: int, name: str) -> int:
    """Attach an author to a book. Linking the same author twice is a no-op.

    Returns:
        The author's id.
    """
    author_id = upsert_author(conn, name)
    conn.execute(
        "INSERT OR IGNORE INTO books_authors (book_id, author_id) VALUES (?, ?)",
        (book_id, author_id),
    )
    return author_id


def link_tag(conn: sqlite3.Connection, file_id: int, name: str) -> int:
    """Attach a tag to a file. Linking the same tag twice is a no-op.

    Returns:
        The tag's id.
    """
    tag_id = upsert_tag(conn, name)
    conn.execute(
        "INSERT OR IGNORE INTO files_tags (file_id, tag_id) VALUES (?, ?)",
        (file_id, tag_id),
    )
    return tag_id
