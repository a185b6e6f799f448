# ABOUTME: SQLite connection management for the Libris catalog.
# ABOUTME: Opens or creates the database, applies durability settings, and scopes transactions.

import logging
import sqlite3
from collections.abc import Iterator
from contextlib import contextmanager
from enum import Enum
from pathlib import Path

from libris.db.errors import StoreError
from libris.db.schema import SCHEMA_V1

logger = logging.getLogger(__name__)

DEFAULT_DB_PATH = Path.home() / ".libris" / "library.db"
DEFAULT_BOOKS_ROOT = Path.home() / ".libris" / "books"


class Durability(str, Enum):
    """How hard SQLite works to get each commit onto disk.

    RELAXED turns off fsync entirely. Imports get much faster, but a power
    failure or OS crash can lose recently committed books.
    """

    RELAXED = "relaxed"
    STRICT = "strict"


_SYNCHRONOUS = {
    Durability.RELAXED: "OFF",
    Durability.STRICT: "FULL",
}


def _schema_exists(conn: sqlite3.Connection) -> bool:
    """Check if the schema has already been applied."""
    cursor = conn.execute(
        "SELECT name FROM sqlite_master WHERE type='table' AND name='schema_version'"
    )
    return cursor.fetchone() is not None


def _connect(db_path: Path, durability: Durability, timeout: float = 5.0) -> sqlite3.Connection:
    # isolation_level=None: transactions are opened explicitly via transaction()
    conn = sqlite3.connect(str(db_path), timeout=timeout, isolation_level=None)
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA journal_mode=WAL")
    conn.execute("PRAGMA foreign_keys=ON")
    conn.execute(f"PRAGMA synchronous={_SYNCHRONOUS[Durability(durability)]}")
    return conn


def create_library(path: Path) -> None:
    """Initialize a new, empty library in the given file.

    Raises:
        FileExistsError: If a library schema is already present in the file.
    """
    logger.info("Creating library in %s", path)
    path.parent.mkdir(parents=True, exist_ok=True)
    conn = _connect(path, Durability.STRICT)
    try:
        if _schema_exists(conn):
            raise FileExistsError(f"Library already exists in {path}")
        conn.executescript(SCHEMA_V1)
    finally:
        conn.close()
    logger.info("Library created in %s", path)


def open_library(
    path: Path | None = None,
    *,
    durability: Durability = Durability.STRICT,
    timeout: float = 5.0,
) -> sqlite3.Connection:
    """Open or create the Libris catalog database.

    Creates the database file and parent directories if they don't exist
    and applies the schema on first use. The returned connection runs in
    autocommit mode; group statements with :func:`transaction`.

    Args:
        path: Path to the database file. Defaults to ~/.libris/library.db.
        durability: Synchronous mode for this connection.
        timeout: Seconds to wait for another writer's lock before giving up.

    Returns:
        A configured sqlite3.Connection with sqlite3.Row rows.
    """
    db_path = path or DEFAULT_DB_PATH
    db_path.parent.mkdir(parents=True, exist_ok=True)

    conn = _connect(db_path, durability, timeout)
    if not _schema_exists(conn):
        conn.executescript(SCHEMA_V1)

    return conn


@contextmanager
def transaction(conn: sqlite3.Connection, *, immediate: bool = False) -> Iterator[sqlite3.Connection]:
    """Run the enclosed statements as one atomic unit.

    Commits when the block exits normally and rolls back on any exception,
    which is then re-raised. ``immediate`` takes the write lock up front so
    concurrent writers queue instead of failing mid-transaction.

    Raises:
        StoreError: If the transaction cannot be opened (e.g. the database
            stays locked past the connection timeout) or committed.
    """
    try:
        conn.execute("BEGIN IMMEDIATE" if immediate else "BEGIN")
    except sqlite3.Error as exc:
        raise StoreError(f"Begin transaction: {exc}") from exc
    try:
        yield conn
    except BaseException:
        # SQLite may already have rolled back on its own (e.g. SQLITE_FULL)
        if conn.in_transaction:
            conn.execute("ROLLBACK")
        raise
    try:
        conn.execute("COMMIT")
    except sqlite3.Error as exc:
        if conn.in_transaction:
            conn.execute("ROLLBACK")
        raise StoreError(f"Commit transaction: {exc}") from exc
