# ABOUTME: Public API for the Libris catalog database layer.
# ABOUTME: Exports connection management, the catalog facade, errors, and data types.

from libris.db.catalog import LibraryCatalog
from libris.db.connection import (
    DEFAULT_BOOKS_ROOT,
    DEFAULT_DB_PATH,
    Durability,
    create_library,
    open_library,
    transaction,
)
from libris.db.errors import (
    ConversionError,
    DuplicateBookError,
    IndexConsistencyError,
    LibraryError,
    MalformedBookError,
    PlacementError,
    StoreError,
)
from libris.db.hashing import compute_file_hash
from libris.db.mapping import Book, BookFile

__all__ = [
    "DEFAULT_BOOKS_ROOT",
    "DEFAULT_DB_PATH",
    "Book",
    "BookFile",
    "ConversionError",
    "DuplicateBookError",
    "Durability",
    "IndexConsistencyError",
    "LibraryCatalog",
    "LibraryError",
    "MalformedBookError",
    "PlacementError",
    "StoreError",
    "compute_file_hash",
    "create_library",
    "open_library",
    "transaction",
]
