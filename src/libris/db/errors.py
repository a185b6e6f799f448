# ABOUTME: Exception hierarchy for the Libris catalog.
# ABOUTME: Distinguishes duplicate content, malformed input, store and filesystem failures.


class LibraryError(Exception):
    """Base class for all catalog errors."""


class DuplicateBookError(LibraryError):
    """Raised when importing a file whose content hash is already cataloged."""

    def __init__(self, file_id: int, file_hash: str) -> None:
        super().__init__(f"A duplicate book already exists with id {file_id} (hash {file_hash})")
        self.file_id = file_id
        self.file_hash = file_hash


class MalformedBookError(LibraryError, ValueError):
    """Raised when a book handed to the importer cannot be imported as given."""


class IndexConsistencyError(LibraryError):
    """Raised when the search index disagrees with the catalog tables."""


class StoreError(LibraryError):
    """Raised when a statement against the catalog database fails."""


class PlacementError(LibraryError):
    """Raised when a book file cannot be moved or copied into the library."""


class ConversionError(LibraryError):
    """Raised when the external format converter fails."""
