# ABOUTME: Content hashing and stat fingerprints for deduplicating imported files.
# ABOUTME: The SHA-256 digest is the sole identity of a file across the whole catalog.

import hashlib
from dataclasses import dataclass
from datetime import UTC, datetime
from pathlib import Path

_CHUNK_SIZE = 1 << 16


@dataclass(frozen=True)
class FileFingerprint:
    """What the catalog records about a file's bytes before importing it."""

    hash: str
    size: int
    mtime: str


def compute_file_hash(path: Path) -> str:
    """Return the lowercase hex SHA-256 digest of a file's contents.

    Raises:
        FileNotFoundError: If the file does not exist.
    """
    hasher = hashlib.sha256()
    with open(path, "rb") as f:
        for chunk in iter(lambda: f.read(_CHUNK_SIZE), b""):
            hasher.update(chunk)
    return hasher.hexdigest()


def fingerprint(path: Path) -> FileFingerprint:
    """Hash a file and capture its size and modification time (UTC, ISO 8601)."""
    st = path.stat()
    mtime = datetime.fromtimestamp(st.st_mtime, tz=UTC).strftime("%Y-%m-%dT%H:%M:%S")
    return FileFingerprint(hash=compute_file_hash(path), size=st.st_size, mtime=mtime)
