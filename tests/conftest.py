# ABOUTME: Shared pytest fixtures for Libris tests.
# ABOUTME: Provides a temporary catalog, its books root, and a factory for importable books.

import itertools
from collections.abc import Callable, Iterator, Sequence
from pathlib import Path

import pytest

from libris.db.catalog import LibraryCatalog
from libris.db.connection import open_library
from libris.db.hashing import fingerprint
from libris.db.mapping import Book, BookFile

MakeBook = Callable[..., Book]


@pytest.fixture
def books_root(tmp_path: Path) -> Path:
    """Directory the catalog places imported files under (created lazily)."""
    return tmp_path / "books"


@pytest.fixture
def catalog(tmp_path: Path, books_root: Path) -> Iterator[LibraryCatalog]:
    """A LibraryCatalog backed by a fresh database file."""
    db_path = tmp_path / "library.db"
    conn = open_library(db_path)
    yield LibraryCatalog(conn, books_root, db_path=db_path)
    conn.close()


@pytest.fixture
def incoming_dir(tmp_path: Path) -> Path:
    """Directory holding files waiting to be imported."""
    path = tmp_path / "incoming"
    path.mkdir()
    return path


@pytest.fixture
def make_book(incoming_dir: Path) -> MakeBook:
    """Factory for a single-file Book backed by a real file on disk.

    Every call writes distinct bytes unless ``content`` is given, so hashes
    only collide when a test asks for it.
    """
    counter = itertools.count(1)

    def _make(
        title: str,
        authors: Sequence[str] = (),
        *,
        series: str = "",
        tags: Sequence[str] = (),
        extension: str = "epub",
        source: str = "",
        content: bytes | None = None,
    ) -> Book:
        n = next(counter)
        src = incoming_dir / f"file{n}.{extension}"
        src.write_bytes(content if content is not None else f"{title} #{n}".encode())
        fp = fingerprint(src)
        bf = BookFile(
            extension=extension,
            original_filename=str(src),
            current_filename=f"{title}/{title} {n}.{extension}",
            file_size=fp.size,
            file_mtime=fp.mtime,
            hash=fp.hash,
            regexp_name="title",
            source=source,
            tags=list(tags),
        )
        return Book(title=title, authors=list(authors), series=series, files=[bf])

    return _make
