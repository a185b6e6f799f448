# ABOUTME: Data types for cataloged books and files, and conversion from SQLite rows.
# ABOUTME: Book and BookFile are the interchange format between import, search, and the CLI.

from dataclasses import dataclass, field
from typing import Any


@dataclass
class BookFile:
    """One physical artifact of a book.

    ``current_filename`` is relative to the library's books root. Before import,
    ``original_filename`` is the path the file is moved or copied from.
    """

    extension: str
    original_filename: str
    current_filename: str
    file_size: int
    file_mtime: str
    hash: str
    regexp_name: str = ""
    source: str = ""
    template_override: str | None = None
    tags: list[str] = field(default_factory=list)
    id: int | None = None


@dataclass
class Book:
    """A logical work, identified by its title and ordered author list."""

    title: str
    authors: list[str] = field(default_factory=list)
    series: str = ""
    files: list[BookFile] = field(default_factory=list)
    id: int | None = None

    @property
    def author(self) -> str:
        """Joined author string, as written to the search index."""
        return " & ".join(self.authors)


def row_to_book(row: Any) -> Book:
    """Convert a books row to a Book without authors or files."""
    return Book(id=row["id"], title=row["title"], series=row["series"] or "")


def row_to_file(row: Any) -> BookFile:
    """Convert a files row to a BookFile without tags."""
    return BookFile(
        id=row["id"],
        extension=row["extension"],
        original_filename=row["original_filename"],
        current_filename=row["filename"],
        file_size=row["file_size"],
        file_mtime=row["file_mtime"],
        hash=row["hash"],
        regexp_name=row["regexp_name"],
        source=row["source"] or "",
        template_override=row["template_override"],
    )


def file_to_row(bf: BookFile, book_id: int) -> dict[str, Any]:
    """Convert a BookFile to a dict suitable for INSERT into files."""
    return {
        "book_id": book_id,
        "extension": bf.extension,
        "original_filename": bf.original_filename,
        "filename": bf.current_filename,
        "file_size": bf.file_size,
        "file_mtime": bf.file_mtime,
        "hash": bf.hash,
        "regexp_name": bf.regexp_name,
        "template_override": bf.template_override,
        "source": bf.source,
    }
