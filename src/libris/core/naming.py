# ABOUTME: Filename conventions: parsing title/author/series out of a file name, and
# ABOUTME: rendering the relative path a book file is stored under in the library.

import re
from dataclasses import dataclass, field
from pathlib import Path

from libris.db.mapping import Book, BookFile

DEFAULT_TEMPLATE = "{author}/{title} - {authors}.{extension}"

UNKNOWN_AUTHOR = "Unknown"

# Tried in order; the first match wins. The name is stored on the file as regexp_name.
NAMING_PATTERNS: tuple[tuple[str, re.Pattern[str]], ...] = (
    (
        "author - [series] - title",
        re.compile(r"^(?P<author>.+?) - \[(?P<series>[^\]]+)\] - (?P<title>.+)$"),
    ),
    ("author - title", re.compile(r"^(?P<author>.+?) - (?P<title>.+)$")),
    ("title", re.compile(r"^(?P<title>.+)$")),
)

# Trailing Calibre book id like " (2739)"
_CALIBRE_ID_RE = re.compile(r"\s+\(\d+\)$")
_UNSAFE_RE = re.compile(r'[\\/:*?"<>|\x00-\x1f]')


@dataclass
class ParsedName:
    """Metadata recovered from a file name, and the pattern that recovered it."""

    title: str
    authors: list[str] = field(default_factory=list)
    series: str = ""
    pattern: str = ""


def parse_filename(path: Path) -> ParsedName | None:
    """Parse a file's stem against NAMING_PATTERNS.

    ``Ursula K. Le Guin - [Earthsea] - A Wizard of Earthsea.epub`` yields the
    author, series, and title. Several authors are written ``A & B``.

    Returns:
        The first match, or None if the stem is empty.
    """
    stem = _CALIBRE_ID_RE.sub("", path.stem.replace("_", " ")).strip()
    for name, pattern in NAMING_PATTERNS:
        match = pattern.match(stem)
        if match is None:
            continue
        groups = match.groupdict()
        authors = [a.strip() for a in (groups.get("author") or "").split(" & ") if a.strip()]
        return ParsedName(
            title=groups["title"].strip(),
            authors=authors,
            series=(groups.get("series") or "").strip(),
            pattern=name,
        )
    return None


def _safe(value: str) -> str:
    value = _UNSAFE_RE.sub("_", value).strip()
    # "." and ".." would be read as path components
    if value in ("", ".", ".."):
        return "_"
    return value


def destination_for(book: Book, bf: BookFile | None = None) -> str:
    """Render the path, relative to the books root, where a file of ``book`` is stored.

    Uses the file's template_override if it has one, else DEFAULT_TEMPLATE.
    Available fields: author (first author), authors, title, series, extension.

    Raises:
        KeyError: If the template names an unknown field.
    """
    bf = bf or book.files[0]
    template = bf.template_override or DEFAULT_TEMPLATE
    fields = {
        "author": _safe(book.authors[0]) if book.authors else UNKNOWN_AUTHOR,
        "authors": _safe(book.author) if book.authors else UNKNOWN_AUTHOR,
        "title": _safe(book.title),
        "series": _safe(book.series) if book.series else "",
        "extension": bf.extension.lstrip("."),
    }
    return template.format(**fields)
