# ABOUTME: Converts cataloged files to EPUB with an external converter (Calibre's ebook-convert).
# ABOUTME: Converted copies live in the cache directory, named by the source file's hash.

import logging
import subprocess
from pathlib import Path

from libris.db.catalog import LibraryCatalog
from libris.db.errors import ConversionError
from libris.db.mapping import BookFile

logger = logging.getLogger(__name__)

DEFAULT_CONVERTER = "ebook-convert"


def cached_path(catalog: LibraryCatalog, bf: BookFile, extension: str = "epub") -> Path:
    """Where the converted copy of ``bf`` is (or will be) cached."""
    return catalog.cache_dir / f"{bf.hash}.{extension}"


def convert_to_epub(
    catalog: LibraryCatalog,
    bf: BookFile,
    *,
    command: str = DEFAULT_CONVERTER,
) -> Path:
    """Convert a stored file to EPUB and cache the result.

    The converter is called as ``command <source> <destination>``; only its
    exit status is checked.

    Returns:
        Path of the converted file.

    Raises:
        ConversionError: If the converter is missing or exits non-zero.
    """
    source = catalog.books_root / bf.current_filename
    destination = cached_path(catalog, bf)
    destination.parent.mkdir(parents=True, exist_ok=True)

    try:
        subprocess.run(
            [command, str(source), str(destination)],
            check=True,
            stdout=subprocess.DEVNULL,
            stderr=subprocess.DEVNULL,
        )
    except FileNotFoundError as exc:
        raise ConversionError(f"Converter {command!r} not found") from exc
    except subprocess.CalledProcessError as exc:
        raise ConversionError(
            f"Converting {source} failed with exit status {exc.returncode}"
        ) from exc

    logger.info("Converted %s to %s", source, destination)
    return destination
