# ABOUTME: Places imported files under the books root by moving or copying them.
# ABOUTME: Falls back to copy-and-delete across devices and finds collision-free names.

import logging
import shutil
from itertools import count
from pathlib import Path

from libris.db.errors import PlacementError

logger = logging.getLogger(__name__)


def copy_file(src: Path, dst: Path) -> None:
    """Copy src to dst, giving dst the modification time of src.

    A partially written dst is removed if the copy fails, unless dst was
    already there before.
    """
    existed = dst.exists()
    try:
        shutil.copy2(src, dst)
    except OSError as exc:
        if not existed:
            _cleanup_dest(dst)
        raise PlacementError(f"Copy {src} to {dst}: {exc}") from exc
    logger.info("Copied %s to %s", src, dst)


def _cleanup_dest(dst: Path) -> None:
    try:
        dst.unlink(missing_ok=True)
    except OSError as exc:
        logger.warning("Error removing partial copy %s: %s", dst, exc)


def move_file(src: Path, dst: Path) -> None:
    """Move src to dst.

    Tries a rename first. If that fails (typically because src and dst are on
    different filesystems) the file is copied and the original removed. The
    copy is what matters: failing to remove the original is only logged.
    """
    try:
        src.rename(dst)
    except OSError:
        copy_file(src, dst)
        try:
            src.unlink()
        except OSError as exc:
            logger.warning("Error removing %s: %s", src, exc)
            return
        logger.info("Moved %s to %s (copy/delete)", src, dst)
        return

    logger.info("Moved %s to %s", src, dst)


def move_or_copy(src: Path, dst: Path, *, move: bool) -> None:
    """Move or copy src to dst, creating any missing parent directories of dst.

    Raises:
        PlacementError: If the directories cannot be created or the file
            cannot be placed.
    """
    try:
        dst.parent.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise PlacementError(f"Create directory {dst.parent}: {exc}") from exc

    if move:
        move_file(src, dst)
    else:
        copy_file(src, dst)


def unique_name(path: Path) -> Path:
    """Return ``path``, or the first free ``name (N).ext`` variant of it.

    ``book.epub`` becomes ``book (1).epub``, then ``book (2).epub``, and so on.
    Nothing is reserved: another writer may still take the name first.
    """
    candidate = path
    counter = count(1)
    while candidate.exists():
        candidate = path.with_name(f"{path.stem} ({next(counter)}){path.suffix}")
    return candidate
