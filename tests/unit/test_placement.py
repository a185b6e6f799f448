# ABOUTME: Unit tests for placing files under the books root.
# ABOUTME: Covers copy with mtime, move with cross-device fallback, and unique naming.

import logging
import os
from pathlib import Path
from unittest.mock import patch

import pytest

from libris.core.placement import move_or_copy, unique_name
from libris.db.errors import PlacementError


@pytest.fixture()
def source(tmp_path: Path) -> Path:
    f = tmp_path / "incoming" / "book.epub"
    f.parent.mkdir()
    f.write_bytes(b"book bytes")
    os.utime(f, (1_000_000, 1_000_000))
    return f


class TestMoveOrCopy:
    """Tests for move_or_copy."""

    def test_copy_creates_missing_directories(self, source: Path, tmp_path: Path) -> None:
        dst = tmp_path / "library" / "Author" / "Title" / "book.epub"
        move_or_copy(source, dst, move=False)
        assert dst.read_bytes() == b"book bytes"
        assert source.exists()

    def test_copy_preserves_mtime(self, source: Path, tmp_path: Path) -> None:
        dst = tmp_path / "library" / "book.epub"
        move_or_copy(source, dst, move=False)
        assert dst.stat().st_mtime == pytest.approx(1_000_000)

    def test_move_renames(self, source: Path, tmp_path: Path) -> None:
        dst = tmp_path / "library" / "book.epub"
        move_or_copy(source, dst, move=True)
        assert dst.read_bytes() == b"book bytes"
        assert not source.exists()

    def test_move_falls_back_to_copy_and_delete(self, source: Path, tmp_path: Path) -> None:
        """When rename fails (e.g. across devices) the file is copied then removed."""
        dst = tmp_path / "library" / "book.epub"
        with patch.object(Path, "rename", side_effect=OSError("cross-device link")):
            move_or_copy(source, dst, move=True)
        assert dst.read_bytes() == b"book bytes"
        assert dst.stat().st_mtime == pytest.approx(1_000_000)
        assert not source.exists()

    def test_failed_source_delete_is_only_logged(
        self, source: Path, tmp_path: Path, caplog: pytest.LogCaptureFixture
    ) -> None:
        """The copy already succeeded, so a failed cleanup doesn't fail the move."""
        dst = tmp_path / "library" / "book.epub"
        with (
            patch.object(Path, "rename", side_effect=OSError("cross-device link")),
            patch.object(Path, "unlink", side_effect=PermissionError("read-only")),
            caplog.at_level(logging.WARNING, logger="libris.core.placement"),
        ):
            move_or_copy(source, dst, move=True)
        assert dst.exists()
        assert source.exists()
        assert "Error removing" in caplog.text

    def test_missing_source_raises_placement_error(self, tmp_path: Path) -> None:
        with pytest.raises(PlacementError, match="missing.epub"):
            move_or_copy(tmp_path / "missing.epub", tmp_path / "out" / "x.epub", move=False)

    def test_unwritable_destination_raises_placement_error(
        self, source: Path, tmp_path: Path
    ) -> None:
        blocker = tmp_path / "blocker"
        blocker.write_text("a file, not a directory")
        with pytest.raises(PlacementError):
            move_or_copy(source, blocker / "sub" / "book.epub", move=False)

    def test_failed_copy_removes_partial_destination(self, source: Path, tmp_path: Path) -> None:
        """copy2 writes the bytes before copying metadata; a late failure must not leave them."""
        dst = tmp_path / "library" / "book.epub"
        with (
            patch("libris.core.placement.shutil.copystat", side_effect=OSError("no space left")),
            pytest.raises(PlacementError, match="no space left"),
        ):
            move_or_copy(source, dst, move=False)
        assert not dst.exists()
        assert source.exists()

    def test_failed_copy_keeps_preexisting_destination(self, source: Path, tmp_path: Path) -> None:
        dst = tmp_path / "book.epub"
        dst.write_bytes(b"already here")
        with (
            patch("libris.core.placement.shutil.copyfile", side_effect=OSError("no space left")),
            pytest.raises(PlacementError),
        ):
            move_or_copy(source, dst, move=False)
        assert dst.read_bytes() == b"already here"


class TestUniqueName:
    """Tests for unique_name."""

    def test_free_name_is_unchanged(self, tmp_path: Path) -> None:
        assert unique_name(tmp_path / "book.epub") == tmp_path / "book.epub"

    def test_first_collision_gets_one(self, tmp_path: Path) -> None:
        (tmp_path / "book.epub").write_text("x")
        assert unique_name(tmp_path / "book.epub") == tmp_path / "book (1).epub"

    def test_counts_up_until_free(self, tmp_path: Path) -> None:
        (tmp_path / "book.epub").write_text("x")
        (tmp_path / "book (1).epub").write_text("x")
        assert unique_name(tmp_path / "book.epub") == tmp_path / "book (2).epub"

    def test_name_without_extension(self, tmp_path: Path) -> None:
        (tmp_path / "README").write_text("x")
        assert unique_name(tmp_path / "README") == tmp_path / "README (1)"
