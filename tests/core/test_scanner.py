"""Tests for the directory scanner.

Covers recursive listing, extension filtering (case and leading dot), symlink
exclusion, unreadable directories and fatal root validation.
"""

import os
import sys
from pathlib import Path

import pytest

from spinerestore.core.scanner import (
    count_files,
    has_extension,
    iter_files,
    matches_extension,
    normalize_extension,
    scan_files,
)


def _names(paths) -> set:
    return {Path(p).name for p in paths}


class TestExtensionHelpers:
    def test_normalize_extension(self) -> None:
        assert normalize_extension(".Atlas") == "atlas"
        assert normalize_extension("skel") == "skel"
        assert normalize_extension("  .PNG ") == "png"

    def test_has_extension(self) -> None:
        assert has_extension(Path("a.png"))
        assert not has_extension(Path("a"))
        # Dot files have no extension
        assert not has_extension(Path(".hidden"))

    def test_matches_extension_case_insensitive(self) -> None:
        assert matches_extension(Path("x.ATLAS"), "atlas")
        assert matches_extension(Path("x.atlas"), ".Atlas")
        assert not matches_extension(Path("x.atlas.bak"), "atlas")
        assert not matches_extension(Path("x"), "")


class TestScanFiles:
    def test_recursive_listing(self, asset_dir: Path) -> None:
        names = _names(entry.path for entry in scan_files(asset_dir))
        assert names == {"foo", "bar", "baz.txt", "hero", "hero_skel"}

    def test_paths_are_absolute(self, asset_dir: Path) -> None:
        assert all(entry.path.is_absolute() for entry in scan_files(asset_dir))

    def test_extension_filter(self, tmp_path: Path) -> None:
        (tmp_path / "a.atlas").write_text("a")
        (tmp_path / "B.ATLAS").write_text("b")
        (tmp_path / "sub").mkdir()
        (tmp_path / "sub" / "c.atlas").write_text("c")
        (tmp_path / "d.skel").write_bytes(b"d")

        found = _names(entry.path for entry in scan_files(tmp_path, ".atlas"))
        assert found == {"a.atlas", "B.ATLAS", "c.atlas"}

    def test_directories_are_not_listed(self, tmp_path: Path) -> None:
        (tmp_path / "folder.atlas").mkdir()
        assert scan_files(tmp_path, "atlas") == []

    @pytest.mark.skipif(sys.platform == "win32", reason="symlinks need privileges")
    def test_symlinks_excluded(self, tmp_path: Path) -> None:
        target = tmp_path / "real"
        target.write_text("x")
        (tmp_path / "link").symlink_to(target)
        (tmp_path / "broken").symlink_to(tmp_path / "missing")
        assert _names(iter_files(tmp_path)) == {"real"}

    @pytest.mark.skipif(
        sys.platform == "win32" or os.geteuid() == 0,
        reason="permission bits are not enforced",
    )
    def test_unreadable_directory_is_skipped(self, tmp_path: Path) -> None:
        (tmp_path / "ok").write_text("x")
        locked = tmp_path / "locked"
        locked.mkdir()
        (locked / "secret").write_text("x")
        locked.chmod(0)
        try:
            assert _names(iter_files(tmp_path)) == {"ok"}
        finally:
            locked.chmod(0o755)

    def test_missing_root_is_fatal(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            scan_files(tmp_path / "nope")

    def test_file_root_is_fatal(self, tmp_path: Path) -> None:
        file_path = tmp_path / "file"
        file_path.write_text("x")
        with pytest.raises(ValueError):
            scan_files(file_path)

    def test_scan_is_restartable(self, tmp_path: Path) -> None:
        (tmp_path / "one").write_text("1")
        assert len(scan_files(tmp_path)) == 1
        (tmp_path / "two").write_text("2")
        assert len(scan_files(tmp_path)) == 2


def test_count_files(asset_dir: Path, tmp_path: Path) -> None:
    assert count_files(asset_dir) == 5
    assert count_files(tmp_path / "missing") == 0
