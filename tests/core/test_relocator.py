"""Tests for the batch rename/move engine.

Covers extension restoration, organize-by-extension (including idempotent
re-runs), rename-by-size, dry runs, collisions and per-file failure isolation.
"""

import threading
from pathlib import Path

import pytest

from spinerestore.core import relocator
from spinerestore.core.relocator import (
    organize_by_extension,
    organize_spine_assets,
    rename_png_by_size,
    restore_extension,
    restore_extensions,
)
from spinerestore.errors import FileAccessError
from spinerestore.models.core import OutcomeStatus, TypeTag


def _tree(root: Path) -> dict:
    return {
        str(p.relative_to(root)): p.read_bytes()
        for p in sorted(root.rglob("*"))
        if p.is_file()
    }


class TestRestoreExtensions:
    def test_end_to_end(self, asset_dir: Path) -> None:
        baz_bytes = (asset_dir / "baz.txt").read_bytes()

        result = restore_extensions(asset_dir, workers=4)

        assert (asset_dir / "foo.png").exists()
        assert (asset_dir / "bar.json").read_text() == '{"a":1}'
        assert (asset_dir / "nested" / "hero.atlas").exists()
        assert (asset_dir / "nested" / "hero_skel.skel").exists()
        assert not (asset_dir / "foo").exists()
        assert not (asset_dir / "bar").exists()
        assert (asset_dir / "baz.txt").read_bytes() == baz_bytes
        assert result.processed == 5
        assert result.moved == 4
        assert result.skipped == 1
        assert result.failed == 0
        assert result.success

    def test_deeply_nested_json_does_not_abort_batch(self, tmp_path: Path) -> None:
        (tmp_path / "deep").write_bytes(b"[" * 200000)
        (tmp_path / "ok").write_text('{"a":1}', encoding="utf-8")

        result = restore_extensions(tmp_path, workers=1)

        assert result.failed == 0
        assert (tmp_path / "ok.json").exists()
        assert (tmp_path / "deep.atlas").exists()

    def test_tags_are_reported(self, asset_dir: Path) -> None:
        result = restore_extensions(asset_dir)
        tags = {o.source.name: o.tag for o in result.outcomes if o.tag}
        assert tags == {
            "foo": TypeTag.PNG,
            "bar": TypeTag.JSON,
            "hero": TypeTag.ATLAS,
            "hero_skel": TypeTag.SKEL,
        }

    def test_files_with_extension_untouched(self, tmp_path: Path, make_png) -> None:
        # Even a PNG with a misleading extension is left alone.
        make_png(tmp_path / "image.dat", 4, 4)
        (tmp_path / "notes.md").write_text("# notes")
        before = _tree(tmp_path)

        result = restore_extensions(tmp_path)

        assert _tree(tmp_path) == before
        assert all(o.status == OutcomeStatus.SKIPPED for o in result.outcomes)

    def test_collision_gets_suffix(self, tmp_path: Path, make_png) -> None:
        make_png(tmp_path / "foo", 1, 1)
        (tmp_path / "foo.png").write_bytes(b"existing")
        (tmp_path / "foo_1.png").write_bytes(b"existing too")

        result = restore_extensions(tmp_path)

        assert (tmp_path / "foo.png").read_bytes() == b"existing"
        assert (tmp_path / "foo_1.png").read_bytes() == b"existing too"
        assert (tmp_path / "foo_2.png").exists()
        moved = [o for o in result.outcomes if o.status == OutcomeStatus.MOVED]
        assert [o.destination for o in moved] == [tmp_path / "foo_2.png"]

    def test_rerun_is_noop(self, asset_dir: Path) -> None:
        restore_extensions(asset_dir)
        before = _tree(asset_dir)

        result = restore_extensions(asset_dir)

        assert _tree(asset_dir) == before
        assert result.moved == 0
        assert result.skipped == result.processed

    def test_dry_run_changes_nothing(self, asset_dir: Path) -> None:
        before = _tree(asset_dir)

        result = restore_extensions(asset_dir, dry_run=True)

        assert _tree(asset_dir) == before
        assert result.planned == 4
        planned = {
            o.source.name: o.destination.name
            for o in result.outcomes
            if o.destination
        }
        assert planned["foo"] == "foo.png"

    def test_failure_does_not_abort_siblings(
        self, asset_dir: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        real_detect = relocator.detect_file_type

        def flaky(path: Path) -> TypeTag:
            if path.name == "bar":
                raise FileAccessError("Cannot read file (Permission denied)", path)
            return real_detect(path)

        monkeypatch.setattr(relocator, "detect_file_type", flaky)

        result = restore_extensions(asset_dir)

        assert result.failed == 1
        assert result.moved == 3
        [(path, message)] = result.errors
        assert path.name == "bar"
        assert "Permission denied" in message
        assert (asset_dir / "bar").exists()
        assert (asset_dir / "foo.png").exists()

    def test_unknown_type_is_skipped(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        (tmp_path / "blob").write_bytes(b"x")
        monkeypatch.setattr(relocator, "detect_file_type", lambda path: TypeTag.UNKNOWN)

        outcome = restore_extension(tmp_path / "blob")

        assert outcome.status == OutcomeStatus.SKIPPED
        assert (tmp_path / "blob").exists()

    def test_missing_root_is_fatal(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            restore_extensions(tmp_path / "missing")

    def test_concurrent_same_target_never_overwrites(self, tmp_path: Path) -> None:
        # Many extension-less text files whose names collide after restoration.
        for i in range(30):
            sub = tmp_path / f"d{i}"
            sub.mkdir()
            (sub / "asset").write_text(f"content {i}")
        (tmp_path / "asset").write_text("root")
        (tmp_path / "asset.atlas").write_text("pre-existing")

        result = restore_extensions(tmp_path, workers=8)

        assert result.failed == 0
        assert (tmp_path / "asset.atlas").read_text() == "pre-existing"
        assert (tmp_path / "asset_1.atlas").read_text() == "root"
        for i in range(30):
            assert (tmp_path / f"d{i}" / "asset.atlas").read_text() == f"content {i}"


class TestOrganizeByExtension:
    def _populate(self, work: Path) -> None:
        (work / "a").mkdir(parents=True)
        (work / "b").mkdir()
        (work / "a" / "hero.atlas").write_text("a-hero")
        (work / "b" / "hero.atlas").write_text("b-hero")
        (work / "b" / "VILLAIN.ATLAS").write_text("villain")
        (work / "b" / "hero.skel").write_bytes(b"\x00skel")

    def test_moves_with_collision_suffix(self, tmp_path: Path) -> None:
        work = tmp_path / "work"
        target = tmp_path / "atlas"
        self._populate(work)

        result = organize_by_extension(work, ".atlas", target)

        assert target.is_dir()
        assert result.moved == 3
        contents = sorted(p.read_text() for p in target.iterdir())
        assert contents == ["a-hero", "b-hero", "villain"]
        names = {p.name for p in target.iterdir()}
        assert {"hero.atlas", "hero_1.atlas", "VILLAIN.ATLAS"} == names
        # Non-matching files stay where they are.
        assert (work / "b" / "hero.skel").exists()

    def test_existing_destination_is_preserved(self, tmp_path: Path) -> None:
        work = tmp_path / "work"
        target = tmp_path / "atlas"
        target.mkdir()
        (target / "hero.atlas").write_text("already organized")
        (work).mkdir()
        (work / "hero.atlas").write_text("new")

        organize_by_extension(work, "atlas", target)

        assert (target / "hero.atlas").read_text() == "already organized"
        assert (target / "hero_1.atlas").read_text() == "new"

    def test_second_run_finds_nothing(self, tmp_path: Path) -> None:
        work = tmp_path / "work"
        target = tmp_path / "atlas"
        self._populate(work)
        organize_by_extension(work, "atlas", target)
        before = _tree(tmp_path)

        result = organize_by_extension(work, "atlas", target)

        assert result.processed == 0
        assert _tree(tmp_path) == before

    def test_target_inside_source_is_idempotent(self, tmp_path: Path) -> None:
        self._populate(tmp_path)
        target = tmp_path / "sorted"
        organize_by_extension(tmp_path, "atlas", target)
        before = _tree(tmp_path)

        result = organize_by_extension(tmp_path, "atlas", target)

        assert result.moved == 0
        assert result.skipped == 3
        assert _tree(tmp_path) == before

    def test_no_match_does_not_create_target(self, tmp_path: Path) -> None:
        (tmp_path / "work").mkdir()
        result = organize_by_extension(tmp_path / "work", "skel", tmp_path / "skels")
        assert result.processed == 0
        assert not (tmp_path / "skels").exists()

    def test_empty_extension_rejected(self, tmp_path: Path) -> None:
        with pytest.raises(ValueError):
            organize_by_extension(tmp_path, ".", tmp_path / "out")

    def test_spine_assets(self, tmp_path: Path) -> None:
        work = tmp_path / "work"
        self._populate(work)

        atlas_result, skel_result = organize_spine_assets(
            work, tmp_path / "atlas", tmp_path / "skels"
        )

        assert atlas_result.moved == 3
        assert skel_result.moved == 1
        assert (tmp_path / "skels" / "hero.skel").read_bytes() == b"\x00skel"


class TestRenamePngBySize:
    def test_renames_by_dimensions(self, tmp_path: Path, make_png) -> None:
        make_png(tmp_path / "a.png", 10, 20)
        make_png(tmp_path / "b.PNG", 10, 20)
        make_png(tmp_path / "sub" / "c.png", 256, 200)

        result = rename_png_by_size(tmp_path)

        assert result.moved == 3
        assert {p.name for p in tmp_path.glob("*.png")} == {
            "size_10x20.png",
            "size_10x20_1.png",
        }
        assert (tmp_path / "sub" / "size_256x200.png").exists()

    def test_rerun_is_noop(self, tmp_path: Path, make_png) -> None:
        make_png(tmp_path / "a.png", 10, 20)
        make_png(tmp_path / "b.png", 10, 20)
        rename_png_by_size(tmp_path)
        before = _tree(tmp_path)

        result = rename_png_by_size(tmp_path)

        assert result.moved == 0
        assert result.skipped == 2
        assert _tree(tmp_path) == before

    def test_dry_run_reports_distinct_destinations(
        self, tmp_path: Path, make_png
    ) -> None:
        for name in ("a.png", "b.png", "c.png"):
            make_png(tmp_path / name, 10, 20)
        before = _tree(tmp_path)

        result = rename_png_by_size(tmp_path, dry_run=True, workers=3)

        assert result.planned == 3
        assert sorted(o.destination.name for o in result.outcomes) == [
            "size_10x20.png",
            "size_10x20_1.png",
            "size_10x20_2.png",
        ]
        assert _tree(tmp_path) == before

    def test_misnamed_size_file_is_renamed(self, tmp_path: Path, make_png) -> None:
        make_png(tmp_path / "size_1x1.png", 8, 8)
        rename_png_by_size(tmp_path)
        assert (tmp_path / "size_8x8.png").exists()

    def test_malformed_png_reported(self, tmp_path: Path, make_png) -> None:
        make_png(tmp_path / "good.png", 2, 3)
        (tmp_path / "bad.png").write_bytes(b"\x89PNG\r\n\x1a\n short")

        result = rename_png_by_size(tmp_path)

        assert result.moved == 1
        assert result.failed == 1
        assert (tmp_path / "bad.png").exists()
        assert (tmp_path / "size_2x3.png").exists()
        failed = [o for o in result.outcomes if o.status == OutcomeStatus.FAILED]
        assert "truncated" in failed[0].error

    def test_progress_callback(self, tmp_path: Path, make_png) -> None:
        for i in range(5):
            make_png(tmp_path / f"{i}.png", i + 1, 1)
        seen = []
        lock = threading.Lock()

        def record(completed: int, total: int) -> None:
            with lock:
                seen.append(completed)

        rename_png_by_size(tmp_path, progress=record)
        assert sorted(seen) == [1, 2, 3, 4, 5]
