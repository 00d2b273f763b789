"""Batch rename/move engine.

This module restores stripped extensions, gathers assets by extension into a
destination directory, and renames PNGs after their pixel size.
- Each operation scans first (a missing root is fatal), then processes every
  file on the worker pool.
- Errors are caught at the file boundary, logged with the path and recorded
  in that file's FileOutcome; sibling files are never affected.
- Every operation is safe to re-run: already-processed files are skipped.
"""

import logging
import re
import time
from pathlib import Path
from typing import Callable, List, Optional

from spinerestore.core.batch import ProgressCallback, run_batch
from spinerestore.core.classifier import detect_file_type
from spinerestore.core.png import read_dimensions
from spinerestore.core.scanner import has_extension, normalize_extension, scan_files
from spinerestore.errors import SpineRestoreError
from spinerestore.fs.naming import (
    NameReservations,
    plan_extension,
    plan_move,
    plan_rename,
)
from spinerestore.fs.operations import commit_plan
from spinerestore.models.core import (
    BatchResult,
    FileEntry,
    FileOutcome,
    OutcomeStatus,
    TypeTag,
)
from spinerestore.models.plan import RenamePlan

logger = logging.getLogger(__name__)

SIZE_NAME_PATTERN = re.compile(r"^size_(\d+)x(\d+)(?:_\d+)?$")


def _moved(plan: RenamePlan, destination: Path, dry_run: bool, **extra) -> FileOutcome:
    return FileOutcome(
        source=plan.source,
        status=OutcomeStatus.PLANNED if dry_run else OutcomeStatus.MOVED,
        destination=destination,
        **extra,
    )


def _guarded(
    operation: str, func: Callable[[FileEntry], FileOutcome]
) -> Callable[[FileEntry], FileOutcome]:
    """Wrap a per-file step so failures become FAILED outcomes."""

    def run(entry: FileEntry) -> FileOutcome:
        try:
            return func(entry)
        except (SpineRestoreError, OSError) as e:
            logger.warning("%s failed for %s: %s", operation, entry.path, e)
            return FileOutcome(
                source=entry.path, status=OutcomeStatus.FAILED, error=str(e)
            )

    return run


def _run(
    operation: str,
    root: Path,
    entries: List[FileEntry],
    func: Callable[[FileEntry], FileOutcome],
    workers: Optional[int],
    progress: Optional[ProgressCallback],
) -> BatchResult:
    start = time.time()
    outcomes = run_batch(
        entries, _guarded(operation, func), workers=workers, progress=progress
    )
    result = BatchResult(
        operation=operation,
        root=root,
        outcomes=outcomes,
        duration_seconds=time.time() - start,
    )
    logger.info(
        "%s: %d processed, %d moved, %d skipped, %d failed",
        operation,
        result.processed,
        result.moved + result.planned,
        result.skipped,
        result.failed,
    )
    return result


def restore_extension(
    path: Path,
    *,
    dry_run: bool = False,
    reservations: Optional[NameReservations] = None,
) -> FileOutcome:
    """Give one extension-less file the extension matching its content.

    Files that already have an extension are skipped without being read.

    Raises:
        SpineRestoreError: If the file cannot be read, named or renamed.
    """
    if has_extension(path):
        return FileOutcome(
            source=path, status=OutcomeStatus.SKIPPED, error="already has an extension"
        )
    tag = detect_file_type(path)
    if tag.extension is None:
        return FileOutcome(
            source=path, status=OutcomeStatus.SKIPPED, tag=tag, error="unknown type"
        )
    plan = plan_extension(path, tag.extension)
    destination = commit_plan(plan, dry_run=dry_run, reservations=reservations)
    return _moved(plan, destination, dry_run, tag=tag)


def restore_extensions(
    root_dir: Path,
    *,
    dry_run: bool = False,
    workers: Optional[int] = None,
    progress: Optional[ProgressCallback] = None,
) -> BatchResult:
    """Restore extensions of every extension-less file under *root_dir*.

    Raises:
        FileNotFoundError: If the directory doesn't exist.
        ValueError: If the path is not a directory.
    """
    entries = scan_files(root_dir)
    reservations = NameReservations() if dry_run else None
    return _run(
        "restore",
        Path(root_dir).absolute(),
        entries,
        lambda entry: restore_extension(
            entry.path, dry_run=dry_run, reservations=reservations
        ),
        workers,
        progress,
    )


def organize_by_extension(
    root_dir: Path,
    extension: str,
    target_dir: Path,
    *,
    dry_run: bool = False,
    workers: Optional[int] = None,
    progress: Optional[ProgressCallback] = None,
) -> BatchResult:
    """Move every file with *extension* under *root_dir* into *target_dir*.

    Base names are kept unless a collision forces a numeric suffix. Files that
    already sit directly in *target_dir* are left alone, so running twice moves
    nothing the second time.

    Raises:
        FileNotFoundError: If *root_dir* doesn't exist.
        ValueError: If *root_dir* is not a directory or *extension* is empty.
    """
    if not normalize_extension(extension):
        raise ValueError("Extension must not be empty")
    entries = scan_files(root_dir, extension)
    target = Path(target_dir).absolute()
    reservations = NameReservations() if dry_run else None
    if entries and not dry_run:
        target.mkdir(parents=True, exist_ok=True)

    def organize_one(entry: FileEntry) -> FileOutcome:
        if entry.path.parent == target:
            return FileOutcome(
                source=entry.path,
                status=OutcomeStatus.SKIPPED,
                destination=entry.path,
                error="already in target directory",
            )
        plan = plan_move(entry.path, target)
        destination = commit_plan(plan, dry_run=dry_run, reservations=reservations)
        return _moved(plan, destination, dry_run)

    operation = f"organize .{normalize_extension(extension)}"
    if not entries:
        logger.info("No .%s files found in %s", normalize_extension(extension), root_dir)
    return _run(
        operation, Path(root_dir).absolute(), entries, organize_one, workers, progress
    )


def organize_spine_assets(
    work_dir: Path,
    atlas_dir: Path,
    skel_dir: Path,
    *,
    dry_run: bool = False,
    workers: Optional[int] = None,
    progress: Optional[ProgressCallback] = None,
) -> List[BatchResult]:
    """Gather ``.atlas`` files into *atlas_dir* and ``.skel`` into *skel_dir*."""
    return [
        organize_by_extension(
            work_dir,
            TypeTag.ATLAS.extension,
            atlas_dir,
            dry_run=dry_run,
            workers=workers,
            progress=progress,
        ),
        organize_by_extension(
            work_dir,
            TypeTag.SKEL.extension,
            skel_dir,
            dry_run=dry_run,
            workers=workers,
            progress=progress,
        ),
    ]


def size_name(width: int, height: int) -> str:
    """Canonical file name for a PNG of the given size."""
    return f"size_{width}x{height}.png"


def _has_size_name(path: Path, width: int, height: int) -> bool:
    match = SIZE_NAME_PATTERN.match(path.stem)
    return (
        match is not None
        and path.suffix == ".png"
        and (int(match.group(1)), int(match.group(2))) == (width, height)
    )


def rename_png(
    path: Path,
    *,
    dry_run: bool = False,
    reservations: Optional[NameReservations] = None,
) -> FileOutcome:
    """Rename one PNG to ``size_<width>x<height>.png`` in its directory.

    Raises:
        SpineRestoreError: If the PNG header is unreadable or malformed, or the
            rename fails.
    """
    dimensions = read_dimensions(path)
    if _has_size_name(path, dimensions.width, dimensions.height):
        return FileOutcome(
            source=path,
            status=OutcomeStatus.SKIPPED,
            destination=path,
            error="already named by size",
        )
    plan = plan_rename(path, size_name(dimensions.width, dimensions.height))
    destination = commit_plan(plan, dry_run=dry_run, reservations=reservations)
    return _moved(plan, destination, dry_run)


def rename_png_by_size(
    root_dir: Path,
    *,
    dry_run: bool = False,
    workers: Optional[int] = None,
    progress: Optional[ProgressCallback] = None,
) -> BatchResult:
    """Rename every ``.png`` under *root_dir* after its pixel dimensions.

    Raises:
        FileNotFoundError: If the directory doesn't exist.
        ValueError: If the path is not a directory.
    """
    entries = scan_files(root_dir, TypeTag.PNG.extension)
    reservations = NameReservations() if dry_run else None
    return _run(
        "rename-png",
        Path(root_dir).absolute(),
        entries,
        lambda entry: rename_png(
            entry.path, dry_run=dry_run, reservations=reservations
        ),
        workers,
        progress,
    )
