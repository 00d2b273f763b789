"""Filesystem move operations that never overwrite.

A destination is claimed by creating it with ``O_CREAT | O_EXCL``; only the
worker whose create succeeded may move a file onto it. Losing the claim means
another file owns the name, so the next numeric suffix is tried. This closes
the check-then-rename race between concurrent workers.
"""

import contextlib
import errno
import logging
import os
import shutil
from pathlib import Path
from typing import Optional

from spinerestore.errors import FileAccessError
from spinerestore.fs.naming import NameReservations, candidate_names
from spinerestore.models.plan import RenamePlan

logger = logging.getLogger(__name__)

_CLAIM_FLAGS = os.O_WRONLY | os.O_CREAT | os.O_EXCL | getattr(os, "O_BINARY", 0)


def _claim(path: Path) -> bool:
    """Atomically create an empty placeholder at *path*; False if it exists."""
    try:
        fd = os.open(path, _CLAIM_FLAGS, 0o644)
    except FileExistsError:
        return False
    os.close(fd)
    return True


def _replace(src: Path, dst: Path) -> None:
    """Move *src* onto the claimed placeholder *dst*."""
    try:
        os.replace(src, dst)
    except OSError as e:
        if e.errno == errno.EXDEV:
            shutil.copy2(src, dst)
            src.unlink()
        else:
            raise


def move_exclusive(source: Path, directory: Path, stem: str, extension: str) -> Path:
    """Move *source* into *directory* under the first free candidate name.

    Args:
        source: File to move.
        directory: Destination directory (must exist).
        stem: Unsuffixed destination stem.
        extension: Destination extension without the dot, or empty.

    Returns:
        The path the file was moved to.

    Raises:
        FileAccessError: If the source is missing or a claim/move fails.
    """
    if not source.exists():
        raise FileAccessError("Source file does not exist", source)
    for name in candidate_names(stem, extension):
        destination = directory / name
        try:
            if not _claim(destination):
                continue
        except OSError as e:
            raise FileAccessError(
                f"Cannot create {destination} ({e.strerror})", source
            ) from e
        try:
            _replace(source, destination)
        except OSError as e:
            with contextlib.suppress(OSError):
                destination.unlink()
            raise FileAccessError(
                f"Cannot move to {destination} ({e.strerror})", source
            ) from e
        logger.debug("Moved %s -> %s", source, destination)
        return destination
    raise AssertionError("unreachable")  # pragma: no cover


def commit_plan(
    plan: RenamePlan,
    *,
    dry_run: bool = False,
    reservations: Optional[NameReservations] = None,
) -> Path:
    """Carry out *plan* without overwriting anything.

    The planned destination is the expected result; if another worker claimed
    it in the meantime the next free suffix is used instead.

    Args:
        plan: The rename to perform.
        dry_run: If True, log the intended move and touch nothing.
        reservations: Dry-run names already handed out in this batch; the
            reported destination skips them the way a real move would.

    Returns:
        The final destination path.
    """
    if dry_run:
        destination = plan.destination
        if reservations is not None:
            destination = reservations.reserve(
                destination.parent, plan.stem, plan.extension
            )
        logger.info("[dry run] Would move %s -> %s", plan.source, destination)
        return destination
    return move_exclusive(
        plan.source, plan.destination.parent, plan.stem, plan.extension
    )
