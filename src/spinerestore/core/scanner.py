"""Directory scanner for asset files.

This module lists regular files under a root directory, optionally filtered by
extension. The scan is single-threaded and is fully materialized by
:func:`scan_files` before any per-file work starts.
"""

import logging
import os
from pathlib import Path
from typing import Iterator, List, Optional

from spinerestore.models.core import FileEntry

# Logger for this module
logger = logging.getLogger(__name__)


def normalize_extension(extension: str) -> str:
    """Return *extension* lowercased and without its leading dot.

    Args:
        extension: Extension such as ``".Atlas"`` or ``"skel"``.

    Returns:
        The bare, lowercase extension (``"atlas"``, ``"skel"``).
    """
    return extension.strip().lstrip(".").lower()


def has_extension(path: Path) -> bool:
    """Check if a file name carries an extension.

    Leading-dot names such as ``.hidden`` count as having no extension.
    """
    return bool(path.suffix)


def matches_extension(path: Path, extension: str) -> bool:
    """Case-insensitive match of the file's extension against *extension*."""
    wanted = normalize_extension(extension)
    return bool(wanted) and path.suffix[1:].lower() == wanted


def _validate_root(root_dir: Path) -> Path:
    if not root_dir.exists():
        raise FileNotFoundError(f"Directory does not exist: {root_dir}")
    if not root_dir.is_dir():
        raise ValueError(f"Path is not a directory: {root_dir}")
    return root_dir.absolute()


def iter_files(root_dir: Path, extension: Optional[str] = None) -> Iterator[Path]:
    """Lazily yield absolute paths of regular files under *root_dir*.

    Recurses through all subdirectories in the order the platform returns
    entries. Symlinks are neither followed nor yielded. Directories that cannot
    be listed and entries that cannot be stat'ed are skipped.

    Args:
        root_dir: Directory to walk.
        extension: Optional extension filter (case-insensitive, dot optional).

    Yields:
        Absolute file paths.
    """
    pending = [Path(root_dir).absolute()]
    while pending:
        current = pending.pop()
        try:
            with os.scandir(current) as entries:
                children = list(entries)
        except OSError as e:
            logger.debug("Skipping unreadable directory %s: %s", current, e)
            continue

        subdirs: List[Path] = []
        for entry in children:
            try:
                if entry.is_dir(follow_symlinks=False):
                    subdirs.append(Path(entry.path))
                    continue
                if not entry.is_file(follow_symlinks=False):
                    continue
            except OSError as e:
                logger.debug("Skipping unreadable entry %s: %s", entry.path, e)
                continue
            path = Path(entry.path)
            if extension is not None and not matches_extension(path, extension):
                continue
            yield path
        # Reversed so subdirectories are visited in listing order.
        pending.extend(reversed(subdirs))


def scan_files(root_dir: Path, extension: Optional[str] = None) -> List[FileEntry]:
    """Scan *root_dir* and return every matching regular file.

    Args:
        root_dir: The directory to scan.
        extension: Optional extension filter (case-insensitive, dot optional).

    Returns:
        FileEntry objects for every regular file found.

    Raises:
        FileNotFoundError: If the directory doesn't exist.
        ValueError: If the path is not a directory.
    """
    root = _validate_root(Path(root_dir))
    files = [FileEntry(path=path) for path in iter_files(root, extension)]
    logger.debug(
        "Scanned %s: %d file(s)%s",
        root,
        len(files),
        f" with extension {normalize_extension(extension)}" if extension else "",
    )
    return files


def count_files(root_dir: Path) -> int:
    """Count regular files under *root_dir*; 0 if it is not a directory."""
    if not Path(root_dir).is_dir():
        return 0
    return sum(1 for _ in iter_files(root_dir))
