"""Collision-safe destination naming.

Given a desired destination, find the first name that does not exist yet:
``stem.ext``, then ``stem_1.ext``, ``stem_2.ext`` and so on. The smallest free
suffix always wins, so names are reproducible for a given filesystem state.

Planning here is check-only. Two workers can plan the same free name; the
commit in :mod:`spinerestore.fs.operations` claims names with an exclusive
create and moves on to the next suffix when it loses.
"""

import itertools
import os
import threading
from pathlib import Path
from typing import Collection, Iterator, Set, Tuple

from spinerestore.errors import InvalidPathError
from spinerestore.models.plan import RenamePlan


def format_name(stem: str, extension: str, counter: int = 0) -> str:
    """Build ``stem[_counter][.extension]``."""
    base = f"{stem}_{counter}" if counter else stem
    return f"{base}.{extension}" if extension else base


def candidate_names(stem: str, extension: str) -> Iterator[str]:
    """Yield ``stem.ext``, ``stem_1.ext``, ``stem_2.ext``, ... without end."""
    for counter in itertools.count():
        yield format_name(stem, extension, counter)


def split_name(name: str, path: Path | None = None) -> Tuple[str, str]:
    """Split a file name into ``(stem, extension)`` without the dot.

    Raises:
        InvalidPathError: If the name holds bytes that are not valid text.
    """
    try:
        name.encode("utf-8")
    except UnicodeEncodeError as e:
        raise InvalidPathError("File name is not valid text", path) from e
    if not name:
        raise InvalidPathError("Empty file name", path)
    pure = Path(name)
    return pure.stem, pure.suffix[1:]


def unique_path(
    directory: Path, stem: str, extension: str, reserved: Collection[Path] = ()
) -> Path:
    """Return the first candidate under *directory* that does not exist.

    Dangling symlinks count as existing, since renaming onto them would replace
    the link. Paths in *reserved* are treated as taken too.
    """
    for name in candidate_names(stem, extension):
        candidate = directory / name
        if candidate not in reserved and not os.path.lexists(candidate):
            return candidate
    raise AssertionError("unreachable")  # pragma: no cover


class NameReservations:
    """Destinations handed out during a dry run.

    A dry run moves nothing, so the filesystem alone cannot tell two workers
    apart that want the same name. One instance is shared by the workers of a
    batch; each reservation takes the first name that neither exists nor was
    reserved before, matching what a real run would produce.
    """

    def __init__(self) -> None:
        self._paths: Set[Path] = set()
        self._lock = threading.Lock()

    def reserve(self, directory: Path, stem: str, extension: str) -> Path:
        with self._lock:
            path = unique_path(directory, stem, extension, self._paths)
            self._paths.add(path)
            return path


def _plan(source: Path, directory: Path, stem: str, extension: str) -> RenamePlan:
    return RenamePlan(
        source=source.absolute(),
        destination=unique_path(directory.absolute(), stem, extension),
        stem=stem,
        extension=extension,
    )


def plan_extension(path: Path, extension: str) -> RenamePlan:
    """Plan giving an extension-less *path* the given extension in place."""
    stem, _ = split_name(path.name, path)
    return _plan(path, path.parent, stem, extension.lstrip("."))


def plan_move(path: Path, target_dir: Path) -> RenamePlan:
    """Plan moving *path* into *target_dir*, keeping its base name if free."""
    stem, extension = split_name(path.name, path)
    return _plan(path, target_dir, stem, extension)


def plan_rename(path: Path, new_name: str) -> RenamePlan:
    """Plan renaming *path* to *new_name* within its own directory."""
    stem, extension = split_name(new_name, path)
    return _plan(path, path.parent, stem, extension)
