"""Error hierarchy for spinerestore.

Every error raised while handling a single asset file derives from
:class:`SpineRestoreError` and carries the offending path, so batch operations
can catch at the file boundary and report "N succeeded, M failed with reasons"
without aborting sibling files.

Errors raised before any per-file work starts (missing root directory, root is
not a directory) are plain ``FileNotFoundError`` / ``ValueError`` and are fatal.
"""

from pathlib import Path
from typing import Optional


class SpineRestoreError(Exception):
    """Base exception for per-file failures."""

    def __init__(self, message: str, path: Optional[Path] = None) -> None:
        super().__init__(message)
        self.message = message
        self.path = path

    def __str__(self) -> str:
        if self.path is not None:
            return f"{self.message}: {self.path}"
        return self.message


class FileAccessError(SpineRestoreError):
    """Opening, reading or renaming a file failed."""


class DecodeError(SpineRestoreError):
    """Content is not valid text where text is required."""


class FormatError(SpineRestoreError):
    """PNG signature or IHDR chunk is missing or malformed."""


class InvalidPathError(SpineRestoreError):
    """A file name cannot be represented as text."""


__all__ = [
    "SpineRestoreError",
    "FileAccessError",
    "DecodeError",
    "FormatError",
    "InvalidPathError",
]
