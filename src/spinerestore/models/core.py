"""Core domain models for spinerestore.

This module defines the data structures shared by the scanner, classifier and
relocator.
- FileEntry is the unit produced by a directory scan (absolute path, regular
  file only).
- TypeTag is the closed set of content classifications, each mapped to its
  canonical extension.
- FileOutcome and BatchResult report per-file results of a batch operation so
  the CLI can render "N moved, M failed with reasons".

Design:
- All paths are validated absolute, so a rename never resolves against the
  process working directory by accident.
- Models are transient: computed, consumed by one rename/move and discarded.
"""

from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, model_validator

U32_MAX = 2**32 - 1


class TypeTag(str, Enum):
    """Content classification of an asset file.

    ATLAS and SKEL are fallbacks: readable text that matched nothing stronger is
    assumed to be an atlas, undecodable bytes are assumed to be a skeleton.
    """

    PNG = "png"
    XML = "xml"
    JSON = "json"
    ATLAS = "atlas"
    SKEL = "skel"
    UNKNOWN = "unknown"

    @property
    def extension(self) -> Optional[str]:
        """Canonical extension (without dot), or None for UNKNOWN."""
        return _TAG_EXTENSIONS[self]


_TAG_EXTENSIONS = {
    TypeTag.PNG: "png",
    TypeTag.XML: "xml",
    TypeTag.JSON: "json",
    TypeTag.ATLAS: "atlas",
    TypeTag.SKEL: "skel",
    TypeTag.UNKNOWN: None,
}


class OutcomeStatus(str, Enum):
    """Result of processing one file in a batch."""

    MOVED = "moved"
    SKIPPED = "skipped"
    FAILED = "failed"
    PLANNED = "planned"


class FileEntry(BaseModel):
    """A regular file discovered during a scan."""

    model_config = ConfigDict(frozen=True)

    path: Path
    """Absolute path to the file."""

    @property
    def name(self) -> str:
        return self.path.name

    @model_validator(mode="after")
    def validate_path(self: "FileEntry") -> "FileEntry":
        """Ensure the path is absolute.

        Raises:
            ValueError: If the path is not absolute.
        """
        if not self.path.is_absolute():
            raise ValueError(f"Path must be absolute: {self.path}")
        return self


class Dimensions(BaseModel):
    """Pixel dimensions read from a PNG IHDR chunk."""

    model_config = ConfigDict(frozen=True)

    width: int = Field(ge=0, le=U32_MAX)
    height: int = Field(ge=0, le=U32_MAX)

    def as_tuple(self) -> Tuple[int, int]:
        return (self.width, self.height)

    def __str__(self) -> str:
        return f"{self.width}x{self.height}"


class FileOutcome(BaseModel):
    """Outcome of a single file in a batch operation."""

    source: Path
    """Path of the file before the operation."""

    status: OutcomeStatus
    """What happened to the file."""

    destination: Optional[Path] = None
    """Where the file ended up (or would end up, for dry runs)."""

    tag: Optional[TypeTag] = None
    """Classification, for extension restoration."""

    error: Optional[str] = None
    """Failure or skip reason."""


class BatchResult(BaseModel):
    """Aggregate outcome of a batch rename/move operation."""

    operation: str
    """Name of the operation (restore, organize, rename-png)."""

    root: Path
    """Directory the candidate files were scanned from."""

    outcomes: List[FileOutcome] = Field(default_factory=list)
    """One outcome per candidate file, in scan order."""

    started_at: datetime = Field(default_factory=datetime.now)
    duration_seconds: float = 0.0

    def _count(self, status: OutcomeStatus) -> int:
        return sum(1 for outcome in self.outcomes if outcome.status == status)

    @property
    def processed(self) -> int:
        return len(self.outcomes)

    @property
    def moved(self) -> int:
        return self._count(OutcomeStatus.MOVED)

    @property
    def planned(self) -> int:
        return self._count(OutcomeStatus.PLANNED)

    @property
    def skipped(self) -> int:
        return self._count(OutcomeStatus.SKIPPED)

    @property
    def failed(self) -> int:
        return self._count(OutcomeStatus.FAILED)

    @property
    def success(self) -> bool:
        return self.failed == 0

    @property
    def errors(self) -> List[Tuple[Path, str]]:
        """Per-file errors as ``(path, message)`` pairs."""
        return [
            (outcome.source, outcome.error or "")
            for outcome in self.outcomes
            if outcome.status == OutcomeStatus.FAILED
        ]
