"""Rename plan model.

A RenamePlan maps one source file to a destination that did not exist when the
plan was computed. Plans are pure results: committing one goes through
:func:`spinerestore.fs.operations.commit_plan`, which claims the destination with
an exclusive create so a concurrent worker cannot overwrite it.
"""

from pathlib import Path

from pydantic import BaseModel, ConfigDict, model_validator

__all__: list[str] = ["RenamePlan"]


class RenamePlan(BaseModel):
    """A single planned rename/move."""

    model_config = ConfigDict(frozen=True)

    source: Path
    """Absolute source path of the file to be renamed/moved."""

    destination: Path
    """Absolute destination path, free at planning time."""

    stem: str
    """Unsuffixed stem the destination name was derived from."""

    extension: str = ""
    """Destination extension without the dot; empty for none."""

    @property
    def is_noop(self) -> bool:
        return self.source == self.destination

    @model_validator(mode="after")
    def validate_paths(self: "RenamePlan") -> "RenamePlan":
        """Ensure the source and destination paths are absolute.

        Raises:
            ValueError: If either path is not absolute.
        """
        if not self.source.is_absolute():
            raise ValueError(f"Source path must be absolute: {self.source}")
        if not self.destination.is_absolute():
            raise ValueError(f"Destination path must be absolute: {self.destination}")
        return self
