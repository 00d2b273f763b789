"""Console utilities & context manager for CLI commands.

This module centralises Rich configuration for CLI commands:

* A ``ConsoleManager`` context manager yielding a pre-configured
  :class:`rich.console.Console`.
* Opt-out via the ``--no-rich`` flag (sets env var ``SPINERESTORE_NO_RICH``) or
  the environment variable being set externally.
* :func:`create_batch_progress` and :func:`progress_callback` to drive a
  progress bar from the worker pool's ``(completed, total)`` callback.
"""

from __future__ import annotations

import os
from contextlib import AbstractContextManager
from typing import Any, Callable, Dict

from rich.console import Console
from rich.progress import (
    BarColumn,
    MofNCompleteColumn,
    Progress,
    SpinnerColumn,
    TaskID,
    TextColumn,
    TimeElapsedColumn,
)
from rich.traceback import install as install_rich_traceback

__all__ = [
    "ConsoleManager",
    "create_batch_progress",
    "progress_callback",
    "rich_enabled",
]

# ENV VAR used to disable rich output entirely (useful for piping or testing)
_ENV_DISABLE_RICH = "SPINERESTORE_NO_RICH"


def rich_enabled() -> bool:
    """Return False when rich output was disabled via flag or environment."""
    return os.getenv(_ENV_DISABLE_RICH, "0").lower() not in {"1", "true", "yes"}


class ConsoleManager(AbstractContextManager):
    """Context manager that yields a configured Rich :class:`Console`.

    Parameters
    ----------
    record:
        Forwarded to :class:`rich.console.Console` so output can be exported.
    force_use:
        When *True* / *False* this overrides autodetection and forces rich
        enabled/disabled. When *None*, autodetect via ``SPINERESTORE_NO_RICH``.
    console_kwargs:
        Additional keyword arguments forwarded verbatim to the Console.
    """

    def __init__(
        self,
        *,
        record: bool = False,
        force_use: bool | None = None,
        **console_kwargs: Any,
    ) -> None:
        self._record = record
        self._force_use = force_use
        self._console_kwargs: Dict[str, Any] = console_kwargs
        self.console: Console | None = None

    def __enter__(self) -> Console:
        use_rich = self._force_use if self._force_use is not None else rich_enabled()
        if use_rich:
            self.console = Console(record=self._record, **self._console_kwargs)
            install_rich_traceback(show_locals=False, console=self.console)
        else:
            # Plain output: no colour codes, no terminal control sequences.
            self.console = Console(
                record=self._record,
                color_system=None,
                force_terminal=False,
                **self._console_kwargs,
            )
        return self.console

    def __exit__(self, exc_type, exc_val, exc_tb):  # type: ignore[override]
        if self.console is not None:
            self.console.file.flush()  # type: ignore[attr-defined]
        # Exceptions propagate; typer.Exit in particular must reach Typer.
        return False


def create_batch_progress(console: Console) -> Progress:
    """Return a progress bar for batch operations.

    Disabled (no live rendering) when rich output is turned off.
    """
    return Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        BarColumn(),
        MofNCompleteColumn(),
        TimeElapsedColumn(),
        console=console,
        disable=not rich_enabled(),
        transient=True,
    )


def progress_callback(progress: Progress, task_id: TaskID) -> Callable[[int, int], None]:
    """Adapt a Rich task to the worker pool's ``(completed, total)`` callback."""

    def update(completed: int, total: int) -> None:
        progress.update(task_id, completed=completed, total=total)

    return update
