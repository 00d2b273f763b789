"""Command-line interface for spinerestore.

This package provides the Typer app and the Rich console helpers used by all
CLI commands.

- app: The Typer application object, the single CLI entrypoint.
- ConsoleManager: yields a Rich Console honouring ``--no-rich``.
"""

from spinerestore.cli.commands import app, main
from spinerestore.cli.console import ConsoleManager

__all__ = ["app", "main", "ConsoleManager"]
