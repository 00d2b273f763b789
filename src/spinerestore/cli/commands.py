"""CLI commands for spinerestore.

This module implements all user-facing CLI commands: extension restoration,
organizing atlas/skeleton files, renaming PNGs by size, content search, work
directory info and settings.
- Uses Typer for declarative CLI structure and option parsing.
- All output is routed through a Rich Console for consistent, styled UX.

Design:
- The global callback resolves the work directory once and derives the sibling
  ``atlas`` and ``skels`` directories from it; commands read it from
  ``ctx.obj``.
- Annotated is used for CLI argument/option definitions.
- Exit codes are defined as an Enum: batches that finish with per-file failures
  exit with PARTIAL_FAILURE rather than ERROR.
"""

import os
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Annotated, Callable, List, Optional

import typer
from rich.console import Console
from rich.markup import escape

from spinerestore.cli.console import (
    ConsoleManager,
    create_batch_progress,
    progress_callback,
)
from spinerestore.cli.renderer import render_batch, render_search
from spinerestore.core.relocator import (
    organize_spine_assets,
    rename_png_by_size,
    restore_extensions,
)
from spinerestore.core.scanner import count_files
from spinerestore.core.searcher import search_atlas, search_skel
from spinerestore.models.core import BatchResult
from spinerestore.utils import config
from spinerestore.utils.debug import setup_logger

app = typer.Typer(
    name="spinerestore",
    help="Restore stripped extensions of Spine assets and organize them.",
    no_args_is_help=True,
)


class ExitCode(int, Enum):
    """Exit codes for CLI commands."""

    SUCCESS = 0
    ERROR = 1
    PARTIAL_FAILURE = 2


@dataclass
class WorkLayout:
    """Work directory plus the sibling directories assets are organized into."""

    work_dir: Path
    atlas_dir: Path
    skel_dir: Path

    @classmethod
    def from_work_dir(
        cls,
        work_dir: Path,
        atlas_name: str = config.DEFAULT_ATLAS_DIR,
        skel_name: str = config.DEFAULT_SKEL_DIR,
    ) -> "WorkLayout":
        work_dir = work_dir.expanduser().absolute()
        parent = work_dir.parent
        return cls(
            work_dir=work_dir,
            atlas_dir=parent / atlas_name,
            skel_dir=parent / skel_name,
        )


WORK_DIR = Annotated[
    Optional[Path],
    typer.Option(
        "--work-dir",
        "-w",
        file_okay=False,
        dir_okay=True,
        help="Directory with the extracted assets (default: config "
        "paths.work_dir, else the current directory).",
    ),
]

NO_RICH = Annotated[
    bool,
    typer.Option(
        "--no-rich",
        help="Disable Rich colour and progress bars. "
        "Can also be set with the SPINERESTORE_NO_RICH environment variable.",
    ),
]

YES = Annotated[
    bool,
    typer.Option("--yes", "-y", help="Do not ask for confirmation"),
]

DRY_RUN = Annotated[
    bool,
    typer.Option("--dry-run", help="Show what would be moved without moving it"),
]

WORKERS = Annotated[
    Optional[int],
    typer.Option(
        "--workers",
        min=0,
        help="Worker threads (0 = one per CPU; default from config)",
    ),
]


@app.callback()
def callback(
    ctx: typer.Context,
    work_dir: WORK_DIR = None,
    no_rich: NO_RICH = False,
) -> None:
    """Resolve the work directory layout shared by all commands."""
    if no_rich:
        os.environ["SPINERESTORE_NO_RICH"] = "1"
    setup_logger()
    resolved = config.resolve_setting(
        "paths.work_dir", default=Path.cwd(), cli_value=work_dir
    )
    ctx.obj = WorkLayout.from_work_dir(
        Path(resolved),
        config.resolve_setting("layout.atlas_dir", default=config.DEFAULT_ATLAS_DIR),
        config.resolve_setting("layout.skel_dir", default=config.DEFAULT_SKEL_DIR),
    )


def _layout(ctx: typer.Context) -> WorkLayout:
    layout = ctx.find_object(WorkLayout)
    if layout is None:
        layout = WorkLayout.from_work_dir(Path.cwd())
    return layout


def _require_dir(console: Console, path: Path, label: str) -> None:
    if not path.is_dir():
        console.print(
            f"[red]Error: {label} does not exist: {escape(str(path))}[/red]",
            soft_wrap=True,
        )
        raise typer.Exit(ExitCode.ERROR)


def _confirm(prompt: str, yes: bool, dry_run: bool) -> bool:
    return yes or dry_run or typer.confirm(prompt, default=True)


def _run_batches(
    console: Console,
    description: str,
    run: Callable[..., List[BatchResult]],
) -> int:
    """Run batch operation(s) under a progress bar and render the results."""
    try:
        with create_batch_progress(console) as progress:
            task_id = progress.add_task(description, total=None)
            results = run(progress_callback(progress, task_id))
    except (FileNotFoundError, ValueError) as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        return ExitCode.ERROR
    for result in results:
        render_batch(result, console=console)
    if any(result.failed for result in results):
        return ExitCode.PARTIAL_FAILURE
    return ExitCode.SUCCESS


@app.command()
def restore(
    ctx: typer.Context,
    yes: YES = False,
    dry_run: DRY_RUN = False,
    workers: WORKERS = None,
) -> None:
    """Restore missing file extensions from file content."""
    layout = _layout(ctx)
    with ConsoleManager() as console:
        _require_dir(console, layout.work_dir, "Work directory")
        if not _confirm(
            f"Restore extensions of all files in {layout.work_dir}?", yes, dry_run
        ):
            raise typer.Exit(ExitCode.SUCCESS)
        code = _run_batches(
            console,
            "Restoring file extensions...",
            lambda progress: [
                restore_extensions(
                    layout.work_dir, dry_run=dry_run, workers=workers, progress=progress
                )
            ],
        )
    raise typer.Exit(code)


@app.command()
def organize(
    ctx: typer.Context,
    yes: YES = False,
    dry_run: DRY_RUN = False,
    workers: WORKERS = None,
) -> None:
    """Move .atlas and .skel files into the sibling atlas/skels directories."""
    layout = _layout(ctx)
    with ConsoleManager() as console:
        _require_dir(console, layout.work_dir, "Work directory")
        if not _confirm(
            f"Move .atlas files to {layout.atlas_dir} and .skel files to "
            f"{layout.skel_dir}?",
            yes,
            dry_run,
        ):
            raise typer.Exit(ExitCode.SUCCESS)
        code = _run_batches(
            console,
            "Organizing files...",
            lambda progress: organize_spine_assets(
                layout.work_dir,
                layout.atlas_dir,
                layout.skel_dir,
                dry_run=dry_run,
                workers=workers,
                progress=progress,
            ),
        )
    raise typer.Exit(code)


@app.command("rename-png")
def rename_png(
    ctx: typer.Context,
    yes: YES = False,
    dry_run: DRY_RUN = False,
    workers: WORKERS = None,
) -> None:
    """Rename every PNG to size_<width>x<height>.png."""
    layout = _layout(ctx)
    with ConsoleManager() as console:
        _require_dir(console, layout.work_dir, "Work directory")
        if not _confirm(
            f"Rename all PNG files in {layout.work_dir} by size?", yes, dry_run
        ):
            raise typer.Exit(ExitCode.SUCCESS)
        code = _run_batches(
            console,
            "Renaming PNG files...",
            lambda progress: [
                rename_png_by_size(
                    layout.work_dir, dry_run=dry_run, workers=workers, progress=progress
                )
            ],
        )
    raise typer.Exit(code)


@app.command("search-atlas")
def search_atlas_command(
    ctx: typer.Context,
    text: Annotated[str, typer.Argument(help="Text to look for, e.g. 2017,1937")],
    workers: WORKERS = None,
) -> None:
    """Search .atlas files in the atlas directory for a substring."""
    layout = _layout(ctx)
    with ConsoleManager() as console:
        _require_dir(console, layout.atlas_dir, "Atlas directory")
        if not text.strip():
            console.print("[yellow]Search text must not be empty.[/yellow]")
            raise typer.Exit(ExitCode.ERROR)
        result = search_atlas(layout.atlas_dir, text, workers=workers)
        render_search(result, console=console)


@app.command("search-skel")
def search_skel_command(
    ctx: typer.Context,
    terms: Annotated[
        List[str], typer.Argument(help="Terms that must all appear in a file")
    ],
    workers: WORKERS = None,
) -> None:
    """Search .skel files in the skels directory for all given terms."""
    layout = _layout(ctx)
    with ConsoleManager() as console:
        _require_dir(console, layout.skel_dir, "Skels directory")
        if not any(term.strip() for term in terms):
            console.print("[yellow]Search terms must not be empty.[/yellow]")
            raise typer.Exit(ExitCode.ERROR)
        result = search_skel(layout.skel_dir, terms, workers=workers)
        render_search(result, console=console)


@app.command()
def info(ctx: typer.Context) -> None:
    """Show the work directory layout and file counts."""
    layout = _layout(ctx)
    with ConsoleManager() as console:
        console.print("[green]=== Work directory info ===[/green]")
        for label, path in (
            ("Work directory", layout.work_dir),
            ("Atlas directory", layout.atlas_dir),
            ("Skels directory", layout.skel_dir),
        ):
            if path.is_dir():
                detail = f"{count_files(path)} file(s)"
            else:
                detail = "missing"
            console.print(
                f"[yellow]{label}[/yellow]: {escape(str(path))} ({detail})",
                soft_wrap=True,
            )


@app.command("config-set")
def config_set(
    key: Annotated[str, typer.Argument(help="Dotted key, e.g. layout.atlas_dir")],
    value: Annotated[str, typer.Argument(help="Value to store")],
) -> None:
    """Persist a setting in the config file."""
    with ConsoleManager() as console:
        try:
            config.set_setting(key, config.parse_setting_value(value))
        except ValueError as e:
            console.print(f"[red]Error: {escape(str(e))}[/red]")
            raise typer.Exit(ExitCode.ERROR)
        console.print(
            f"Saved {escape(key)} to {escape(str(config.CONFIG_FILE))}", soft_wrap=True
        )


@app.command()
def version() -> None:
    """Show the version of spinerestore."""
    from spinerestore.__about__ import __version__

    with ConsoleManager() as console:
        console.print(f"spinerestore version: [bold]{__version__}[/bold]")


def main() -> None:
    """Main entry point for the CLI."""
    app()
