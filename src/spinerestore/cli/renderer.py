"""Renderer for CLI output.

Batch results are shown as a Rich table of moved and failed files followed by a
one-line summary; search results as a list of matching paths.
"""

from pathlib import Path

from rich.console import Console
from rich.markup import escape
from rich.table import Table
from rich.text import Text

from spinerestore.models.core import BatchResult, OutcomeStatus
from spinerestore.models.search import SearchResult

STATUS_STYLES = {
    OutcomeStatus.MOVED: "green",
    OutcomeStatus.PLANNED: "yellow",
    OutcomeStatus.SKIPPED: "cyan",
    OutcomeStatus.FAILED: "red bold",
}


def _relative(path: Path, root: Path) -> str:
    try:
        return str(path.relative_to(root))
    except ValueError:
        return str(path)


def render_batch(
    result: BatchResult, console: Console | None = None, *, show_skipped: bool = False
) -> None:
    """Render a batch result as a table plus summary.

    Skipped files are hidden unless *show_skipped* is set; in a typical run
    they are the majority and carry no action.
    """
    console = console or Console()

    rows = [
        outcome
        for outcome in result.outcomes
        if show_skipped or outcome.status != OutcomeStatus.SKIPPED
    ]
    if rows:
        table = Table(title=result.operation)
        table.add_column("Status", style="bold")
        table.add_column("Source", style="cyan")
        table.add_column("Destination", style="green")
        table.add_column("Reason", style="yellow")
        for outcome in rows:
            table.add_row(
                outcome.status.value,
                Text(_relative(outcome.source, result.root)),
                Text(str(outcome.destination) if outcome.destination else ""),
                Text(outcome.error or ""),
                style=STATUS_STYLES.get(outcome.status, "white"),
            )
        console.print(table)

    moved = result.moved + result.planned
    verb = "planned" if result.planned else "moved"
    console.print(
        f"{result.operation}: {moved} {verb} | {result.skipped} skipped | "
        f"{result.failed} failed"
    )
    if result.failed:
        console.print(f"Failed items: {result.failed}", style="red bold")


def render_search(result: SearchResult, console: Console | None = None) -> None:
    """Render search matches and read errors."""
    console = console or Console()
    if not result.scanned:
        root = escape(str(result.root))
        console.print(f"[yellow]No candidate files found in {root}[/yellow]")
        return
    if not result.matches:
        console.print("[yellow]No matching files found.[/yellow]")
    else:
        console.print(f"[green]Found {len(result.matches)} matching file(s):[/green]")
        for path in sorted(result.matches):
            console.print(f"  {path}", soft_wrap=True, markup=False, highlight=False)
    for path, message in result.errors:
        console.print(
            f"Error reading {path}: {message}",
            style="red",
            soft_wrap=True,
            markup=False,
        )
