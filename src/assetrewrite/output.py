"""Display and logging setup for the command line."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from rich.align import Align
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.table import Table

from .pipeline import FileAction

__all__ = [
    "TABLE_WIDTH",
    "configure_logging",
    "console",
    "display_summary",
    "make_kv_table",
    "make_panel",
    "make_table",
]

if TYPE_CHECKING:
    from .pipeline import RewriteSummary

console = Console(stderr=True)

TABLE_WIDTH = 90

ACTION_STYLES = {
    FileAction.REWRITTEN: "green",
    FileAction.UNCHANGED: "dim",
    FileAction.COPIED: "cyan",
    FileAction.SKIPPED: "yellow",
}


def configure_logging(verbose: bool = False) -> None:
    """Route log records through rich on stderr."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, show_path=verbose, markup=False)],
        force=True,
    )


def make_table(title: str | None = None, **kwargs: Any) -> Table:
    """Create a table with standard width and styling."""
    return Table(title=title, show_header=True, width=TABLE_WIDTH, **kwargs)


def make_kv_table(title: str) -> Table:
    """Create a key-value table (Metric | Value)."""
    table = make_table(title)
    table.add_column("Metric", style="cyan", ratio=1)
    table.add_column("Value", style="green", ratio=2, overflow="fold")
    return table


def make_panel(content: str, *, title: str | None = None, style: str = "cyan", center: bool = False) -> Panel:
    """Create a panel with standard width and styling."""
    body = Align.center(content) if center else content
    return Panel(body, title=title, border_style=style, width=TABLE_WIDTH)


def display_summary(summary: RewriteSummary, verbose: bool = False) -> None:
    """Display the outcome of a tree rewrite."""
    console.print()
    console.print(
        make_panel(
            f"{summary.input_dir}\n→ {summary.output_dir}",
            title="[bold cyan]Asset Rewrite[/bold cyan]",
            center=True,
        )
    )
    console.print()

    totals = make_kv_table("Files")
    totals.add_row("Total", str(summary.total))
    for action, style in ACTION_STYLES.items():
        totals.add_row(action.value.capitalize(), f"[{style}]{summary.count(action)}[/{style}]")
    console.print(totals)
    console.print()

    rows = summary.files if verbose else summary.rewritten
    if rows:
        files_table = make_table("All Files" if verbose else "Rewritten Files")
        files_table.add_column("Path", style="cyan", ratio=3, overflow="fold")
        files_table.add_column("Action", ratio=1)
        files_table.add_column("Detail", style="dim", ratio=1, overflow="fold")
        for result in rows:
            style = ACTION_STYLES[result.action]
            files_table.add_row(result.path, f"[{style}]{result.action.value}[/{style}]", result.detail)
        console.print(files_table)
        console.print()

    skipped = summary.count(FileAction.SKIPPED)
    if skipped:
        console.print(f"[yellow]⚠ {skipped} file(s) could not be decoded and were copied unchanged[/yellow]")
    else:
        console.print("[green]✓ All eligible files processed[/green]")
    console.print()
