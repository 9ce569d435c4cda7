"""
Rendering functions for shipline output.

This module handles all pretty-printing and table formatting.
The runner returns data; this module makes it human-readable.
"""

from rich.table import Table
from rich.console import Console
from rich import box
from typing import List, Optional, Sequence

from .domain.target import RunSummary, Target, TargetStatus

console = Console()

STATUS_STYLES = {
    TargetStatus.EXECUTED: ("Succeeded", "green"),
    TargetStatus.SKIPPED: ("Skipped", "yellow"),
    TargetStatus.FAILED: ("Failed", "bold red"),
    TargetStatus.NOT_RUN: ("Not run", "dim"),
}


def _format_duration(seconds: float) -> str:
    if seconds <= 0:
        return "< 1ms"
    if seconds < 60:
        return f"{seconds:.1f}s"
    minutes, secs = divmod(int(seconds), 60)
    return f"{minutes}:{secs:02d}"


def render_summary(summary: RunSummary, version: Optional[str] = None) -> None:
    """
    Render the per-target outcome of a run as a table.

    Args:
        summary: RunSummary from TargetRunner.run
        version: Optional version string for the title
    """
    if not summary.results:
        console.print("[yellow]No targets were run.[/yellow]")
        return

    title = "Build Summary" if not version else f"Build Summary ({version})"
    table = Table(
        title=title,
        box=box.ROUNDED,
        show_header=True,
        header_style="bold magenta"
    )
    table.add_column("Target", style="cyan", no_wrap=True)
    table.add_column("Status")
    table.add_column("Duration", justify="right")

    for result in summary.results:
        label, style = STATUS_STYLES[result.status]
        duration = _format_duration(result.duration) if result.status == TargetStatus.EXECUTED else ""
        table.add_row(result.name, f"[{style}]{label}[/{style}]", duration)

    table.add_row("Total", "", _format_duration(summary.total_duration), style="bold")
    console.print(table)

    if summary.success:
        console.print("[bold green]Build succeeded[/bold green]")
    else:
        console.print("[bold red]Build failed[/bold red]")


def render_plan(order: Sequence[str], skip: Sequence[str] = ()) -> None:
    """Render the execution plan as a numbered list."""
    for index, name in enumerate(order, 1):
        suffix = " [yellow](skipped)[/yellow]" if name in skip else ""
        console.print(f"{index}. [cyan]{name}[/cyan]{suffix}")


def render_targets(targets: List[Target], default: str) -> None:
    """Render every defined target with its dependencies."""
    table = Table(
        title="Targets",
        box=box.ROUNDED,
        show_header=True,
        header_style="bold magenta"
    )
    table.add_column("Target", style="cyan", no_wrap=True)
    table.add_column("Depends on", style="dim")
    table.add_column("Description")

    for target in targets:
        name = f"{target.name} (default)" if target.name == default else target.name
        table.add_row(name, ", ".join(target.depends_on), target.description)

    console.print(table)
