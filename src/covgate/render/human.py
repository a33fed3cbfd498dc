from __future__ import annotations

from typing import TYPE_CHECKING

from rich import box
from rich.console import Console
from rich.table import Table

if TYPE_CHECKING:
    from collections.abc import Sequence

    from covgate.core.model.thresholds import ThresholdResult


# --------------------------- Formatting --------------------------------------
def _format_percent(value: float) -> str:
    return f"{value:.2f}%"


def _style_received(result: ThresholdResult) -> str:
    gap = result.expected - result.received
    return f"[red]{_format_percent(result.received)}[/red] [dim](-{gap:.2f})[/dim]"


# --------------------------- Table -------------------------------------------
def _build_table(results: Sequence[ThresholdResult]) -> Table:
    table = Table(title="Coverage Thresholds", box=box.SIMPLE_HEAVY, header_style="bold", expand=True)

    table.add_column("Path", style="cyan", overflow="fold")
    table.add_column("Metric")
    table.add_column("Expected", justify="right")
    table.add_column("Received", justify="right")

    for r in results:
        table.add_row(r.path, r.type.value, _format_percent(r.expected), _style_received(r))
    return table


def render_results(results: Sequence[ThresholdResult], *, color: bool = False, width: int | None = None) -> str:
    """Return the threshold violations as a Rich-rendered table, or a pass line."""
    console = Console(color_system="auto" if color else None, force_terminal=color, width=width)
    with console.capture() as cap:
        if not results:
            console.print("[green]All coverage thresholds met.[/green]")
        else:
            console.print(_build_table(results))
            console.print(f"[bold red]{len(results)} coverage threshold(s) not met.[/bold red]")
    return cap.get()


__all__ = ["render_results"]
