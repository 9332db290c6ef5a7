"""Terminal rendering helpers for the worklog CLI."""

import time
from typing import Callable

from rich.console import Console
from rich.live import Live
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from worklog.core.report import Report
from worklog.models.session import Session


def format_duration(seconds: int) -> str:
    """Format seconds as HH:MM:SS."""
    seconds = max(0, int(seconds))
    hours, remainder = divmod(seconds, 3600)
    minutes, secs = divmod(remainder, 60)
    return f"{hours:02d}:{minutes:02d}:{secs:02d}"


def format_hours(seconds: int) -> str:
    return f"{seconds / 3600.0:.2f}h"


def render_report(report: Report) -> Table:
    """Build the per-tag totals table."""
    table = Table(show_footer=len(report.rows) > 1)
    table.add_column("Tag", footer="Total")
    table.add_column(
        "Total (h)", justify="right", footer=f"{report.total_hours:.2f}"
    )

    for row in report.rows:
        table.add_row(escape(row.tag), f"{row.hours:.2f}")

    return table


def _timer_panel(session: Session, now: int) -> Panel:
    elapsed = Text.assemble(
        "⏱  Time elapsed: ",
        (format_duration(session.elapsed(now)), "bold green"),
    )
    return Panel(
        elapsed,
        title=f"🚀 {escape(session.tag)}",
        subtitle="Ctrl+C closes the display, the session keeps running",
    )


def watch_elapsed(
    console: Console,
    session: Session,
    clock: Callable[[], int],
    interval: float = 1.0,
) -> None:
    """Redraw the elapsed time of ``session`` until interrupted.

    Display only: nothing is written to the store.
    """
    with Live(_timer_panel(session, clock()), console=console, auto_refresh=False) as live:
        try:
            while True:
                time.sleep(interval)
                live.update(_timer_panel(session, clock()), refresh=True)
        except KeyboardInterrupt:
            return
