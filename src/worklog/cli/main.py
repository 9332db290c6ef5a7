"""Main CLI interface for Worklog."""

import functools
import logging
import sys
from typing import Optional

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from worklog import __version__
from worklog.cli.display import (
    format_duration,
    format_hours,
    render_report,
    watch_elapsed,
)
from worklog.core.exceptions import WorklogError
from worklog.core.paths import resolve_log_file
from worklog.core.report import report as build_report
from worklog.core.store import SessionStore
from worklog.models.period import Period

console = Console()
err_console = Console(stderr=True)


def _configure_logging(verbose: bool) -> None:
    """Send worklog log records to stderr through rich."""
    logger = logging.getLogger("worklog")
    logger.handlers.clear()
    logger.addHandler(RichHandler(console=err_console, show_path=False))
    logger.setLevel(logging.DEBUG if verbose else logging.WARNING)
    logger.propagate = False


def _report_errors(func):
    """Print worklog errors to stderr and exit non-zero."""

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except WorklogError as e:
            err_console.print(f"[red]Error: {escape(str(e))}[/red]")
            sys.exit(1)

    return wrapper


def _get_store(ctx: click.Context) -> SessionStore:
    return SessionStore(resolve_log_file(ctx.obj["log_file"]))


@click.group()
@click.version_option(version=__version__, prog_name="worklog")
@click.option(
    "--file",
    "log_file",
    envvar="WORKLOG_FILE",
    type=click.Path(dir_okay=False),
    help="Path to the log file (default: OS data directory).",
)
@click.option("--verbose", "-v", is_flag=True, help="Show debug logging on stderr")
@click.pass_context
def main(ctx: click.Context, log_file: Optional[str], verbose: bool):
    """Worklog - simple work-hours logger."""
    _configure_logging(verbose)
    ctx.obj = {"log_file": log_file}


@main.command()
@click.argument("tag")
@click.option("--watch", is_flag=True, help="Show a live timer until Ctrl+C")
@click.pass_context
@_report_errors
def start(ctx: click.Context, tag: str, watch: bool):
    """Start logging a new activity tagged TAG."""
    store = _get_store(ctx)
    session = store.start(tag)

    console.print(f"[green]Started:[/green] [bold]{escape(session.tag)}[/bold]")
    if watch:
        watch_elapsed(console, session, store.clock)
        console.print("[dim]Display closed, activity is still running.[/dim]")


@main.command()
@click.pass_context
@_report_errors
def stop(ctx: click.Context):
    """Stop the currently running activity."""
    session = _get_store(ctx).stop()
    console.print(
        f"Stopped [bold]{escape(session.tag)}[/bold] "
        f"({format_duration(session.duration)})."
    )


@main.command()
@click.option("--watch", is_flag=True, help="Show a live timer until Ctrl+C")
@click.pass_context
@_report_errors
def status(ctx: click.Context, watch: bool):
    """Show current activity status."""
    store = _get_store(ctx)
    current = store.status()

    if not current.is_active:
        console.print("No active session.")
        return

    console.print(
        f"Currently working on: [bold]{escape(current.session.tag)}[/bold] "
        f"({format_hours(current.elapsed)})"
    )
    if watch:
        watch_elapsed(console, current.session, store.clock)


@main.command()
@click.pass_context
@_report_errors
def reset(ctx: click.Context):
    """Reset (discard) the current activity without logging it."""
    session = _get_store(ctx).reset()
    console.print(f"Reset session: [bold]{escape(session.tag)}[/bold]")


@main.command()
@click.argument("tag")
@click.argument("hours", type=float)
@click.pass_context
@_report_errors
def log(ctx: click.Context, tag: str, hours: float):
    """Log custom HOURS for TAG (e.g. "worklog log mytask 2.5")."""
    session = _get_store(ctx).log_manual(tag, hours)
    console.print(f"Logged {hours:.2f} hours for '{escape(session.tag)}'.")


@main.command()
@click.argument(
    "period",
    type=click.Choice([p.value for p in Period]),
    default=Period.DAILY.value,
)
@click.pass_context
@_report_errors
def report(ctx: click.Context, period: str):
    """Show a report of hours per tag (default: daily)."""
    store = _get_store(ctx)
    result = build_report(store.load(), period)

    if result.is_empty:
        console.print(f"No completed sessions for {period} period.")
        return

    console.print(f"[bold]{period.upper()} report[/bold]")
    console.print(render_report(result))


@main.command()
@click.pass_context
@_report_errors
def path(ctx: click.Context):
    """Show the location of the log file."""
    click.echo(resolve_log_file(ctx.obj["log_file"]))


if __name__ == "__main__":
    main()
