"""
Timer commands: start, stop, status
"""

import time
from typing import Optional

import typer
from rich.live import Live

from ...core.models import TimerState
from ..render import console, render_error, timer_line
from ..session import open_session

app = typer.Typer()

STORE_HELP = "Path to the store file (default: $STANDUP_STORE_PATH)"


def _watch(session) -> None:
    """Refresh once per tick until the countdown reaches zero."""
    interval = session.settings.tick_interval_ms / 1000
    with Live(timer_line(session.timer.query_remaining()), console=console) as live:
        while True:
            view = session.tick_timer()
            live.update(timer_line(view.timer))
            if view.timer.state != TimerState.RUNNING:
                break
            time.sleep(interval)


@app.command()
def start(
    minutes: Optional[int] = typer.Argument(None, help="Length in minutes (default: $STANDUP_DEFAULT_MINUTES)"),
    watch: bool = typer.Option(False, "--watch", "-w", help="Keep refreshing until time is up"),
    store: Optional[str] = typer.Option(None, "--store", help=STORE_HELP),
):
    """
    Start a countdown. It keeps running after this command exits.

    Examples:
        standup timer start 10
        standup timer start --watch
    """
    with open_session(store) as session:
        value = minutes if minutes is not None else session.settings.default_minutes
        outcome = session.start_timer(value)
        if not outcome.ok:
            render_error(outcome.message)
            raise typer.Exit(1)
        if watch:
            _watch(session)
        else:
            console.print(timer_line(outcome.unwrap().timer))


@app.command()
def stop(store: Optional[str] = typer.Option(None, "--store", help=STORE_HELP)):
    """Clear the countdown."""
    with open_session(store) as session:
        console.print(timer_line(session.stop_timer().timer))


@app.command()
def status(
    watch: bool = typer.Option(False, "--watch", "-w", help="Keep refreshing until time is up"),
    store: Optional[str] = typer.Option(None, "--store", help=STORE_HELP),
):
    """Show the remaining time of the current countdown."""
    with open_session(store) as session:
        reading = session.timer.query_remaining()
        if reading.state == TimerState.IDLE:
            console.print("[yellow]No timer running[/yellow]")
            return
        if watch and reading.state == TimerState.RUNNING:
            _watch(session)
        else:
            console.print(timer_line(reading))
