#!/usr/bin/env python3
"""
standup CLI - Stand-up meeting helper

Main entrypoint for the standup command-line tool.
"""

import typer
from rich.table import Table

from .commands import backlog, pick, roster, timer
from .render import console

app = typer.Typer(
    name="standup",
    help="Stand-up meeting roster, timer and speaker picker",
    add_completion=False,
)

app.add_typer(roster.app, name="roster", help="Team members and who has spoken")
app.add_typer(timer.app, name="timer", help="Countdown timer")
app.add_typer(backlog.app, name="backlog", help="Part B follow-up topics")

app.command("pick")(pick.pick_command)


@app.command()
def version():
    """Show version information."""
    from standup import __version__

    table = Table(show_header=False, box=None)
    table.add_row("[bold]standup[/bold]", f"v{__version__}")
    console.print(table)


def main():
    """Main entrypoint."""
    app()


if __name__ == "__main__":
    main()
