"""
Backlog ("Part B") commands: list, add, toggle, remove, clear
"""

from typing import Optional

import typer

from ..render import backlog_table, console, render_error, render_notices
from ..session import open_session

app = typer.Typer()

STORE_HELP = "Path to the store file (default: $STANDUP_STORE_PATH)"


def _show(view) -> None:
    if view.backlog:
        console.print(backlog_table(view.backlog, f"Part B {view.backlog_counter}"))
    else:
        console.print("[dim]No Part B items yet.[/dim]")
    render_notices(view)


@app.command("list")
def list_command(store: Optional[str] = typer.Option(None, "--store", help=STORE_HELP)):
    """Show follow-up topics."""
    with open_session(store) as session:
        _show(session.view())


@app.command()
def add(
    text: str = typer.Argument(..., help="Topic to discuss after the stand-up"),
    store: Optional[str] = typer.Option(None, "--store", help=STORE_HELP),
):
    """Park a topic for after the stand-up."""
    with open_session(store) as session:
        outcome = session.add_backlog_item(text)
        if not outcome.ok:
            render_error(outcome.message)
            raise typer.Exit(1)
        _show(outcome.unwrap())


@app.command()
def toggle(
    item_id: str = typer.Argument(..., help="Item ID"),
    store: Optional[str] = typer.Option(None, "--store", help=STORE_HELP),
):
    """Mark a topic done or not done."""
    with open_session(store) as session:
        _show(session.toggle_backlog_item(item_id))


@app.command()
def remove(
    item_id: str = typer.Argument(..., help="Item ID"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
    store: Optional[str] = typer.Option(None, "--store", help=STORE_HELP),
):
    """Delete a topic."""
    with open_session(store) as session:
        if not yes and not typer.confirm(f"Remove item {item_id} from Part B items?"):
            raise typer.Exit(0)
        _show(session.remove_backlog_item(item_id))


@app.command()
def clear(
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
    store: Optional[str] = typer.Option(None, "--store", help=STORE_HELP),
):
    """Delete every completed topic."""
    with open_session(store) as session:
        if not yes and not typer.confirm("Clear completed Part B item(s)?"):
            raise typer.Exit(0)
        _show(session.clear_completed_backlog())
