"""
Roster commands: list, add, remove, toggle, shuffle, reset, import, export
"""

from pathlib import Path
from typing import Optional

import typer

from ..render import console, render_error, render_view
from ..session import open_session

app = typer.Typer()

STORE_HELP = "Path to the store file (default: $STANDUP_STORE_PATH)"


@app.command("list")
def list_command(
    search: Optional[str] = typer.Option(None, "--search", "-q", help="Filter by name"),
    store: Optional[str] = typer.Option(None, "--store", help=STORE_HELP),
):
    """
    Show the team and who has spoken.

    Examples:
        standup roster list
        standup roster list --search jan
    """
    with open_session(store) as session:
        matches = session.search_roster(search) if search else None
        render_view(session.view(), matches=matches)


@app.command()
def add(
    first_name: str = typer.Argument(..., help="First name"),
    last_name: str = typer.Argument(..., help="Last name"),
    store: Optional[str] = typer.Option(None, "--store", help=STORE_HELP),
):
    """Add a team member."""
    with open_session(store) as session:
        outcome = session.add_participant(first_name, last_name)
        if not outcome.ok:
            render_error(outcome.message)
            raise typer.Exit(1)
        render_view(outcome.unwrap())


@app.command()
def remove(
    first_name: str = typer.Argument(..., help="First name"),
    last_name: str = typer.Argument(..., help="Last name"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
    store: Optional[str] = typer.Option(None, "--store", help=STORE_HELP),
):
    """Remove a team member."""
    with open_session(store) as session:
        if not yes and not typer.confirm(f"Remove {first_name} {last_name} from the list?"):
            raise typer.Exit(0)
        render_view(session.remove_participant((first_name, last_name)))


@app.command()
def toggle(
    first_name: str = typer.Argument(..., help="First name"),
    last_name: str = typer.Argument(..., help="Last name"),
    store: Optional[str] = typer.Option(None, "--store", help=STORE_HELP),
):
    """Flip a team member's spoken flag."""
    with open_session(store) as session:
        render_view(session.toggle_participant((first_name, last_name)))


@app.command()
def shuffle(store: Optional[str] = typer.Option(None, "--store", help=STORE_HELP)):
    """Randomize the speaking order."""
    with open_session(store) as session:
        render_view(session.shuffle_roster())


@app.command()
def reset(store: Optional[str] = typer.Option(None, "--store", help=STORE_HELP)):
    """Start a new round: mark everyone as not yet spoken."""
    with open_session(store) as session:
        render_view(session.reset_round())


@app.command("import")
def import_command(
    path: Path = typer.Argument(..., help="JSON file with firstName/lastName entries"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
    store: Optional[str] = typer.Option(None, "--store", help=STORE_HELP),
):
    """
    Replace the team with the contents of a JSON file.

    Examples:
        standup roster import scrum_team.json
    """
    try:
        payload = path.read_text(encoding="utf-8")
    except OSError as e:
        render_error(f"cannot read {path}: {e}")
        raise typer.Exit(2)

    with open_session(store) as session:
        if not yes and not typer.confirm("Import team? This will replace the current list."):
            raise typer.Exit(0)
        outcome = session.import_roster(payload)
        if not outcome.ok:
            render_error(outcome.message)
            raise typer.Exit(1)
        render_view(outcome.unwrap())


@app.command()
def export(
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Write to file instead of stdout"),
    store: Optional[str] = typer.Option(None, "--store", help=STORE_HELP),
):
    """
    Export the team as JSON.

    Examples:
        standup roster export
        standup roster export -o scrum_team.json
    """
    with open_session(store) as session:
        payload = session.export_roster()

    if output is None:
        print(payload)
        return
    output.write_text(payload + "\n", encoding="utf-8")
    console.print(f"[green]✓ Exported team to[/green] {output}")
