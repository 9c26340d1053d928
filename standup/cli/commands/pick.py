"""
Pick command: spin the reel and optionally mark the winner as spoken
"""

import time
from typing import Optional

import typer
from rich.live import Live

from ..render import console, pick_summary, render_error, render_notices
from ..session import open_session

STORE_HELP = "Path to the store file (default: $STANDUP_STORE_PATH)"


def pick_command(
    commit: bool = typer.Option(False, "--commit", "-c", help="Mark the winner as spoken without asking"),
    animate: bool = typer.Option(True, "--animate/--no-animate", help="Show the spinning reel"),
    store: Optional[str] = typer.Option(None, "--store", help=STORE_HELP),
):
    """
    Randomly pick the next speaker among those who have not spoken.

    Examples:
        standup pick
        standup pick --commit --no-animate
    """
    with open_session(store) as session:
        outcome = session.run_picker()
        if not outcome.ok:
            render_error(outcome.message)
            raise typer.Exit(1)

        pick = outcome.unwrap().pick
        if animate:
            # Spread the spin over the configured animation length
            delay = session.settings.picker_spin_ms / 1000 / len(pick.reel)
            with Live(console=console, transient=True) as live:
                for entry in pick.reel[: pick.winner_slot + 1]:
                    live.update(f"🎰 {entry.full_name}")
                    time.sleep(delay)
        view = session.finish_picker()
        console.print(f"Next up: {pick_summary(view.pick)}")

        if commit or typer.confirm("Mark as spoken?", default=True):
            committed = session.commit_picker_winner()
            if not committed.ok:
                render_error(committed.message)
                raise typer.Exit(1)
            render_notices(committed.unwrap())
        else:
            session.close_picker()
