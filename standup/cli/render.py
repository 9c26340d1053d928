"""
Rich renderers for SessionView and friends.
"""

from typing import Optional, Sequence

from rich.console import Console
from rich.progress_bar import ProgressBar
from rich.table import Table

from ..core.models import Band, BacklogItem, Participant, PickSession, TimerReading
from ..coordinator import SessionView

console = Console()

BAND_STYLES = {
    Band.NEUTRAL: "green",
    Band.WARNING: "yellow",
    Band.DANGER: "red",
}


def roster_table(participants: Sequence[Participant], title: str) -> Table:
    table = Table(title=title)
    table.add_column("#", style="dim", justify="right")
    table.add_column("", width=2)
    table.add_column("Name", style="cyan")
    table.add_column("Spoken", justify="center")

    for idx, p in enumerate(participants, start=1):
        table.add_row(
            str(idx),
            p.initials,
            p.full_name,
            "[green]✓[/green]" if p.spoken else "",
        )
    return table


def backlog_table(items: Sequence[BacklogItem], title: str) -> Table:
    table = Table(title=title)
    table.add_column("ID", style="dim")
    table.add_column("Topic", style="cyan")
    table.add_column("Done", justify="center")

    for item in items:
        text = f"[strike]{item.text}[/strike]" if item.completed else item.text
        table.add_row(item.id, text, "[green]✓[/green]" if item.completed else "")
    return table


def timer_line(reading: TimerReading) -> Table:
    style = BAND_STYLES[reading.band]
    grid = Table.grid(padding=(0, 2))
    grid.add_row(
        f"[bold {style}]{reading.display}[/bold {style}]",
        ProgressBar(total=100, completed=reading.percentage, width=40, complete_style=style),
        f"[dim]{reading.state.value}[/dim]",
    )
    return grid


def pick_summary(pick: PickSession) -> str:
    return f"[bold magenta]{pick.winner.full_name}[/bold magenta]"


def render_view(view: SessionView, matches: Optional[Sequence[Participant]] = None) -> None:
    """Render the roster, or only the search matches when given."""
    participants = view.roster if matches is None else matches

    if participants:
        console.print(roster_table(participants, f"Team {view.spoken_counter}"))
    elif matches is not None:
        console.print("[yellow]No team members match your search.[/yellow]")
    else:
        console.print("[yellow]No team members available.[/yellow]")

    console.print(timer_line(view.timer))
    render_notices(view)


def render_notices(view: SessionView) -> None:
    if view.notice:
        console.print(f"[green]{view.notice}[/green]")
    if view.degraded:
        console.print("[yellow]Warning: changes could not be saved[/yellow]")


def render_error(message: Optional[str]) -> None:
    console.print(f"[red]Error:[/red] {message}")
