"""
Session coordinator: the façade a UI shell talks to.

Owns what used to be process-wide popup state (roster, backlog, celebration
flag, current pick) for one open/close lifecycle. Every state change is
followed by a render callback with a fresh read-only SessionView.
"""

import json
import logging
import random
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Optional, Sequence, Tuple

from .backlog import BacklogEngine
from .config import Settings
from .core.clock import SystemClock
from .core.canonical import pretty_json_str
from .core.errors import ValidationError
from .core.models import (
    BacklogItem,
    Participant,
    PickSession,
    TimerReading,
    TimerState,
    name_identity,
)
from .core.outcome import Outcome
from .picker import PickerEngine
from .roster import RosterEngine
from .scheduling import Handle, Scheduler
from .store import GuardedStore, KeyValueStore
from .timer import TimerEngine, step_minutes

logger = logging.getLogger(__name__)


class PickerPhase(str, Enum):
    CLOSED = "closed"
    SPINNING = "spinning"
    FINISHED = "finished"


@dataclass(frozen=True)
class SessionView:
    """
    Everything a renderer needs, as of one moment.

    celebrate is a one-shot signal: True only in the view produced by the
    call that completed the round. notice is a short confirmation message
    for a toast, if any.
    """
    roster: Tuple[Participant, ...]
    spoken_count: int
    timer: TimerReading
    backlog: Tuple[BacklogItem, ...]
    backlog_completed: int
    pick: Optional[PickSession]
    picker_phase: PickerPhase
    celebrate: bool = False
    notice: Optional[str] = None
    degraded: bool = False

    @property
    def spoken_counter(self) -> str:
        return f"{self.spoken_count}/{len(self.roster)}"

    @property
    def backlog_counter(self) -> str:
        return f"{self.backlog_completed}/{len(self.backlog)}"


RenderCallback = Callable[[SessionView], None]

CELEBRATION_NOTICE = "🎉 All team members have spoken! 🎉"


class SessionCoordinator:
    """
    One UI session over the roster, backlog, timer and picker engines.

    Usage:
        coordinator = SessionCoordinator(FileStore(path), on_render=render)
        coordinator.open()
        coordinator.toggle_participant(("Jane", "Doe"))
        coordinator.close()
    """

    def __init__(
        self,
        store: Optional[KeyValueStore],
        clock=None,
        rng: Optional[random.Random] = None,
        scheduler: Optional[Scheduler] = None,
        on_render: Optional[RenderCallback] = None,
        settings: Optional[Settings] = None,
    ) -> None:
        self.settings = settings or Settings()
        self._store = GuardedStore(store)
        self._clock = clock or SystemClock()
        self._rng = rng or random.Random()
        self._scheduler = scheduler
        self._on_render = on_render

        self.roster = RosterEngine(self._store, self._rng)
        self.backlog = BacklogEngine(self._store, self._clock)
        self.timer = TimerEngine(self._store, self._clock, self.settings.stale_after_ms)
        self.picker = PickerEngine(self._rng)

        self._celebrated = False
        self._pick: Optional[PickSession] = None
        self._picker_phase = PickerPhase.CLOSED
        self._tick_handle: Optional[Handle] = None
        self._picker_handle: Optional[Handle] = None

    # ── Lifecycle ──

    def open(self) -> SessionView:
        """Rehydrate everything from the store and re-arm the timer tick."""
        self.roster.load()
        self.backlog.load()
        # A round finished in an earlier session is not celebrated again
        self._celebrated = self.roster.all_spoken()
        if self.timer.recover_on_load() == TimerState.RUNNING:
            self._arm_tick()
        return self._render()

    def close(self) -> None:
        self._cancel_tick()
        self._cancel_picker_delay()
        self._pick = None
        self._picker_phase = PickerPhase.CLOSED

    # ── View ──

    def view(self, celebrate: bool = False, notice: Optional[str] = None) -> SessionView:
        return SessionView(
            roster=self.roster.roster,
            spoken_count=self.roster.spoken_count(),
            timer=self.timer.query_remaining(),
            backlog=self.backlog.items,
            backlog_completed=self.backlog.completed_count(),
            pick=self._pick,
            picker_phase=self._picker_phase,
            celebrate=celebrate,
            notice=notice,
            degraded=self._store.degraded,
        )

    def _render(self, celebrate: bool = False, notice: Optional[str] = None) -> SessionView:
        view = self.view(celebrate=celebrate, notice=notice)
        if self._on_render is not None:
            self._on_render(view)
        return view

    def _roster_changed(self, notice: Optional[str] = None, membership: bool = False) -> SessionView:
        """
        Render after a roster mutation, raising the celebration at most once.

        membership marks add/remove/import: if those leave someone unspoken
        the round is open again.
        """
        all_spoken = self.roster.all_spoken()
        if membership and not all_spoken:
            self._celebrated = False
        if all_spoken and not self._celebrated:
            self._celebrated = True
            logger.info("All participants have spoken")
            return self._render(celebrate=True, notice=CELEBRATION_NOTICE)
        return self._render(notice=notice)

    # ── Roster ──

    def add_participant(self, first_name: str, last_name: str) -> Outcome[SessionView]:
        outcome = self.roster.add(first_name, last_name)
        if not outcome.ok:
            return Outcome.failure(outcome.error)  # type: ignore[arg-type]
        added = self.roster.roster[-1]
        return Outcome.success(self._roster_changed(f"{added.full_name} added", membership=True))

    def remove_participant(self, identity: Sequence[str]) -> SessionView:
        first, last = identity
        removed = self.roster.get(name_identity(first, last))
        self.roster.remove(identity)
        notice = f"{removed.full_name} removed" if removed else None
        return self._roster_changed(notice, membership=True)

    def toggle_participant(self, identity: Sequence[str]) -> SessionView:
        self.roster.toggle_spoken(identity)
        return self._roster_changed()

    def shuffle_roster(self) -> SessionView:
        self.roster.shuffle()
        return self._roster_changed()

    def reset_round(self) -> SessionView:
        self.roster.reset_all_spoken()
        self._celebrated = False
        return self._roster_changed()

    def import_roster(self, payload: Any) -> Outcome[SessionView]:
        """Accepts JSON text/bytes or an already-decoded list."""
        if isinstance(payload, (str, bytes, bytearray)):
            try:
                payload = json.loads(payload)
            except ValueError:
                return Outcome.failure(ValidationError("Error parsing JSON file."))
        outcome = self.roster.import_snapshot(payload)
        if not outcome.ok:
            return Outcome.failure(outcome.error)  # type: ignore[arg-type]
        return Outcome.success(
            self._roster_changed("Team list imported successfully", membership=True)
        )

    def export_roster(self) -> str:
        return pretty_json_str(self.roster.export_snapshot())

    def search_roster(self, query: str) -> Tuple[Participant, ...]:
        return self.roster.search(query)

    # ── Timer ──

    def start_timer(self, minutes: Any) -> Outcome[SessionView]:
        outcome = self.timer.start(minutes)
        if not outcome.ok:
            return Outcome.failure(outcome.error)  # type: ignore[arg-type]
        self._arm_tick()
        return Outcome.success(self._render())

    def stop_timer(self) -> SessionView:
        self._cancel_tick()
        self.timer.stop()
        return self._render()

    def tick_timer(self) -> SessionView:
        """Periodic refresh; stops ticking once the countdown reaches zero."""
        view = self._render()
        if view.timer.state != TimerState.RUNNING:
            self._cancel_tick()
        return view

    def step_timer_minutes(self, value: Any, direction: int) -> int:
        return step_minutes(value, direction)

    def _arm_tick(self) -> None:
        self._cancel_tick()
        if self._scheduler is not None:
            self._tick_handle = self._scheduler.call_every(
                self.settings.tick_interval_ms, self.tick_timer
            )

    def _cancel_tick(self) -> None:
        if self._tick_handle is not None:
            self._tick_handle.cancel()
            self._tick_handle = None

    # ── Picker ──

    def run_picker(self) -> Outcome[SessionView]:
        self._cancel_picker_delay()
        outcome = self.picker.pick(self.roster.roster)
        if not outcome.ok:
            self._pick = None
            self._picker_phase = PickerPhase.CLOSED
            return Outcome.failure(outcome.error)  # type: ignore[arg-type]

        self._pick = outcome.value
        self._picker_phase = PickerPhase.SPINNING
        if self._scheduler is not None:
            self._picker_handle = self._scheduler.call_later(
                self.settings.picker_spin_ms, self.finish_picker
            )
        return Outcome.success(self._render())

    def finish_picker(self) -> SessionView:
        """End of the spin animation: reveal the winner."""
        self._picker_handle = None
        if self._pick is not None:
            self._picker_phase = PickerPhase.FINISHED
        return self._render()

    def close_picker(self) -> SessionView:
        self._cancel_picker_delay()
        self._pick = None
        self._picker_phase = PickerPhase.CLOSED
        return self._render()

    def commit_picker_winner(self) -> Outcome[SessionView]:
        """Mark the current pick's winner as spoken and close the picker."""
        if self._pick is None:
            return Outcome.failure(ValidationError("No picker result to confirm"))
        winner = self._pick.winner
        if self.roster.get(winner.identity) is None:
            self.close_picker()
            return Outcome.failure(
                ValidationError(f"{winner.full_name} is no longer on the roster")
            )

        self.roster.set_spoken(winner.identity, True)
        self._cancel_picker_delay()
        self._pick = None
        self._picker_phase = PickerPhase.CLOSED
        return Outcome.success(self._roster_changed(f"{winner.first_name} marked as spoken"))

    def _cancel_picker_delay(self) -> None:
        if self._picker_handle is not None:
            self._picker_handle.cancel()
            self._picker_handle = None

    # ── Backlog ──

    def add_backlog_item(self, text: str) -> Outcome[SessionView]:
        outcome = self.backlog.add(text)
        if not outcome.ok:
            return Outcome.failure(outcome.error)  # type: ignore[arg-type]
        return Outcome.success(self._render(notice=f'"{self.backlog.items[-1].text}" added to Part B'))

    def remove_backlog_item(self, item_id: str) -> SessionView:
        removed = self.backlog.get(item_id)
        self.backlog.remove(item_id)
        notice = f'"{removed.text}" removed from Part B' if removed else None
        return self._render(notice=notice)

    def toggle_backlog_item(self, item_id: str) -> SessionView:
        self.backlog.toggle(item_id)
        return self._render()

    def clear_completed_backlog(self) -> SessionView:
        cleared = self.backlog.clear_completed()
        if not cleared:
            return self._render(notice="No completed items to clear")
        return self._render(notice=f"{cleared} completed item(s) cleared")
