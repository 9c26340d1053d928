"""
Timer engine: one countdown that survives the UI going away.

Only the end timestamp and total duration are stored. Remaining time is
always recomputed from the wall clock, so nothing has to run while the UI is
closed.

States:
    IDLE     no session
    RUNNING  end timestamp in the future
    EXPIRED  end timestamp reached, session not yet cleared
"""

import logging
import math
from typing import Any, Optional

from .core.clock import SystemClock
from .core.errors import ValidationError
from .core.models import Band, TimerReading, TimerSession, TimerState
from .core.outcome import Outcome
from .store import TIMER_DURATION_KEY, TIMER_END_KEY, GuardedStore

logger = logging.getLogger(__name__)

MS_PER_MINUTE = 60 * 1000
STALE_AFTER_MS = 60 * 60 * 1000

MIN_MINUTES = 1
MAX_MINUTES = 180
MINUTES_STEP = 5

DANGER_BELOW = 10.0
WARNING_BELOW = 25.0


def format_time(ms: int) -> str:
    """MM:SS, rounding up so 00:00 only shows once no time is left."""
    total_seconds = math.ceil(max(0, ms) / 1000)
    minutes, seconds = divmod(total_seconds, 60)
    return f"{minutes:02d}:{seconds:02d}"


def band_for(percentage: float) -> Band:
    if percentage < DANGER_BELOW:
        return Band.DANGER
    if percentage < WARNING_BELOW:
        return Band.WARNING
    return Band.NEUTRAL


def step_minutes(value: Any, direction: int) -> int:
    """
    Move a minutes input one step up (direction > 0) or down.

    Non-numeric input counts as 0; the result is clamped to [1, 180].
    """
    try:
        current = int(str(value).strip())
    except ValueError:
        current = 0
    if direction > 0:
        return min(MAX_MINUTES, current + MINUTES_STEP)
    return max(MIN_MINUTES, current - MINUTES_STEP)


def _coerce_minutes(minutes: Any) -> Optional[int]:
    if isinstance(minutes, bool):
        return None
    if isinstance(minutes, int):
        return minutes
    if isinstance(minutes, float):
        return int(minutes) if minutes.is_integer() else None
    if isinstance(minutes, str):
        try:
            return int(minutes.strip())
        except ValueError:
            return None
    return None


class TimerEngine:
    """
    Single optional countdown session.

    Usage:
        timer = TimerEngine(store, clock)
        timer.recover_on_load()
        timer.start(5)
        reading = timer.query_remaining()
    """

    def __init__(
        self,
        store: GuardedStore,
        clock=None,
        stale_after_ms: int = STALE_AFTER_MS,
    ) -> None:
        self._store = store
        self._clock = clock or SystemClock()
        self.stale_after_ms = stale_after_ms
        self._session: Optional[TimerSession] = self._load_session()

    @property
    def session(self) -> Optional[TimerSession]:
        return self._session

    def _load_session(self) -> Optional[TimerSession]:
        raw_end = self._store.get(TIMER_END_KEY)
        raw_duration = self._store.get(TIMER_DURATION_KEY)
        if raw_end is None or raw_duration is None:
            return None
        try:
            session = TimerSession(int(raw_end), int(raw_duration))
        except ValueError:
            session = None
        if session is None or session.total_duration_ms <= 0:
            logger.warning("Discarding corrupt stored timer session")
            self._clear()
            return None
        return session

    def _clear(self) -> None:
        self._store.remove(TIMER_END_KEY)
        self._store.remove(TIMER_DURATION_KEY)

    def start(self, minutes: Any) -> Outcome[TimerSession]:
        """
        Start (or restart) a countdown.

        Returns:
            Outcome with the new session, or ValidationError
        """
        value = _coerce_minutes(minutes)
        if value is None or value <= 0:
            return Outcome.failure(
                ValidationError("Timer length must be a positive whole number of minutes")
            )

        duration_ms = value * MS_PER_MINUTE
        session = TimerSession(self._clock.now_ms() + duration_ms, duration_ms)
        self._session = session
        self._store.set(TIMER_END_KEY, str(session.end_timestamp))
        self._store.set(TIMER_DURATION_KEY, str(session.total_duration_ms))
        logger.info("Timer started", extra={"minutes": value})
        return Outcome.success(session)

    def stop(self) -> None:
        """Clear the session. Safe to call when idle."""
        if self._session is not None:
            logger.info("Timer stopped")
        self._session = None
        self._clear()

    def state(self) -> TimerState:
        if self._session is None:
            return TimerState.IDLE
        if self._session.remaining_ms(self._clock.now_ms()) > 0:
            return TimerState.RUNNING
        return TimerState.EXPIRED

    def query_remaining(self) -> TimerReading:
        if self._session is None:
            return TimerReading(TimerState.IDLE, 0, 0.0, format_time(0), Band.NEUTRAL)

        remaining = self._session.remaining_ms(self._clock.now_ms())
        percentage = remaining / self._session.total_duration_ms * 100
        percentage = min(100.0, max(0.0, percentage))
        state = TimerState.RUNNING if remaining > 0 else TimerState.EXPIRED
        return TimerReading(state, remaining, percentage, format_time(remaining), band_for(percentage))

    def recover_on_load(self) -> TimerState:
        """
        Decide what a reopened UI should show.

        Running sessions resume. A session that finished less than
        stale_after_ms ago stays EXPIRED so the user sees 00:00; older ones
        are stopped automatically.
        """
        self._session = self._load_session()
        if self._session is None:
            return TimerState.IDLE

        now = self._clock.now_ms()
        if self._session.remaining_ms(now) > 0:
            return TimerState.RUNNING
        if self._session.overrun_ms(now) < self.stale_after_ms:
            return TimerState.EXPIRED

        logger.info(
            "Discarding stale timer session",
            extra={"overrun_ms": self._session.overrun_ms(now)},
        )
        self.stop()
        return TimerState.IDLE
