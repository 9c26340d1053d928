"""
Deferred callbacks for the coordinator: the periodic timer tick and the
one-shot picker finish.

The coordinator only needs call_every/call_later returning cancellable
handles. ManualScheduler runs them in virtual time against a ManualClock.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Callable, List, Optional

from .core.clock import ManualClock

Callback = Callable[[], None]


@dataclass
class Handle:
    """Cancellable registration returned by a Scheduler."""
    due_ms: int
    callback: Callback
    interval_ms: Optional[int] = None
    cancelled: bool = False

    def cancel(self) -> None:
        self.cancelled = True


class Scheduler(ABC):
    @abstractmethod
    def call_every(self, interval_ms: int, callback: Callback) -> Handle:
        ...

    @abstractmethod
    def call_later(self, delay_ms: int, callback: Callback) -> Handle:
        ...


@dataclass
class ManualScheduler(Scheduler):
    """
    Virtual-time scheduler.

    advance() moves the shared clock forward and fires every callback that
    falls due, in due order, re-arming periodic ones.
    """
    clock: ManualClock = field(default_factory=ManualClock)
    _handles: List[Handle] = field(default_factory=list)

    def call_every(self, interval_ms: int, callback: Callback) -> Handle:
        handle = Handle(self.clock.now_ms() + interval_ms, callback, interval_ms)
        self._handles.append(handle)
        return handle

    def call_later(self, delay_ms: int, callback: Callback) -> Handle:
        handle = Handle(self.clock.now_ms() + delay_ms, callback)
        self._handles.append(handle)
        return handle

    def pending(self) -> List[Handle]:
        return [h for h in self._handles if not h.cancelled]

    def advance(self, ms: int) -> None:
        target = self.clock.now_ms() + ms
        while True:
            due = [h for h in self.pending() if h.due_ms <= target]
            if not due:
                break
            handle = min(due, key=lambda h: h.due_ms)
            self.clock.current = handle.due_ms
            if handle.interval_ms is None:
                handle.cancel()
            else:
                handle.due_ms += handle.interval_ms
            handle.callback()
        self.clock.current = target
        self._handles = self.pending()
