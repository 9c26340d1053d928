"""
Wall-clock sources.

Engines never call time.time() directly; they receive a clock so tests can
move time across a simulated popup close/reopen.
"""

import time
from dataclasses import dataclass


class SystemClock:
    """Milliseconds since the Unix epoch, read from the host."""

    def now_ms(self) -> int:
        return int(time.time() * 1000)


@dataclass
class ManualClock:
    """
    Hand-driven clock.

    In tests: set current or call advance() to simulate elapsed time.
    """
    current: int = 0

    def now_ms(self) -> int:
        return self.current

    def advance(self, ms: int) -> None:
        self.current += ms
