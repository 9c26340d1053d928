"""
Picker engine: uniform choice of the next speaker plus a slot-machine reel.

The winner is one uniform draw from the unspoken pool. Every other reel slot
is an independent uniform draw from the same pool, repeats allowed; the reel
is decoration, not a sample without replacement.
"""

import random
from typing import Optional, Sequence

from .core.errors import EmptyPoolError
from .core.models import Participant, PickSession
from .core.outcome import Outcome

MIN_WINNER_SLOT = 40
MAX_WINNER_SLOT = 49
TRAILING_SLOTS = 5


class PickerEngine:
    """Stateless apart from its random source; never mutates the roster."""

    def __init__(self, rng: Optional[random.Random] = None) -> None:
        self._rng = rng or random.Random()

    def pick(self, roster: Sequence[Participant]) -> Outcome[PickSession]:
        pool = [p for p in roster if not p.spoken]
        if not pool:
            return Outcome.failure(EmptyPoolError("Everyone has already spoken!"))

        winner_slot = self._rng.randint(MIN_WINNER_SLOT, MAX_WINNER_SLOT)
        winner = self._rng.choice(pool)
        reel = tuple(
            winner if i == winner_slot else self._rng.choice(pool)
            for i in range(winner_slot + TRAILING_SLOTS + 1)
        )
        return Outcome.success(PickSession(winner=winner, reel=reel, winner_slot=winner_slot))
