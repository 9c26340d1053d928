"""
Roster engine: stand-up participants and their spoken flag.

Identity is the case-insensitive full name. Every mutation persists the full
roster before returning.
"""

import logging
import random
from typing import Any, Dict, Hashable, List, Optional, Sequence, Tuple

from .core.errors import DuplicateError, ValidationError
from .core.models import Identity, Participant, name_identity
from .core.outcome import Outcome
from .listing import ToggleListEngine
from .store import ROSTER_KEY, GuardedStore

logger = logging.getLogger(__name__)

MAX_NAME_LENGTH = 20

DEFAULT_ROSTER: Tuple[Participant, ...] = (
    Participant("Jane", "Doe"),
    Participant("John", "Smith"),
    Participant("Alice", "Johnson"),
    Participant("Bob", "Williams"),
    Participant("Charlie", "Brown"),
)

Roster = Tuple[Participant, ...]


def _as_identity(identity: Sequence[str]) -> Identity:
    first, last = identity
    return name_identity(first, last)


class RosterEngine(ToggleListEngine[Participant]):
    """
    Ordered participants.

    Usage:
        roster = RosterEngine(GuardedStore(MemoryStore()))
        roster.load()
        outcome = roster.add("Jane", "Roe")
        roster.toggle_spoken(("jane", "roe"))
    """

    storage_key = ROSTER_KEY
    flag_field = "spoken"

    def __init__(self, store: GuardedStore, rng: Optional[random.Random] = None) -> None:
        super().__init__(store)
        self._rng = rng or random.Random()

    def _decode(self, entry: Dict[str, Any]) -> Optional[Participant]:
        return Participant.from_dict(entry)

    def _encode(self, item: Participant) -> Dict[str, Any]:
        return item.to_dict()

    def _identity(self, item: Participant) -> Hashable:
        return item.identity

    def _initial(self) -> Optional[Roster]:
        logger.info("No stored roster; seeding defaults")
        return DEFAULT_ROSTER

    @property
    def roster(self) -> Roster:
        return self._items

    # ── Mutations ──

    def add(self, first_name: str, last_name: str) -> Outcome[Roster]:
        """
        Append a new unspoken participant.

        Returns:
            Outcome with the updated roster, or ValidationError/DuplicateError
        """
        first = (first_name or "").strip()
        last = (last_name or "").strip()
        if not first or not last:
            return Outcome.failure(ValidationError("Please enter both first and last name"))
        if len(first) > MAX_NAME_LENGTH or len(last) > MAX_NAME_LENGTH:
            return Outcome.failure(
                ValidationError(f"Names must be {MAX_NAME_LENGTH} characters or less")
            )
        if self.index_of(name_identity(first, last)) >= 0:
            return Outcome.failure(DuplicateError("This user already exists in the list"))

        logger.debug("Adding participant", extra={"participant": f"{first} {last}"})
        return Outcome.success(self._commit(self._items + (Participant(first, last),)))

    def remove(self, identity: Sequence[str]) -> Roster:
        return self._remove(_as_identity(identity))

    def toggle_spoken(self, identity: Sequence[str]) -> Roster:
        return self._set_flag(_as_identity(identity), None)

    def set_spoken(self, identity: Sequence[str], spoken: bool = True) -> Roster:
        return self._set_flag(_as_identity(identity), spoken)

    def reset_all_spoken(self) -> Roster:
        return self._commit(Participant(p.first_name, p.last_name) for p in self._items)

    def shuffle(self) -> Roster:
        """Fisher-Yates: walk i from the last index down to 1, swap with j in [0, i]."""
        items = list(self._items)
        for i in range(len(items) - 1, 0, -1):
            j = self._rng.randint(0, i)
            items[i], items[j] = items[j], items[i]
        return self._commit(items)

    def import_snapshot(self, raw_list: Any) -> Outcome[Roster]:
        """
        Replace the roster with an imported list, all unspoken.

        Any malformed entry rejects the whole batch; the current roster is
        left untouched.
        """
        invalid = ValidationError(
            "Invalid file format. Expected a JSON array of users with firstName and lastName."
        )
        if not isinstance(raw_list, list):
            return Outcome.failure(invalid)

        imported: List[Participant] = []
        seen = set()
        for entry in raw_list:
            participant = None
            if isinstance(entry, dict):
                # Imported members always start unspoken
                participant = Participant.from_dict(
                    {"firstName": entry.get("firstName"), "lastName": entry.get("lastName")}
                )
            if participant is None:
                return Outcome.failure(invalid)
            if participant.identity in seen:
                return Outcome.failure(
                    ValidationError(f"{participant.full_name} appears more than once in the import")
                )
            seen.add(participant.identity)
            imported.append(participant)

        logger.info("Importing roster", extra={"count": len(imported)})
        return Outcome.success(self._commit(imported))

    # ── Read ──

    def export_snapshot(self) -> List[Dict[str, Any]]:
        return [p.to_dict() for p in self._items]

    def unspoken(self) -> Roster:
        return tuple(p for p in self._items if not p.spoken)

    def spoken_count(self) -> int:
        return self.flagged_count()

    def all_spoken(self) -> bool:
        return bool(self._items) and all(p.spoken for p in self._items)

    def search(self, query: str) -> Roster:
        """Participants whose full name contains query, case-insensitively."""
        needle = (query or "").strip().lower()
        if not needle:
            return self._items
        return tuple(p for p in self._items if needle in p.full_name.lower())
