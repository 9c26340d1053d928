"""
Data records for the session engine.

All records are immutable. Engines replace them with dataclasses.replace()
rather than mutating in place.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional, Tuple

Identity = Tuple[str, str]


def name_identity(first_name: str, last_name: str) -> Identity:
    """Case-insensitive, whitespace-trimmed identity of a full name."""
    return (first_name.strip().lower(), last_name.strip().lower())


@dataclass(frozen=True)
class Participant:
    """
    One stand-up attendee.

    Identity is the case-insensitive (first_name, last_name) pair; there is
    no surrogate id.
    """
    first_name: str
    last_name: str
    spoken: bool = False

    @property
    def identity(self) -> Identity:
        return name_identity(self.first_name, self.last_name)

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"

    @property
    def initials(self) -> str:
        return f"{self.first_name[:1]}{self.last_name[:1]}".upper()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "firstName": self.first_name,
            "lastName": self.last_name,
            "spoken": self.spoken,
        }

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> Optional["Participant"]:
        """
        Build a participant from a stored entry.

        Returns:
            Participant, or None when either name is missing or blank, or
            spoken is present but not a boolean
        """
        first = data.get("firstName")
        last = data.get("lastName")
        spoken = data.get("spoken", False)
        if not isinstance(first, str) or not isinstance(last, str):
            return None
        if not first.strip() or not last.strip() or not isinstance(spoken, bool):
            return None
        return Participant(first.strip(), last.strip(), spoken)


@dataclass(frozen=True)
class BacklogItem:
    """A follow-up ("Part B") topic deferred until after the stand-up."""
    id: str
    text: str
    completed: bool = False
    created_at: str = ""

    @property
    def identity(self) -> str:
        return self.text.strip().lower()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "text": self.text,
            "completed": self.completed,
            "createdAt": self.created_at,
        }

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> Optional["BacklogItem"]:
        item_id = data.get("id")
        text = data.get("text")
        completed = data.get("completed", False)
        if not isinstance(item_id, str) or not isinstance(text, str) or not text.strip():
            return None
        if not isinstance(completed, bool):
            return None
        return BacklogItem(
            id=item_id,
            text=text,
            completed=completed,
            created_at=str(data.get("createdAt", "")),
        )


@dataclass(frozen=True)
class TimerSession:
    """
    A countdown in progress or finished.

    Fields:
        end_timestamp: Wall-clock end in ms since the epoch (may be past)
        total_duration_ms: Original length, always > 0
    """
    end_timestamp: int
    total_duration_ms: int

    def remaining_ms(self, now_ms: int) -> int:
        return max(0, self.end_timestamp - now_ms)

    def overrun_ms(self, now_ms: int) -> int:
        """How long ago the countdown finished (0 while still running)."""
        return max(0, now_ms - self.end_timestamp)


class TimerState(str, Enum):
    IDLE = "idle"
    RUNNING = "running"
    EXPIRED = "expired"


class Band(str, Enum):
    """Color band for the progress bar."""
    NEUTRAL = "neutral"
    WARNING = "warning"
    DANGER = "danger"


@dataclass(frozen=True)
class TimerReading:
    """Derived, read-only timer view."""
    state: TimerState
    remaining_ms: int
    percentage: float
    display: str
    band: Band


@dataclass(frozen=True)
class PickSession:
    """
    One picker spin. Transient; never persisted.

    Fields:
        winner: Selected unspoken participant
        reel: Decoys plus the winner, in display order
        winner_slot: Index of the winner inside reel
    """
    winner: Participant
    reel: Tuple[Participant, ...]
    winner_slot: int
