"""
Backlog engine: "Part B" topics parked for discussion after the stand-up.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Dict, Hashable, Optional, Tuple

from .core.clock import SystemClock
from .core.errors import DuplicateError, ValidationError
from .core.ids import stable_id
from .core.models import BacklogItem
from .core.outcome import Outcome
from .listing import ToggleListEngine
from .store import BACKLOG_KEY, GuardedStore

logger = logging.getLogger(__name__)

MAX_TEXT_LENGTH = 100

Backlog = Tuple[BacklogItem, ...]


class BacklogEngine(ToggleListEngine[BacklogItem]):
    """Ordered follow-up topics, unique by case-insensitive text."""

    storage_key = BACKLOG_KEY
    flag_field = "completed"

    def __init__(self, store: GuardedStore, clock=None) -> None:
        super().__init__(store)
        self._clock = clock or SystemClock()

    def _decode(self, entry: Dict[str, Any]) -> Optional[BacklogItem]:
        return BacklogItem.from_dict(entry)

    def _encode(self, item: BacklogItem) -> Dict[str, Any]:
        return item.to_dict()

    def _identity(self, item: BacklogItem) -> Hashable:
        return item.id

    def add(self, text: str) -> Outcome[Backlog]:
        topic = (text or "").strip()
        if not topic:
            return Outcome.failure(ValidationError("Please enter a topic for Part B"))
        if len(topic) > MAX_TEXT_LENGTH:
            return Outcome.failure(
                ValidationError(f"Part B topic must be {MAX_TEXT_LENGTH} characters or less")
            )
        if any(item.identity == topic.lower() for item in self._items):
            return Outcome.failure(DuplicateError("This topic already exists in Part B items"))

        now_ms = self._clock.now_ms()
        item = BacklogItem(
            id=stable_id(str(now_ms), topic.lower()),
            text=topic,
            completed=False,
            created_at=datetime.fromtimestamp(now_ms / 1000, tz=timezone.utc).isoformat(),
        )
        return Outcome.success(self._commit(self._items + (item,)))

    def remove(self, item_id: str) -> Backlog:
        return self._remove(item_id)

    def toggle(self, item_id: str) -> Backlog:
        return self._set_flag(item_id, None)

    def clear_completed(self) -> int:
        """Drop completed topics; returns how many were removed."""
        completed = self.flagged_count()
        if completed:
            self._commit(item for item in self._items if not item.completed)
            logger.info("Cleared completed backlog items", extra={"count": completed})
        return completed

    def completed_count(self) -> int:
        return self.flagged_count()
