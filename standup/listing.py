"""
Toggleable labeled list: the storage and mutation pattern shared by the
roster and the backlog.

Each engine keeps an immutable tuple of records and writes the full list to
the store after every mutation, before returning.
"""

import json
import logging
from abc import ABC, abstractmethod
from dataclasses import replace
from typing import Any, Dict, Generic, Hashable, Iterable, Optional, Tuple, TypeVar

from .core.canonical import canonical_json_str
from .store import GuardedStore

logger = logging.getLogger(__name__)

T = TypeVar("T")


class ToggleListEngine(ABC, Generic[T]):
    """
    Ordered records with one boolean flag, persisted under a single key.

    Subclasses define how records are decoded, encoded and identified, which
    field is the flag, and what a first run looks like.
    """

    storage_key: str = ""
    flag_field: str = ""

    def __init__(self, store: GuardedStore) -> None:
        self._store = store
        self._items: Tuple[T, ...] = ()

    # ── Record mapping ──

    @abstractmethod
    def _decode(self, entry: Dict[str, Any]) -> Optional[T]:
        ...

    @abstractmethod
    def _encode(self, item: T) -> Dict[str, Any]:
        ...

    @abstractmethod
    def _identity(self, item: T) -> Hashable:
        ...

    def _initial(self) -> Optional[Tuple[T, ...]]:
        """Records for a first run; None means start empty without persisting."""
        return None

    # ── Read ──

    @property
    def items(self) -> Tuple[T, ...]:
        return self._items

    def index_of(self, identity: Hashable) -> int:
        for idx, item in enumerate(self._items):
            if self._identity(item) == identity:
                return idx
        return -1

    def get(self, identity: Hashable) -> Optional[T]:
        idx = self.index_of(identity)
        return self._items[idx] if idx >= 0 else None

    def flagged_count(self) -> int:
        return sum(1 for item in self._items if getattr(item, self.flag_field))

    # ── Load / persist ──

    def load(self) -> Tuple[T, ...]:
        """
        Rehydrate from the store.

        Absent or unparsable snapshots fall back to _initial(); malformed
        entries inside a valid snapshot are skipped.
        """
        raw = self._store.get(self.storage_key)
        entries = self._parse(raw)
        if entries is None:
            initial = self._initial()
            if initial is None:
                self._items = ()
            else:
                self._commit(initial)
            return self._items

        items = []
        for entry in entries:
            item = self._decode(entry) if isinstance(entry, dict) else None
            if item is None:
                logger.warning(
                    "Skipping malformed stored entry", extra={"key": self.storage_key}
                )
                continue
            items.append(item)
        self._items = tuple(items)
        return self._items

    def _parse(self, raw: Optional[str]) -> Optional[list]:
        if raw is None:
            return None
        try:
            data = json.loads(raw)
        except ValueError:
            logger.warning("Stored snapshot is not valid JSON", extra={"key": self.storage_key})
            return None
        if not isinstance(data, list):
            logger.warning("Stored snapshot is not a list", extra={"key": self.storage_key})
            return None
        return data

    def _commit(self, items: Iterable[T]) -> Tuple[T, ...]:
        self._items = tuple(items)
        payload = canonical_json_str([self._encode(item) for item in self._items])
        self._store.set(self.storage_key, payload)
        return self._items

    # ── Shared mutations ──

    def _remove(self, identity: Hashable) -> Tuple[T, ...]:
        idx = self.index_of(identity)
        if idx < 0:
            return self._items
        return self._commit(self._items[:idx] + self._items[idx + 1:])

    def _set_flag(self, identity: Hashable, value: Optional[bool]) -> Tuple[T, ...]:
        """Set the flag of one record; value None flips it."""
        idx = self.index_of(identity)
        if idx < 0:
            return self._items
        item = self._items[idx]
        new_value = not getattr(item, self.flag_field) if value is None else value
        updated = replace(item, **{self.flag_field: new_value})  # type: ignore[type-var]
        return self._commit(self._items[:idx] + (updated,) + self._items[idx + 1:])
