"""
Failure-tolerant wrapper around a KeyValueStore.

Engines only talk to GuardedStore. A missing or failing backend degrades the
session to memory-only operation; it never aborts the caller's mutation.
"""

import logging
from typing import Optional

from ..core.errors import StorageUnavailable
from .store import KeyValueStore

logger = logging.getLogger(__name__)


class GuardedStore:
    """
    Swallow-and-log boundary for persistence.

    Fields:
        backend: Real store, or None when storage is entirely unavailable
        degraded: True after a failed read or write, cleared by the next
            successful write
    """

    def __init__(self, backend: Optional[KeyValueStore]) -> None:
        self.backend = backend
        self.degraded = backend is None
        if backend is None:
            logger.warning("No persistent store available; running memory-only")

    def _fail(self, op: str, key: str, ex: Exception) -> None:
        self.degraded = True
        logger.warning(
            "Storage %s failed; continuing without persistence",
            op,
            extra={"key": key, "error": str(ex)},
        )

    def get(self, key: str) -> Optional[str]:
        if self.backend is None:
            return None
        try:
            return self.backend.get(key)
        except StorageUnavailable as ex:
            self._fail("read", key, ex)
            return None

    def set(self, key: str, value: str) -> bool:
        """Returns True when the value was durably written."""
        if self.backend is None:
            return False
        try:
            self.backend.set(key, value)
            self.degraded = False
            return True
        except StorageUnavailable as ex:
            self._fail("write", key, ex)
            return False

    def remove(self, key: str) -> bool:
        if self.backend is None:
            return False
        try:
            self.backend.remove(key)
            self.degraded = False
            return True
        except StorageUnavailable as ex:
            self._fail("remove", key, ex)
            return False
