"""
Persistent key-value storage.

This module provides:
- KeyValueStore: Abstract interface (get/set/remove strings)
- MemoryStore: In-process storage
- FileStore: JSON file storage with atomic replace
- GuardedStore: Wrapper that turns storage failures into logged degradation
"""

from .store import KeyValueStore, MemoryStore
from .file_store import FileStore
from .guarded import GuardedStore

# Storage keys, compatible with the browser popup's local storage
ROSTER_KEY = "scrumUsers"
BACKLOG_KEY = "scrumPartBItems"
TIMER_END_KEY = "scrumTimerEnd"
TIMER_DURATION_KEY = "scrumTimerDuration"

__all__ = [
    "KeyValueStore",
    "MemoryStore",
    "FileStore",
    "GuardedStore",
    "ROSTER_KEY",
    "BACKLOG_KEY",
    "TIMER_END_KEY",
    "TIMER_DURATION_KEY",
]
