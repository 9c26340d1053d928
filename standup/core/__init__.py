"""
Core primitives for the stand-up session engine.

This module provides:
- Models: Participant, BacklogItem, TimerSession, PickSession and readings
- Outcome: Structured success/failure result
- Clock: Injectable wall-clock sources
- Canonical: Deterministic JSON for stored snapshots
- Errors: The recoverable failure taxonomy
"""

from .models import (
    Band,
    BacklogItem,
    Identity,
    Participant,
    PickSession,
    TimerReading,
    TimerSession,
    TimerState,
    name_identity,
)
from .outcome import Outcome
from .clock import ManualClock, SystemClock
from .canonical import canonical_json_str, pretty_json_str
from .ids import stable_id
from .errors import (
    DuplicateError,
    EmptyPoolError,
    StandupError,
    StorageUnavailable,
    ValidationError,
)

__all__ = [
    "Band",
    "BacklogItem",
    "Identity",
    "Participant",
    "PickSession",
    "TimerReading",
    "TimerSession",
    "TimerState",
    "name_identity",
    "Outcome",
    "ManualClock",
    "SystemClock",
    "canonical_json_str",
    "pretty_json_str",
    "stable_id",
    "DuplicateError",
    "EmptyPoolError",
    "StandupError",
    "StorageUnavailable",
    "ValidationError",
]
