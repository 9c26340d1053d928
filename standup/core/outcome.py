"""
Structured result of an engine operation.
"""

from dataclasses import dataclass
from typing import Generic, Optional, TypeVar

from .errors import StandupError

T = TypeVar("T")


@dataclass(frozen=True)
class Outcome(Generic[T]):
    """
    Either a value or a StandupError, never both.

    Fields:
        value: Result of a successful operation
        error: Failure reason when the operation was rejected
    """

    value: Optional[T] = None
    error: Optional[StandupError] = None

    @classmethod
    def success(cls, value: T) -> "Outcome[T]":
        return cls(value=value)

    @classmethod
    def failure(cls, error: StandupError) -> "Outcome[T]":
        return cls(error=error)

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def message(self) -> Optional[str]:
        """Human-readable rejection reason, None on success."""
        return self.error.message if self.error is not None else None

    def unwrap(self) -> T:
        """
        Get value or raise the carried error.

        Raises:
            StandupError: If the outcome is a failure
        """
        if self.error is not None:
            raise self.error
        return self.value  # type: ignore[return-value]
