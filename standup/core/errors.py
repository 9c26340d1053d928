"""
Exception types for the stand-up session engine.

Engines return these inside an Outcome instead of raising them; callers that
prefer exceptions can use Outcome.unwrap().
"""


class StandupError(Exception):
    """Base class for every recoverable engine failure."""

    @property
    def message(self) -> str:
        return str(self)


class ValidationError(StandupError):
    """Raised when user input is malformed or out of range."""
    pass


class DuplicateError(StandupError):
    """Raised when an added name or topic already exists."""
    pass


class EmptyPoolError(StandupError):
    """Raised when the picker has no unspoken participant to choose from."""
    pass


class StorageUnavailable(StandupError):
    """Raised when the persistent store cannot be read or written."""
    pass
