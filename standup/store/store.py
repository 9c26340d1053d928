"""
KeyValueStore abstract interface.

Defines the contract every persistence backend must satisfy.
"""

from abc import ABC, abstractmethod
from typing import Dict, Optional


class KeyValueStore(ABC):
    """
    Abstract string key-value storage.

    All implementations must guarantee:
    - set() is durable before it returns
    - get() observes every completed set()/remove() (read-your-writes)
    - Failures raise StorageUnavailable, never a backend-specific error
    """

    @abstractmethod
    def get(self, key: str) -> Optional[str]:
        """
        Read a value.

        Returns:
            Stored string or None when the key is absent

        Raises:
            StorageUnavailable: If the backend cannot be read
        """
        ...

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        """
        Write a value.

        Raises:
            StorageUnavailable: If the backend cannot be written
        """
        ...

    @abstractmethod
    def remove(self, key: str) -> None:
        """
        Delete a key. Removing an absent key is a no-op.

        Raises:
            StorageUnavailable: If the backend cannot be written
        """
        ...


class MemoryStore(KeyValueStore):
    """In-process storage; lost when the process exits."""

    def __init__(self, initial: Optional[Dict[str, str]] = None) -> None:
        self._data: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def remove(self, key: str) -> None:
        self._data.pop(key, None)

    def snapshot(self) -> Dict[str, str]:
        return dict(self._data)
