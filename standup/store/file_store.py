"""
File-based key-value store.

The whole store is one JSON object {key: string}. Writes replace the file
atomically and fsync before returning.
"""

import json
import logging
import os
import tempfile
from typing import Dict, Optional

from ..core.canonical import canonical_json_str
from ..core.errors import StorageUnavailable
from .store import KeyValueStore

try:
    import fcntl
except ImportError:  # Windows or unsupported platform
    fcntl = None

logger = logging.getLogger(__name__)


class FileStore(KeyValueStore):
    """
    JSON file backed store.

    Storage format: a single JSON object mapping keys to string values.

    Guarantees:
    - Atomic replace (temp file + os.replace)
    - Fsync after each write (durability)
    - Exclusive lock around read-modify-write when fcntl is available
    - A file that is not a JSON object is moved aside to <path>.corrupt
      on the next write, so the store recovers instead of failing forever
    """

    def __init__(self, path: str) -> None:
        """
        Initialize file store.

        Args:
            path: Path to the JSON file (created lazily on first write)
        """
        self.path = os.path.expanduser(path)
        self.lock_path = f"{self.path}.lock"

    def _read_all(self) -> Dict[str, str]:
        if not os.path.exists(self.path):
            return {}
        with open(self.path, "r", encoding="utf-8") as f:
            raw = f.read()
        if not raw.strip():
            return {}
        data = json.loads(raw)
        if not isinstance(data, dict):
            raise ValueError(f"store root must be an object, got {type(data).__name__}")
        return {str(k): v for k, v in data.items() if isinstance(v, str)}

    def _read_for_update(self) -> Dict[str, str]:
        # Caller holds the lock
        try:
            return self._read_all()
        except ValueError as ex:
            corrupt_path = f"{self.path}.corrupt"
            os.replace(self.path, corrupt_path)
            logger.warning(
                "Store file unreadable; moved aside and starting empty",
                extra={"path": self.path, "moved_to": corrupt_path, "error": str(ex)},
            )
            return {}

    def _write_all(self, data: Dict[str, str]) -> None:
        directory = os.path.dirname(self.path) or "."
        fd, tmp_path = tempfile.mkstemp(prefix=".standup-", dir=directory)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(canonical_json_str(data))
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_path, self.path)
        except BaseException:
            if os.path.exists(tmp_path):
                os.remove(tmp_path)
            raise

    def _update(self, key: str, value: Optional[str]) -> None:
        try:
            os.makedirs(os.path.dirname(self.path) or ".", exist_ok=True)
            with open(self.lock_path, "a+b") as lock:
                if fcntl:
                    fcntl.flock(lock.fileno(), fcntl.LOCK_EX)
                try:
                    data = self._read_for_update()
                    if value is None:
                        if key not in data:
                            return
                        del data[key]
                    else:
                        data[key] = value
                    self._write_all(data)
                finally:
                    if fcntl:
                        fcntl.flock(lock.fileno(), fcntl.LOCK_UN)
        except (OSError, ValueError) as ex:
            raise StorageUnavailable(f"cannot write {self.path}: {ex}") from ex

    def get(self, key: str) -> Optional[str]:
        try:
            return self._read_all().get(key)
        except (OSError, ValueError) as ex:
            raise StorageUnavailable(f"cannot read {self.path}: {ex}") from ex

    def set(self, key: str, value: str) -> None:
        self._update(key, value)

    def remove(self, key: str) -> None:
        self._update(key, None)
