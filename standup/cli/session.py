"""
One CLI invocation = one UI session: open the coordinator over the file
store, run the command, close it.
"""

from contextlib import contextmanager
from typing import Iterator, Optional

from ..config import Settings
from ..coordinator import SessionCoordinator
from ..logging_config import setup_logging
from ..store import FileStore


@contextmanager
def open_session(store_path: Optional[str] = None) -> Iterator[SessionCoordinator]:
    settings = Settings.from_env()
    setup_logging(settings)
    coordinator = SessionCoordinator(
        FileStore(store_path or settings.store_path),
        settings=settings,
    )
    coordinator.open()
    try:
        yield coordinator
    finally:
        coordinator.close()
