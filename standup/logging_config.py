"""
Structured logging configuration.

Provides JSON-formatted logs (python-json-logger) or plain text, chosen by
Settings.log_format.

Usage:
    from standup.logging_config import setup_logging

    setup_logging()
    logger = logging.getLogger(__name__)
    logger.warning("Storage write failed", extra={"key": "scrumUsers"})
"""

import logging
import sys
from typing import Optional

from pythonjsonlogger.json import JsonFormatter

from .config import Settings

LEVELS = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}


def setup_logging(settings: Optional[Settings] = None) -> None:
    """
    Configure the "standup" logger hierarchy.

    Existing handlers on the package logger are replaced, so calling this
    twice does not duplicate output.
    """
    settings = settings or Settings.from_env()
    level = LEVELS.get(settings.log_level, logging.INFO)

    logger = logging.getLogger("standup")
    logger.setLevel(level)
    for handler in logger.handlers[:]:
        logger.removeHandler(handler)

    # stderr keeps log lines out of the shell's rendered output
    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)

    if settings.log_format == "json":
        formatter: logging.Formatter = JsonFormatter(
            "%(asctime)s %(name)s %(levelname)s %(message)s",
            rename_fields={
                "asctime": "timestamp",
                "name": "logger",
                "levelname": "level",
            },
        )
    else:
        formatter = logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )

    handler.setFormatter(formatter)
    logger.addHandler(handler)
