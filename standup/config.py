"""
Environment-driven settings.

Environment Variables:
    STANDUP_STORE_PATH: JSON store file (default: ~/.standup/store.json)
    STANDUP_LOG_LEVEL: DEBUG, INFO, WARNING, ERROR (default: INFO)
    STANDUP_LOG_FORMAT: json, text (default: json)
    STANDUP_DEFAULT_MINUTES: Initial timer length in minutes (default: 15)
    STANDUP_STALE_AFTER_MS: Overrun after which a finished timer is discarded (default: 3600000)
    STANDUP_TICK_INTERVAL_MS: Timer refresh period (default: 1000)
    STANDUP_PICKER_SPIN_MS: Picker animation length (default: 4050)
"""

import os
from dataclasses import dataclass


def _env_int(key: str, default: int) -> int:
    val = os.getenv(key)
    if not val:
        return default
    try:
        parsed = int(val)
    except ValueError:
        return default
    return parsed if parsed > 0 else default


@dataclass(frozen=True)
class Settings:
    store_path: str = "~/.standup/store.json"
    log_level: str = "INFO"
    log_format: str = "json"
    default_minutes: int = 15
    stale_after_ms: int = 60 * 60 * 1000
    tick_interval_ms: int = 1000
    picker_spin_ms: int = 4050

    @staticmethod
    def from_env() -> "Settings":
        defaults = Settings()
        return Settings(
            store_path=os.getenv("STANDUP_STORE_PATH", defaults.store_path),
            log_level=os.getenv("STANDUP_LOG_LEVEL", defaults.log_level).upper(),
            log_format=os.getenv("STANDUP_LOG_FORMAT", defaults.log_format).lower(),
            default_minutes=_env_int("STANDUP_DEFAULT_MINUTES", defaults.default_minutes),
            stale_after_ms=_env_int("STANDUP_STALE_AFTER_MS", defaults.stale_after_ms),
            tick_interval_ms=_env_int("STANDUP_TICK_INTERVAL_MS", defaults.tick_interval_ms),
            picker_spin_ms=_env_int("STANDUP_PICKER_SPIN_MS", defaults.picker_spin_ms),
        )
