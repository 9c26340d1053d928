"""
JSON serialization for persisted snapshots and exported payloads.

Snapshots go through canonical_json_str so the same state always produces
the same stored bytes; exports are pretty-printed for humans.
"""

import json
from typing import Any


def canonical_json_str(obj: Any) -> str:
    """Compact, key-sorted JSON string for storage."""
    return json.dumps(obj, sort_keys=True, separators=(",", ":"), ensure_ascii=False)


def pretty_json_str(obj: Any) -> str:
    """Two-space indented JSON for file export; key order is preserved."""
    return json.dumps(obj, indent=2, ensure_ascii=False)
