"""
Stable identifier generation for backlog items.
"""

import hashlib


def stable_id(*parts: str, length: int = 12) -> str:
    """
    Generate a short stable ID derived from inputs (no randomness).

    Args:
        *parts: String parts to combine into ID
        length: Number of hex characters to keep

    Example:
        stable_id("1700000000000", "release notes") -> "9c1f0a..."
    """
    raw = "|".join(parts).encode("utf-8")
    return hashlib.sha256(raw).hexdigest()[:length]
