"""Date and time formatting utilities."""

import time
from typing import Optional

_UNITS = [
    ("year", 365 * 24 * 3600),
    ("month", 30 * 24 * 3600),
    ("week", 7 * 24 * 3600),
    ("day", 24 * 3600),
    ("hour", 3600),
    ("minute", 60),
]


def format_relative_time(timestamp: int, now: Optional[int] = None) -> str:
    """
    Format an epoch timestamp relative to now.

    Args:
        timestamp: Epoch seconds
        now: Reference time in epoch seconds (defaults to the current time)

    Returns:
        Text such as "just now", "1 minute ago" or "3 weeks ago"
    """
    if now is None:
        now = int(time.time())

    seconds = now - timestamp
    if seconds < 0:
        return "in the future"
    if seconds < 60:
        return "just now"

    for name, size in _UNITS:
        count = seconds // size
        if count >= 1:
            return f"{count} {name}{'s' if count != 1 else ''} ago"
    return "just now"
