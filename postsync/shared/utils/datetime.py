"""
UTC datetime utilities for consistent timezone handling.

All timestamps stamped on cache entries are timezone-aware UTC. Components
that measure age take a Clock so tests can move time explicitly.
"""

from collections.abc import Callable
from datetime import UTC, datetime, timedelta

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    """
    Return the current UTC datetime with timezone info.

    Use this instead of:
        - datetime.now() - naive, uses local timezone
        - datetime.utcnow() - naive, deprecated in Python 3.12

    Returns:
        Timezone-aware datetime in UTC
    """
    return datetime.now(UTC)


def age_of(stamp: datetime, now: datetime) -> timedelta:
    """
    Return how long ago stamp was, relative to now.

    A stamp in the future (clock moved backwards) counts as age zero.

    Args:
        stamp: When the value was recorded
        now: Reference time

    Returns:
        Non-negative timedelta
    """
    delta = now - stamp
    if delta < timedelta(0):
        return timedelta(0)
    return delta
