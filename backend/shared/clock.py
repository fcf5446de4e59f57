"""
Time source used by services that deal with expiry.

Services receive an IClock so tests can move time forward deterministically.
"""

from datetime import datetime, timezone
from typing import Protocol, runtime_checkable


@runtime_checkable
class IClock(Protocol):
    """Interface for reading the current time."""

    def now(self) -> datetime:
        """Return the current time as a timezone-aware datetime."""
        ...


class SystemClock:
    """Clock backed by the system wall clock (UTC)."""

    def now(self) -> datetime:
        return datetime.now(timezone.utc)


def to_epoch_ms(moment: datetime) -> int:
    """Convert a datetime to integer milliseconds since the Unix epoch."""
    return int(moment.timestamp() * 1000)
