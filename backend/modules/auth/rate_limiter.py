"""
In-process attempt rate limiter.

Counts attempts per key in a fixed window that opens on the first attempt
and closes ``window_ms`` later. State is process-local and deliberately
not persisted: a restart forgets every counter.
"""

import logging
import threading
from typing import Optional

from shared.clock import IClock, SystemClock, to_epoch_ms
from shared.config import get_settings

from .models import RateLimitEntry

logger = logging.getLogger(__name__)


class RateLimiter:
    """
    Fixed-window attempt counter keyed by ``<operation>_<identifier>``.

    The map is guarded by a lock so concurrent threads cannot both pass
    the last free slot of a window.
    """

    def __init__(
        self,
        max_attempts: int = 5,
        window_ms: int = 60_000,
        clock: Optional[IClock] = None,
    ):
        """
        Initialize the limiter.

        Args:
            max_attempts: Attempts allowed per key within one window.
            window_ms: Window length in milliseconds.
            clock: Time source. Defaults to the system clock.
        """
        self._max_attempts = max_attempts
        self._window_ms = window_ms
        self._clock = clock or SystemClock()
        self._entries: dict[str, RateLimitEntry] = {}
        self._lock = threading.Lock()

    @property
    def max_attempts(self) -> int:
        return self._max_attempts

    @property
    def window_ms(self) -> int:
        return self._window_ms

    def check_and_consume(self, key: str) -> bool:
        """Record an attempt under key and report whether it is allowed."""
        now = to_epoch_ms(self._clock.now())

        with self._lock:
            entry = self._entries.get(key)

            if entry is None or now > entry.reset_at:
                self._entries[key] = RateLimitEntry(
                    key=key,
                    count=1,
                    reset_at=now + self._window_ms,
                )
                return True

            if entry.count >= self._max_attempts:
                logger.warning(f"Rate limit exceeded for {key}")
                return False

            entry.count += 1
            return True

    def get_entry(self, key: str) -> Optional[RateLimitEntry]:
        with self._lock:
            entry = self._entries.get(key)
            return entry.model_copy() if entry else None

    def reset(self) -> None:
        with self._lock:
            self._entries.clear()


# Module-level instance getter
_limiter_instance: Optional[RateLimiter] = None


def get_rate_limiter() -> RateLimiter:
    """Get the process-wide rate limiter, configured from settings."""
    global _limiter_instance
    if _limiter_instance is None:
        settings = get_settings()
        _limiter_instance = RateLimiter(
            max_attempts=settings.rate_limit_max_attempts,
            window_ms=settings.rate_limit_window_ms,
        )
    return _limiter_instance


def reset_rate_limiter() -> None:
    """Reset the rate limiter singleton (for testing)."""
    global _limiter_instance
    _limiter_instance = None
