"""
Shared test fixtures and utilities.

This module provides common test infrastructure used across all test modules:
a controllable clock, predictable ids, an in-memory key-value store and a
notifier that records what it was asked to send.
"""

import pytest
from datetime import datetime, timezone, timedelta

from shared.config import Settings, get_settings
from shared.database import reset_client_cache
from shared.storage import InMemoryKeyValueStore, reset_kv_store
from modules.auth.rate_limiter import RateLimiter, reset_rate_limiter
from modules.auth.service import reset_auth_service
from modules.cases.store import reset_case_store
from modules.scoring.service import reset_scoring_service


# 2024-01-01T00:00:00Z
START_TIME = datetime(2024, 1, 1, tzinfo=timezone.utc)


class FakeClock:
    """Clock that only moves when told to."""

    def __init__(self, start: datetime = START_TIME):
        self.current = start

    def now(self) -> datetime:
        return self.current

    def advance(self, milliseconds: int) -> None:
        self.current = self.current + timedelta(milliseconds=milliseconds)


class SequentialIds:
    """Id generator producing prefix-1, prefix-2, ..."""

    def __init__(self, prefix: str = "id"):
        self.prefix = prefix
        self.counter = 0

    def generate_id(self) -> str:
        self.counter += 1
        return f"{self.prefix}-{self.counter}"


class RecordingNotifier:
    """Notifier that keeps every message instead of sending it."""

    def __init__(self):
        self.verifications: list[str] = []
        self.resets: list[tuple[str, str]] = []

    def send_verification_email(self, email: str) -> None:
        self.verifications.append(email)

    def send_password_reset_email(self, email: str, token: str) -> None:
        self.resets.append((email, token))

    def last_token_for(self, email: str) -> str:
        return [token for sent_to, token in self.resets if sent_to == email][-1]


@pytest.fixture(autouse=True)
def reset_singletons():
    """Reset module singletons before and after each test."""
    for reset in (
        reset_auth_service,
        reset_rate_limiter,
        reset_case_store,
        reset_scoring_service,
        reset_kv_store,
        reset_client_cache,
        get_settings.cache_clear,
    ):
        reset()
    yield
    for reset in (
        reset_auth_service,
        reset_rate_limiter,
        reset_case_store,
        reset_scoring_service,
        reset_kv_store,
        reset_client_cache,
        get_settings.cache_clear,
    ):
        reset()


@pytest.fixture
def clock() -> FakeClock:
    """Provide a clock frozen at START_TIME."""
    return FakeClock()


@pytest.fixture
def ids() -> SequentialIds:
    """Provide predictable ids."""
    return SequentialIds()


@pytest.fixture
def kv_store() -> InMemoryKeyValueStore:
    """Provide an empty in-memory key-value store."""
    return InMemoryKeyValueStore()


@pytest.fixture
def notifier() -> RecordingNotifier:
    """Provide a notifier that records messages."""
    return RecordingNotifier()


@pytest.fixture
def settings() -> Settings:
    """Provide default settings, independent of the environment."""
    return Settings(_env_file=None)


@pytest.fixture
def rate_limiter(clock: FakeClock) -> RateLimiter:
    """Provide a rate limiter with the default 5 attempts per minute."""
    return RateLimiter(max_attempts=5, window_ms=60_000, clock=clock)
