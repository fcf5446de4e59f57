"""
Authentication module interfaces.

Other modules should depend on IAuthService, not the concrete implementation.
The rate limiter and notifier are collaborators injected into the service,
so tests can replace them and a shared limiter can be swapped in later.
"""

from typing import Any, Optional, Protocol, Union, runtime_checkable

from .models import AuthResult, AuthSession, RateLimitEntry, SessionResult, UserResult, UserUpdate


@runtime_checkable
class IRateLimiter(Protocol):
    """Interface for per-key attempt limiting."""

    def check_and_consume(self, key: str) -> bool:
        """
        Record an attempt under key.

        Args:
            key: Operation and identifier, e.g. ``signin_ana@example.com``

        Returns:
            True if the attempt is allowed, False if the key is exhausted
            for the current window (a denied attempt is not counted)
        """
        ...

    def get_entry(self, key: str) -> Optional[RateLimitEntry]:
        """Return a snapshot of the counter for key, if any."""
        ...

    def reset(self) -> None:
        """Forget all counters."""
        ...


@runtime_checkable
class INotifier(Protocol):
    """
    Interface for user-facing notifications.

    There is no mail transport; implementations only record or log.
    """

    def send_verification_email(self, email: str) -> None:
        """Tell the user how to verify their address."""
        ...

    def send_password_reset_email(self, email: str, token: str) -> None:
        """Deliver a password reset token."""
        ...


@runtime_checkable
class IAuthService(Protocol):
    """
    Interface for authentication operations.

    Every operation returns a result model. Expected failures (validation,
    duplicates, bad credentials, rate limits, bad tokens, unknown users)
    come back with ``error`` and ``code`` set instead of raising.
    """

    async def sign_up(self, email: str, password: str, name: str) -> UserResult:
        """Register a new user with role ``user`` and an unverified email."""
        ...

    async def sign_in(self, email: str, password: str) -> SessionResult:
        """Check credentials and open the (single) session."""
        ...

    async def sign_out(self) -> AuthResult:
        """Close the current session. Always succeeds."""
        ...

    async def get_session(self) -> Optional[AuthSession]:
        """Return the current session, or None if absent or expired."""
        ...

    async def send_password_reset_email(self, email: str) -> AuthResult:
        """Issue a reset token for a registered email."""
        ...

    async def reset_password(self, email: str, token: str, new_password: str) -> AuthResult:
        """Redeem a reset token and set a new password."""
        ...

    async def update_user(
        self,
        user_id: str,
        updates: Union[UserUpdate, dict[str, Any]],
    ) -> UserResult:
        """Merge profile fields into a registered user."""
        ...

    async def verify_email(self, email: str, token: str) -> AuthResult:
        """Mark a user's email as verified."""
        ...

    async def change_password(
        self,
        user_id: str,
        current_password: str,
        new_password: str,
    ) -> AuthResult:
        """Replace a password after checking the current one."""
        ...
