"""
Authentication module.

Handles sign-up, sign-in, the session slot, password reset, profile
updates and per-key attempt rate limiting.

Public API:
- IAuthService: Interface for auth operations
- IRateLimiter / INotifier: Injected collaborators
- User, AuthSession: Records handed to other modules (never with password)
- Result models: AuthResult, UserResult, SessionResult
- Auth exceptions: InvalidCredentialsError, DuplicateEmailError, etc.
"""

from .interfaces import IAuthService, IRateLimiter, INotifier
from .models import (
    UserRole,
    User,
    UserUpdate,
    AuthSession,
    ResetToken,
    RateLimitEntry,
    AuthResult,
    UserResult,
    SessionResult,
)
from .exceptions import (
    InvalidEmailError,
    InvalidProfileError,
    WeakPasswordError,
    DuplicateEmailError,
    TooManyAttemptsError,
    InvalidCredentialsError,
    InvalidResetTokenError,
    UserNotFoundError,
)

__all__ = [
    # Interfaces
    "IAuthService",
    "IRateLimiter",
    "INotifier",
    # Models
    "UserRole",
    "User",
    "UserUpdate",
    "AuthSession",
    "ResetToken",
    "RateLimitEntry",
    "AuthResult",
    "UserResult",
    "SessionResult",
    # Exceptions
    "InvalidEmailError",
    "InvalidProfileError",
    "WeakPasswordError",
    "DuplicateEmailError",
    "TooManyAttemptsError",
    "InvalidCredentialsError",
    "InvalidResetTokenError",
    "UserNotFoundError",
]
