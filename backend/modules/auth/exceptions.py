"""
Authentication module exceptions.

The auth service raises these internally and turns them into AuthResult
values at its public boundary, so callers see the message and code
without having to catch anything.
"""

from shared.exceptions import (
    AuthenticationError,
    ConflictError,
    NotFoundError,
    RateLimitError,
    ValidationError,
)


class InvalidEmailError(ValidationError):
    """Raised when an email address is malformed."""

    def __init__(self, email: str):
        super().__init__(
            "Invalid email address",
            code="INVALID_EMAIL",
            details={"email": email},
        )


class WeakPasswordError(ValidationError):
    """Raised when a password is shorter than the configured minimum."""

    def __init__(self, min_length: int):
        super().__init__(
            f"Password must be at least {min_length} characters",
            code="WEAK_PASSWORD",
            details={"min_length": min_length},
        )


class DuplicateEmailError(ConflictError):
    """Raised when an email is already registered."""

    def __init__(self, email: str):
        super().__init__(
            "Email already registered",
            code="EMAIL_ALREADY_REGISTERED",
            details={"email": email},
        )


class TooManyAttemptsError(RateLimitError):
    """Raised when a rate-limit key is exhausted for the current window."""

    def __init__(self, key: str):
        super().__init__(
            "Too many attempts. Try again in 1 minute.",
            code="RATE_LIMITED",
            details={"key": key},
        )


class InvalidCredentialsError(AuthenticationError):
    """
    Raised when email and password do not match a user.

    Deliberately says nothing about which of the two was wrong.
    """

    def __init__(self, message: str = "Invalid credentials"):
        super().__init__(message, code="INVALID_CREDENTIALS")


class InvalidResetTokenError(AuthenticationError):
    """Raised when a reset token is missing, mismatched or expired."""

    def __init__(self, message: str = "Invalid or expired token"):
        super().__init__(message, code="INVALID_RESET_TOKEN")


class UserNotFoundError(NotFoundError):
    """Raised when no registered user matches the lookup."""

    def __init__(self, identifier: str):
        super().__init__(
            f"User not found: {identifier}",
            code="USER_NOT_FOUND",
            details={"identifier": identifier},
        )


class InvalidProfileError(ValidationError):
    """Raised when a profile update carries a missing or malformed value."""

    def __init__(self, fields: list[str]):
        super().__init__(
            f"Invalid profile fields: {', '.join(fields)}",
            code="INVALID_PROFILE",
            details={"fields": fields},
        )
