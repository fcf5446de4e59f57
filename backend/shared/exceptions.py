"""
Base exception classes for the Vigia core.

Each module should define its own exceptions that inherit from these bases.
This enables consistent error handling across the application.
"""

from typing import Optional, Any


class VigiaError(Exception):
    """
    Base exception for all Vigia errors.

    All custom exceptions should inherit from this class.
    """

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to a dictionary for UI consumption."""
        return {
            "error": self.code,
            "message": self.message,
            "details": self.details,
        }


class NotFoundError(VigiaError):
    """Resource not found."""

    pass


class ValidationError(VigiaError):
    """Input validation failed."""

    pass


class ConflictError(VigiaError):
    """Resource already exists."""

    pass


class AuthenticationError(VigiaError):
    """Authentication failed (invalid or missing credentials)."""

    pass


class RateLimitError(VigiaError):
    """Too many attempts within the rate window."""

    pass


class StorageError(VigiaError):
    """Error reading from or writing to the key-value store."""

    def __init__(
        self,
        message: str,
        key: str,
        code: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ):
        super().__init__(message, code, details)
        self.key = key
        self.details["key"] = key
