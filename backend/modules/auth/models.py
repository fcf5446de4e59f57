"""
Authentication module data models.

These models define the data structures used by the auth module
and exposed to other modules through the interface.
"""

from datetime import datetime
from enum import Enum
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from shared.models import CamelModel


class UserRole(str, Enum):
    """Access level of a registered user."""

    USER = "user"
    MODERATOR = "moderator"
    ADMIN = "admin"


class User(CamelModel):
    """
    A registered user as seen by everything outside the auth module.

    Never carries the password.
    """

    id: str = Field(..., description="User ID")
    email: str = Field(..., description="Email address (unique)")
    name: str = Field(..., description="Display name")
    role: UserRole = Field(default=UserRole.USER, description="User role")
    email_verified: bool = Field(default=False, description="Whether email is verified")
    created_at: datetime = Field(..., description="Account creation time")


class StoredUser(User):
    """
    User record as persisted under the users key.

    The password is kept in clear text. This is a known limitation of the
    client-local simulation; only the auth module ever sees this model.
    """

    password: str = Field(..., description="Plain-text password")

    def to_public(self) -> User:
        """Strip the password."""
        return User.model_validate(self.model_dump(exclude={"password"}))


class UserUpdate(BaseModel):
    """
    Partial update for a user profile.

    Only the fields that were explicitly set are applied. Unknown fields
    are ignored so a whole User snapshot can be passed back in.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )

    name: Optional[str] = None
    email: Optional[str] = None
    role: Optional[UserRole] = None
    email_verified: Optional[bool] = None


class AuthSession(CamelModel):
    """Time-bounded proof of authentication."""

    user: User = Field(..., description="User snapshot without password")
    access_token: str = Field(..., description="Opaque access token")
    expires_at: int = Field(..., description="Expiry, epoch milliseconds")


class ResetToken(CamelModel):
    """Single-use password reset token for one email."""

    email: str = Field(..., description="Email the token was issued for")
    token: str = Field(..., description="Opaque reset token")
    expires_at: int = Field(..., description="Expiry, epoch milliseconds")


class RateLimitEntry(BaseModel):
    """Attempt counter for one rate-limit key."""

    key: str = Field(..., description="Operation and identifier, e.g. signin_ana@example.com")
    count: int = Field(default=1, ge=0, description="Attempts in the current window")
    reset_at: int = Field(..., description="Window end, epoch milliseconds")


class AuthResult(BaseModel):
    """
    Outcome of an auth operation.

    Expected failures never raise; they come back with error and code set.
    """

    error: Optional[str] = Field(None, description="Error message if the operation failed")
    code: Optional[str] = Field(None, description="Machine-readable error code")

    @property
    def ok(self) -> bool:
        return self.error is None


class UserResult(AuthResult):
    """Auth result carrying a user."""

    user: Optional[User] = Field(None, description="User if the operation succeeded")


class SessionResult(AuthResult):
    """Auth result carrying a session."""

    session: Optional[AuthSession] = Field(None, description="Session if sign-in succeeded")
