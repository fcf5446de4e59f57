import pytest
from datetime import datetime, timezone

from modules.auth.models import (
    AuthResult,
    AuthSession,
    RateLimitEntry,
    SessionResult,
    User,
    UserResult,
    UserRole,
    UserUpdate,
)


def create_user(**overrides) -> User:
    data = {
        "id": "user-123",
        "email": "test@example.com",
        "name": "Test User",
        "created_at": datetime(2024, 1, 1, tzinfo=timezone.utc),
    }
    data.update(overrides)
    return User(**data)


class TestUser:
    def test_defaults(self):
        """A user should default to role 'user' and an unverified email."""
        user = create_user()
        assert user.role == UserRole.USER
        assert user.email_verified is False

    def test_invalid_role_rejected(self):
        """Roles outside user/moderator/admin should be rejected."""
        with pytest.raises(Exception):  # Pydantic ValidationError
            create_user(role="superuser")

    def test_json_uses_camel_case(self):
        """Serialized users should use the UI's field names."""
        data = create_user().model_dump(mode="json", by_alias=True)
        assert data["emailVerified"] is False
        assert data["createdAt"].startswith("2024-01-01T00:00:00")
        assert data["role"] == "user"


class TestAuthSession:
    def test_session_round_trip_keys(self):
        """Sessions should serialize with accessToken and expiresAt."""
        session = AuthSession(user=create_user(), access_token="tok", expires_at=123)
        data = session.model_dump(mode="json", by_alias=True)
        assert data["accessToken"] == "tok"
        assert data["expiresAt"] == 123
        assert "password" not in data["user"]


class TestUserUpdate:
    def test_only_set_fields(self):
        """Only explicitly given fields should be marked as set."""
        update = UserUpdate(name="New Name")
        assert update.model_fields_set == {"name"}

    def test_ignores_unknown_fields(self):
        """Unknown fields such as password should be dropped."""
        update = UserUpdate.model_validate({"password": "x", "id": "other", "name": "N"})
        assert update.model_fields_set == {"name"}


class TestResults:
    def test_success_result(self):
        """A result without error should be ok."""
        assert AuthResult().ok is True

    def test_failure_result(self):
        """A result with error should not be ok."""
        result = UserResult(error="Invalid credentials", code="INVALID_CREDENTIALS")
        assert result.ok is False
        assert result.user is None

    def test_session_result_defaults(self):
        """SessionResult should default to no session."""
        assert SessionResult().session is None


class TestRateLimitEntry:
    def test_defaults(self):
        """A new entry should start at one attempt."""
        entry = RateLimitEntry(key="signin_x", reset_at=60_000)
        assert entry.count == 1
