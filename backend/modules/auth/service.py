"""
Authentication service implementation.

Client-local simulation of sign-up, sign-in, sessions and password reset
on top of the key-value store. Passwords are stored and compared in
clear text; see StoredUser.
"""

import logging
from datetime import timedelta
from typing import Any, Optional, Union

from pydantic import ValidationError as PydanticValidationError

from shared.clock import IClock, SystemClock, to_epoch_ms
from shared.config import Settings, get_settings
from shared.exceptions import VigiaError
from shared.ids import IIdGenerator, UuidGenerator
from shared.storage import get_kv_store

from .exceptions import (
    InvalidCredentialsError,
    InvalidEmailError,
    InvalidProfileError,
    InvalidResetTokenError,
    TooManyAttemptsError,
    UserNotFoundError,
    WeakPasswordError,
)
from .interfaces import IAuthService, INotifier, IRateLimiter
from .models import (
    AuthResult,
    AuthSession,
    ResetToken,
    SessionResult,
    StoredUser,
    UserResult,
    UserRole,
    UserUpdate,
)
from .notifier import LoggingNotifier
from .rate_limiter import get_rate_limiter
from .repository import AuthRepository

logger = logging.getLogger(__name__)


class AuthService(IAuthService):
    """
    Implementation of the authentication service.

    Collaborators are injected; anything not supplied falls back to the
    process-wide instance built from settings.
    """

    def __init__(
        self,
        repository: Optional[AuthRepository] = None,
        rate_limiter: Optional[IRateLimiter] = None,
        notifier: Optional[INotifier] = None,
        clock: Optional[IClock] = None,
        id_generator: Optional[IIdGenerator] = None,
        settings: Optional[Settings] = None,
    ):
        self._settings = settings or get_settings()
        self._repository = repository or AuthRepository(get_kv_store())
        self._rate_limiter = rate_limiter or get_rate_limiter()
        self._notifier = notifier or LoggingNotifier()
        self._clock = clock or SystemClock()
        self._ids = id_generator or UuidGenerator()

    # -------------------------------------------------------------------------
    # Public operations
    # -------------------------------------------------------------------------

    async def sign_up(self, email: str, password: str, name: str) -> UserResult:
        """
        Register a new user.

        The rate limit is checked before validation, so malformed attempts
        count against the window too.
        """
        try:
            self._consume_attempt(f"signup_{email}")
            self._validate_email(email)
            self._validate_password(password)

            stored = StoredUser(
                id=self._ids.generate_id(),
                email=email,
                name=name,
                role=UserRole.USER,
                email_verified=False,
                created_at=self._clock.now(),
                password=password,
            )
            self._repository.add_user(stored)
        except VigiaError as e:
            return self._failure(UserResult, "sign-up", email, e)

        self._notifier.send_verification_email(email)
        logger.info(f"Registered user {stored.id}")
        return UserResult(user=stored.to_public())

    async def sign_in(self, email: str, password: str) -> SessionResult:
        """
        Check credentials and open a session.

        A wrong email and a wrong password produce the same error.
        """
        try:
            self._consume_attempt(f"signin_{email}")
            stored = self._repository.find_by_email(email)
            if stored is None or stored.password != password:
                raise InvalidCredentialsError()
        except VigiaError as e:
            return self._failure(SessionResult, "sign-in", email, e)

        issued_at = self._clock.now()
        session = AuthSession(
            user=stored.to_public(),
            access_token=self._ids.generate_id(),
            expires_at=to_epoch_ms(
                issued_at + timedelta(milliseconds=self._settings.session_ttl_ms)
            ),
        )
        self._repository.save_session(session)

        logger.info(f"User {stored.id} signed in")
        return SessionResult(session=session)

    async def sign_out(self) -> AuthResult:
        self._repository.delete_session()
        return AuthResult()

    async def get_session(self) -> Optional[AuthSession]:
        """
        Return the current session.

        Expiry is checked lazily here; an expired session is erased.
        """
        session = self._repository.load_session()
        if session is None:
            return None

        if to_epoch_ms(self._clock.now()) > session.expires_at:
            logger.debug(f"Session for user {session.user.id} expired")
            self._repository.delete_session()
            return None

        return session

    async def send_password_reset_email(self, email: str) -> AuthResult:
        """
        Issue a reset token.

        An unknown email succeeds without creating a token, so the answer
        does not reveal whether the account exists.
        """
        try:
            self._consume_attempt(f"reset_{email}")
        except VigiaError as e:
            return self._failure(AuthResult, "password reset request", email, e)

        if self._repository.find_by_email(email) is None:
            logger.debug("Password reset requested for unknown email")
            return AuthResult()

        reset = ResetToken(
            email=email,
            token=self._ids.generate_id(),
            expires_at=to_epoch_ms(
                self._clock.now()
                + timedelta(milliseconds=self._settings.reset_token_ttl_ms)
            ),
        )
        self._repository.save_reset_token(reset)

        self._notifier.send_password_reset_email(email, reset.token)
        return AuthResult()

    async def reset_password(self, email: str, token: str, new_password: str) -> AuthResult:
        """Redeem a reset token. A token can be redeemed once."""
        try:
            reset = self._repository.load_reset_token(email)
            if (
                reset is None
                or reset.token != token
                or to_epoch_ms(self._clock.now()) > reset.expires_at
            ):
                raise InvalidResetTokenError()

            self._validate_password(new_password)

            self._repository.modify_user(
                lambda u: u.email == email,
                lambda u: u.model_copy(update={"password": new_password}),
                identifier=email,
            )
        except VigiaError as e:
            return self._failure(AuthResult, "password reset", email, e)

        self._repository.delete_reset_token(email)
        logger.info("Password reset completed")
        return AuthResult()

    async def update_user(
        self,
        user_id: str,
        updates: Union[UserUpdate, dict[str, Any]],
    ) -> UserResult:
        """
        Merge profile fields into a user.

        Only fields present in ``updates`` are applied; the password
        cannot be changed this way. Every profile field is required, so
        an explicit None is rejected like any other malformed value.
        """
        try:
            changes = self._profile_changes(updates)
            if "email" in changes:
                self._validate_email(changes["email"])

            stored = self._repository.modify_user(
                lambda u: u.id == user_id,
                lambda u: StoredUser.model_validate({**u.model_dump(), **changes}),
                identifier=user_id,
            )
        except VigiaError as e:
            return self._failure(UserResult, "profile update", user_id, e)

        return UserResult(user=stored.to_public())

    async def verify_email(self, email: str, token: str) -> AuthResult:
        """
        Mark an email as verified.

        The token is accepted as-is; there is no stored verification token
        to compare it with.
        """
        try:
            self._repository.modify_user(
                lambda u: u.email == email,
                lambda u: u.model_copy(update={"email_verified": True}),
                identifier=email,
            )
        except VigiaError as e:
            return self._failure(AuthResult, "email verification", email, e)

        return AuthResult()

    async def change_password(
        self,
        user_id: str,
        current_password: str,
        new_password: str,
    ) -> AuthResult:
        """Replace a password after checking the current one."""
        try:
            stored = self._repository.find_by_id(user_id)
            if stored is None:
                raise UserNotFoundError(user_id)
            if stored.password != current_password:
                raise InvalidCredentialsError()

            self._validate_password(new_password)

            self._repository.modify_user(
                lambda u: u.id == user_id,
                lambda u: u.model_copy(update={"password": new_password}),
                identifier=user_id,
            )
        except VigiaError as e:
            return self._failure(AuthResult, "password change", user_id, e)

        return AuthResult()

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    def _consume_attempt(self, key: str) -> None:
        if not self._rate_limiter.check_and_consume(key):
            raise TooManyAttemptsError(key)

    def _validate_email(self, email: str) -> None:
        if not email or "@" not in email:
            raise InvalidEmailError(email)

    def _profile_changes(self, updates: Union[UserUpdate, dict[str, Any]]) -> dict[str, Any]:
        if not isinstance(updates, UserUpdate):
            try:
                updates = UserUpdate.model_validate(updates)
            except PydanticValidationError as e:
                raise InvalidProfileError(
                    [".".join(str(part) for part in err["loc"]) for err in e.errors()]
                ) from e

        changes = {name: getattr(updates, name) for name in updates.model_fields_set}
        missing = sorted(name for name, value in changes.items() if value is None)
        if missing:
            raise InvalidProfileError(missing)
        return changes

    def _validate_password(self, password: str) -> None:
        min_length = self._settings.min_password_length
        if not password or len(password) < min_length:
            raise WeakPasswordError(min_length)

    def _failure(self, result_type, operation: str, subject: str, error: VigiaError):
        logger.warning(f"{operation} rejected for {subject}: {error.code}")
        return result_type(error=error.message, code=error.code)


# Module-level instance getter
_service_instance: Optional[AuthService] = None


def get_auth_service() -> AuthService:
    """Get the auth service singleton."""
    global _service_instance
    if _service_instance is None:
        _service_instance = AuthService()
    return _service_instance


def reset_auth_service() -> None:
    """Reset the auth service singleton (for testing)."""
    global _service_instance
    _service_instance = None
