"""
Auth repository for key-value storage access.

Encapsulates the persisted auth records:
- vigia_users: list of users, with passwords
- vigia_session: the single active session
- reset_token_<email>: one pending reset token per email
"""

from typing import Callable, Optional

from shared.repository import BaseRepository
from shared.storage import IKeyValueStore

from .exceptions import DuplicateEmailError, UserNotFoundError
from .models import AuthSession, ResetToken, StoredUser

USERS_KEY = "vigia_users"
SESSION_KEY = "vigia_session"
RESET_TOKEN_KEY_PREFIX = "reset_token_"


def reset_token_key(email: str) -> str:
    """Storage key of the reset token for an email."""
    return f"{RESET_TOKEN_KEY_PREFIX}{email}"


class AuthRepository(BaseRepository[StoredUser]):
    """
    Repository for users, the session slot and reset tokens.

    Every read-modify-write of the user list happens under the
    repository lock, so duplicate checks and appends are atomic within
    the process.

    Note: This repository does NOT check passwords or tokens.
    The service layer is responsible for that.
    """

    def __init__(self, store: IKeyValueStore) -> None:
        super().__init__(store)

    # -------------------------------------------------------------------------
    # Users
    # -------------------------------------------------------------------------

    def list_users(self) -> list[StoredUser]:
        return self._load_list(USERS_KEY, StoredUser)

    def find_by_email(self, email: str) -> Optional[StoredUser]:
        return next((u for u in self.list_users() if u.email == email), None)

    def find_by_id(self, user_id: str) -> Optional[StoredUser]:
        return next((u for u in self.list_users() if u.id == user_id), None)

    def add_user(self, user: StoredUser) -> StoredUser:
        """
        Append a user to the persisted list.

        Raises:
            DuplicateEmailError: If the email is already registered.
        """
        with self._lock:
            users = self.list_users()
            if any(u.email == user.email for u in users):
                raise DuplicateEmailError(user.email)
            users.append(user)
            self._save_list(USERS_KEY, users)
        return user

    def modify_user(
        self,
        match: Callable[[StoredUser], bool],
        change: Callable[[StoredUser], StoredUser],
        identifier: str,
    ) -> StoredUser:
        """
        Replace the first user matching ``match`` with ``change(user)``.

        Args:
            match: Predicate selecting the user.
            change: Returns the updated record. May raise to abort.
            identifier: Id or email, used in the not-found error.

        Returns:
            The updated record.

        Raises:
            UserNotFoundError: If no user matches.
            DuplicateEmailError: If the change takes another user's email.
        """
        with self._lock:
            users = self.list_users()
            index = next((i for i, u in enumerate(users) if match(u)), None)
            if index is None:
                raise UserNotFoundError(identifier)

            updated = change(users[index])
            if any(
                u.email == updated.email for i, u in enumerate(users) if i != index
            ):
                raise DuplicateEmailError(updated.email)

            users[index] = updated
            self._save_list(USERS_KEY, users)
        return updated

    # -------------------------------------------------------------------------
    # Session slot
    # -------------------------------------------------------------------------

    def load_session(self) -> Optional[AuthSession]:
        return self._load_model(SESSION_KEY, AuthSession)

    def save_session(self, session: AuthSession) -> None:
        self._save_model(SESSION_KEY, session)

    def delete_session(self) -> None:
        self._delete(SESSION_KEY)

    # -------------------------------------------------------------------------
    # Reset tokens
    # -------------------------------------------------------------------------

    def load_reset_token(self, email: str) -> Optional[ResetToken]:
        return self._load_model(reset_token_key(email), ResetToken)

    def save_reset_token(self, token: ResetToken) -> None:
        self._save_model(reset_token_key(token.email), token)

    def delete_reset_token(self, email: str) -> None:
        self._delete(reset_token_key(email))
