"""
Application state store.

Holds cases, comments and the current user in memory, hydrated once
from the key-value store and written back after every mutation.
"""

import logging
import threading
from typing import Any, Optional, Union

from pydantic import ValidationError as PydanticValidationError

from shared.clock import IClock, SystemClock
from shared.ids import IIdGenerator, UuidGenerator
from shared.storage import get_kv_store

from modules.auth.models import AuthSession, UserRole

from .interfaces import ICaseStore
from .models import Case, CaseUpdate, Comment, CurrentUser, NewCase
from .repository import CaseRepository

logger = logging.getLogger(__name__)


class CaseStore(ICaseStore):
    """
    In-memory state store with write-through persistence.

    Cases and comments are flushed independently, each right after the
    mutation that touched it. The current user is only written on
    login and logout.
    """

    def __init__(
        self,
        repository: Optional[CaseRepository] = None,
        clock: Optional[IClock] = None,
        id_generator: Optional[IIdGenerator] = None,
    ):
        self._repository = repository or CaseRepository(get_kv_store())
        self._clock = clock or SystemClock()
        self._ids = id_generator or UuidGenerator()
        self._lock = threading.RLock()

        self._cases: list[Case] = self._repository.load_cases()
        self._comments: list[Comment] = self._repository.load_comments()
        self._current_user: Optional[CurrentUser] = self._repository.load_current_user()

        logger.debug(
            f"Hydrated {len(self._cases)} cases and {len(self._comments)} comments"
        )

    # -------------------------------------------------------------------------
    # Read access
    # -------------------------------------------------------------------------

    @property
    def cases(self) -> list[Case]:
        return list(self._cases)

    @property
    def comments(self) -> list[Comment]:
        return list(self._comments)

    @property
    def current_user(self) -> Optional[CurrentUser]:
        return self._current_user

    def get_case(self, case_id: str) -> Optional[Case]:
        return next((c for c in self._cases if c.id == case_id), None)

    # -------------------------------------------------------------------------
    # Cases
    # -------------------------------------------------------------------------

    def add_case(self, data: Union[NewCase, dict[str, Any]]) -> Optional[Case]:
        user = self._current_user
        if user is None:
            return None

        if not isinstance(data, NewCase):
            data = NewCase.model_validate(data)

        now = self._clock.now()
        case = Case(
            **data.model_dump(),
            id=self._ids.generate_id(),
            supports=0,
            created_at=now,
            updated_at=now,
            user_id=user.id,
            user_name=user.name,
        )

        with self._lock:
            self._cases = [case, *self._cases]
            self._repository.save_cases(self._cases)

        logger.info(f"Case {case.id} opened by {user.id}")
        return case

    def update_case(
        self,
        case_id: str,
        updates: Union[CaseUpdate, dict[str, Any]],
    ) -> Optional[Case]:
        """
        Merge the explicitly set fields of ``updates`` into a case.

        updated_at is refreshed; every other field keeps its value. An
        update that would leave the case invalid (an unknown status, an
        out-of-range iir, None for a required field) is a no-op.
        """
        try:
            if not isinstance(updates, CaseUpdate):
                updates = CaseUpdate.model_validate(updates)
        except PydanticValidationError as e:
            logger.warning(f"Ignored invalid update for case {case_id}: {e.error_count()} errors")
            return None
        changes = {name: getattr(updates, name) for name in updates.model_fields_set}

        with self._lock:
            index = self._index_of(case_id)
            if index is None:
                return None

            try:
                updated = Case.model_validate(
                    {
                        **self._cases[index].model_dump(),
                        **changes,
                        "updated_at": self._clock.now(),
                    }
                )
            except PydanticValidationError as e:
                logger.warning(f"Ignored invalid update for case {case_id}: {e.error_count()} errors")
                return None
            self._cases[index] = updated
            self._repository.save_cases(self._cases)

        return updated

    def delete_case(self, case_id: str) -> None:
        """Remove a case and every comment that refers to it."""
        with self._lock:
            self._cases = [c for c in self._cases if c.id != case_id]
            self._comments = [c for c in self._comments if c.case_id != case_id]
            self._repository.save_cases(self._cases)
            self._repository.save_comments(self._comments)

        logger.info(f"Case {case_id} deleted")

    def support_case(self, case_id: str) -> Optional[Case]:
        """
        Add one support to a case.

        The same user can support a case any number of times.
        """
        with self._lock:
            index = self._index_of(case_id)
            if index is None:
                return None

            case = self._cases[index]
            updated = case.model_copy(update={"supports": case.supports + 1})
            self._cases[index] = updated
            self._repository.save_cases(self._cases)

        return updated

    # -------------------------------------------------------------------------
    # Comments
    # -------------------------------------------------------------------------

    def add_comment(self, case_id: str, text: str) -> Optional[Comment]:
        """Append a comment. The case id is not checked against the cases."""
        user = self._current_user
        if user is None:
            return None

        comment = Comment(
            id=self._ids.generate_id(),
            case_id=case_id,
            user_id=user.id,
            user_name=user.name,
            text=text,
            created_at=self._clock.now(),
        )

        with self._lock:
            self._comments = [*self._comments, comment]
            self._repository.save_comments(self._comments)

        return comment

    # -------------------------------------------------------------------------
    # Current user
    # -------------------------------------------------------------------------

    def login(self, name: str, is_admin: bool) -> CurrentUser:
        user = CurrentUser(id=self._ids.generate_id(), name=name, is_admin=is_admin)
        self._set_current_user(user)
        return user

    def login_from_session(self, session: AuthSession) -> CurrentUser:
        """Act as the auth session's user, keeping its id and name."""
        user = CurrentUser(
            id=session.user.id,
            name=session.user.name,
            is_admin=session.user.role == UserRole.ADMIN,
        )
        self._set_current_user(user)
        return user

    def logout(self) -> None:
        with self._lock:
            self._current_user = None
            self._repository.delete_current_user()

    def _set_current_user(self, user: CurrentUser) -> None:
        with self._lock:
            self._current_user = user
            self._repository.save_current_user(user)
        logger.info(f"Acting as user {user.id}")

    def _index_of(self, case_id: str) -> Optional[int]:
        return next((i for i, c in enumerate(self._cases) if c.id == case_id), None)


# Module-level instance getter
_store_instance: Optional[CaseStore] = None


def get_case_store() -> CaseStore:
    """Get the state store singleton, hydrated from the process-wide KV store."""
    global _store_instance
    if _store_instance is None:
        _store_instance = CaseStore()
    return _store_instance


def reset_case_store() -> None:
    """Reset the state store singleton (for testing)."""
    global _store_instance
    _store_instance = None
