"""
Case repository for key-value storage access.

Encapsulates the persisted state store records:
- vigia_cases: list of cases, newest first
- vigia_comments: list of comments, insertion order
- vigia_user: the lightweight current user
"""

from typing import Optional

from shared.repository import BaseRepository

from .models import Case, Comment, CurrentUser

CASES_KEY = "vigia_cases"
COMMENTS_KEY = "vigia_comments"
CURRENT_USER_KEY = "vigia_user"


class CaseRepository(BaseRepository[Case]):
    """
    Repository for case data access.

    Stores each collection whole under its own key. Cases and comments
    are written independently; there is no cross-key transaction.
    """

    def load_cases(self) -> list[Case]:
        return self._load_list(CASES_KEY, Case)

    def save_cases(self, cases: list[Case]) -> None:
        self._save_list(CASES_KEY, cases)

    def load_comments(self) -> list[Comment]:
        return self._load_list(COMMENTS_KEY, Comment)

    def save_comments(self, comments: list[Comment]) -> None:
        self._save_list(COMMENTS_KEY, comments)

    def load_current_user(self) -> Optional[CurrentUser]:
        return self._load_model(CURRENT_USER_KEY, CurrentUser)

    def save_current_user(self, user: CurrentUser) -> None:
        self._save_model(CURRENT_USER_KEY, user)

    def delete_current_user(self) -> None:
        self._delete(CURRENT_USER_KEY)
