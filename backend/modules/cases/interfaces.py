"""
Cases module interface.

The UI layer should depend on ICaseStore, not the concrete implementation.
"""

from typing import Any, Optional, Protocol, Union, runtime_checkable

from modules.auth.models import AuthSession

from .models import Case, CaseUpdate, Comment, CurrentUser, NewCase


@runtime_checkable
class ICaseStore(Protocol):
    """
    Interface for the application state store.

    Mutations that need a user, or that target an unknown case, are
    silent no-ops. Callers check authentication before invoking them.
    An update with invalid values is a no-op too; add_case validates its
    input and raises pydantic.ValidationError for a malformed new case.
    """

    @property
    def cases(self) -> list[Case]:
        """All cases, newest first."""
        ...

    @property
    def comments(self) -> list[Comment]:
        """All comments, in insertion order."""
        ...

    @property
    def current_user(self) -> Optional[CurrentUser]:
        """The logged-in user, if any."""
        ...

    def get_case(self, case_id: str) -> Optional[Case]:
        """Look up one case."""
        ...

    def add_case(self, data: Union[NewCase, dict[str, Any]]) -> Optional[Case]:
        """
        Open a case on behalf of the current user.

        Returns:
            The created Case, or None if nobody is logged in
        """
        ...

    def update_case(
        self,
        case_id: str,
        updates: Union[CaseUpdate, dict[str, Any]],
    ) -> Optional[Case]:
        """
        Merge mutable fields into a case and refresh updated_at.

        Returns:
            The updated Case, or None if the case is unknown or the
            update is invalid
        """
        ...

    def delete_case(self, case_id: str) -> None:
        """Remove a case together with its comments."""
        ...

    def support_case(self, case_id: str) -> Optional[Case]:
        """Add one support to a case."""
        ...

    def add_comment(self, case_id: str, text: str) -> Optional[Comment]:
        """Post a comment as the current user."""
        ...

    def login(self, name: str, is_admin: bool) -> CurrentUser:
        """Start acting as a freshly created lightweight user."""
        ...

    def login_from_session(self, session: AuthSession) -> CurrentUser:
        """Start acting as the user of an auth session."""
        ...

    def logout(self) -> None:
        """Stop acting as any user."""
        ...
