"""
Cases module.

The application state store: reported cases, their comments and the
user the UI acts for, persisted through the key-value store.

Public API:
- ICaseStore: Interface for state store operations
- Case, Comment, CurrentUser: Persisted records
- NewCase, CaseUpdate: Inputs to add_case / update_case
- filter_cases, comments_for_case, build_report: Read-only queries
"""

from .interfaces import ICaseStore
from .models import (
    CaseCategory,
    CaseStatus,
    CasePriority,
    Location,
    NewCase,
    Case,
    CaseUpdate,
    Comment,
    CurrentUser,
    CaseReport,
)
from .reports import filter_cases, comments_for_case, build_report

__all__ = [
    # Interface
    "ICaseStore",
    # Models
    "CaseCategory",
    "CaseStatus",
    "CasePriority",
    "Location",
    "NewCase",
    "Case",
    "CaseUpdate",
    "Comment",
    "CurrentUser",
    "CaseReport",
    # Queries
    "filter_cases",
    "comments_for_case",
    "build_report",
]
