"""
Read-only queries over cases and comments.

Used by the case list (filters), the case detail page (comments of one
case) and the moderation page (aggregated report).
"""

from typing import Iterable, Optional

from .models import Case, CasePriority, CaseReport, CaseStatus, Comment


def filter_cases(
    cases: Iterable[Case],
    status: Optional[CaseStatus] = None,
    priority: Optional[CasePriority] = None,
) -> list[Case]:
    """
    Keep the cases matching a status and/or priority.

    Args:
        cases: Cases to filter, order is preserved.
        status: Required status, or None for any.
        priority: Required priority, or None for any.

    Returns:
        Matching cases.
    """
    return [
        c for c in cases
        if (status is None or c.status == status)
        and (priority is None or c.priority == priority)
    ]


def comments_for_case(comments: Iterable[Comment], case_id: str) -> list[Comment]:
    """Comments of one case, in the order they were posted."""
    return [c for c in comments if c.case_id == case_id]


def build_report(cases: Iterable[Case]) -> CaseReport:
    """
    Summarize cases for moderators.

    Every status and priority appears in the counts, zero-filled. The
    average IIR only covers scored cases and is None when there are none.
    """
    cases = list(cases)

    by_status = {status: 0 for status in CaseStatus}
    by_priority = {priority: 0 for priority in CasePriority}
    for case in cases:
        by_status[case.status] += 1
        by_priority[case.priority] += 1

    scores = [c.iir for c in cases if c.iir is not None]
    avg_iir = sum(scores) / len(scores) if scores else None

    return CaseReport(
        total_cases=len(cases),
        by_status=by_status,
        by_priority=by_priority,
        avg_iir=avg_iir,
    )
