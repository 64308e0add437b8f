"""Overall care plan status, projected from the per-category statuses.

Never stored: every overview read calls :func:`derive_overall_status`.
"""

from typing import Iterable

_CLOSED = frozenset({"COMPLETED", "NOT_APPLICABLE"})
_OPEN = frozenset({"NOT_STARTED", "NOT_APPLICABLE"})


def derive_overall_status(statuses: Iterable[str]) -> str:
    """Project item statuses onto NOT_STARTED / IN_PROGRESS / COMPLETED.

    - no items, or only NOT_STARTED (optionally with NOT_APPLICABLE) -> NOT_STARTED
    - only COMPLETED / NOT_APPLICABLE -> COMPLETED
    - anything else -> IN_PROGRESS

    An all-NOT_APPLICABLE plan counts as COMPLETED.
    """
    values = [str(getattr(s, "value", s)) for s in statuses]
    if not values:
        return "NOT_STARTED"
    if all(v in _CLOSED for v in values):
        return "COMPLETED"
    if all(v in _OPEN for v in values):
        return "NOT_STARTED"
    return "IN_PROGRESS"
