"""Wizard step navigation and the resume pointer.

Steps follow the variant's question order strictly, except that a step
whose guard rejects the current answers is skipped in both directions
(pain's SITE_DETAILS step when no site is selected).
"""

from __future__ import annotations

from typing import Any

from careplan_engine.models.assessment import ResumePoint
from careplan_engine.registry import CategoryVariant


def _walk(variant: CategoryVariant, start: int, step: int, details: Any) -> str | None:
    order = variant.question_order
    i = start + step
    while 0 <= i < len(order):
        if variant.is_step_enabled(order[i], details):
            return order[i]
        i += step
    return None


def next_question(variant: CategoryVariant, current: str, details: Any) -> str | None:
    """Step after *current*, or None when *current* is the last step.

    Raises ``ValueError`` if *current* is not a step of the variant.
    """
    index = variant.index_of(current)
    if index is None:
        raise ValueError(f"{current!r} is not a question of {variant.category.value}")
    return _walk(variant, index, 1, details)


def previous_question(variant: CategoryVariant, current: str, details: Any) -> str | None:
    """Step before *current*, or None when *current* is the first step."""
    index = variant.index_of(current)
    if index is None:
        raise ValueError(f"{current!r} is not a question of {variant.category.value}")
    return _walk(variant, index, -1, details)


def resume_point(
    variant: CategoryVariant,
    status: str,
    current_question_id: str | None,
    details: Any = None,
) -> ResumePoint:
    """Where the wizard re-enters an item.

    Completed items open on the result view; everything else opens on the
    stored step when it is valid for the category, else on the first step.
    When *details* are given and the stored step is disabled for them, the
    nearest enabled step after it (or failing that, before it) is used.
    """
    total = len(variant.question_order)
    if status == "COMPLETED":
        return ResumePoint(view="result", total_steps=total)
    order = variant.question_order
    index = variant.index_of(current_question_id)
    if index is None:
        index = 0
    if details is not None and not variant.is_step_enabled(order[index], details):
        target = _walk(variant, index, 1, details) or _walk(variant, index, -1, details)
        if target is not None:
            index = variant.index_of(target)
    return ResumePoint(
        view="question",
        question_id=order[index],
        step_index=index,
        total_steps=total,
    )
