"""Proposal tables shared by the scored categories.

A table is an ordered tuple of :class:`ProposalRule`.  Evaluation walks the
table once, honours exclusive groups, then stable-sorts by priority so
rules of equal priority keep their table order.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Iterable

from careplan_engine.models.assessment import Proposal


@dataclass(frozen=True)
class ProposalRule:
    """One row of a proposal table.

    ``applies`` inspects the raw answers.  Rules sharing an ``exclusive``
    group are tried in order and at most one of them fires.
    """

    id: str
    category: str
    message: str
    priority: int
    applies: Callable[[Any], bool]
    exclusive: str | None = None

    def to_proposal(self) -> Proposal:
        return Proposal(
            id=self.id, category=self.category, message=self.message, priority=self.priority,
        )


def evaluate_rules(rules: Iterable[ProposalRule], details: Any) -> list[Proposal]:
    """Fire every applicable rule, then stable-sort ascending by priority."""
    proposals: list[Proposal] = []
    fired_groups: set[str] = set()
    for rule in rules:
        if rule.exclusive is not None and rule.exclusive in fired_groups:
            continue
        if rule.applies(details):
            proposals.append(rule.to_proposal())
            if rule.exclusive is not None:
                fired_groups.add(rule.exclusive)
    # list.sort is stable: equal priorities keep generation order
    proposals.sort(key=lambda p: p.priority)
    return proposals


def compose_note(
    header: str,
    level_label: str,
    proposals: list[Proposal],
    *,
    empty_message: str,
    proposals_header: str,
) -> str:
    """``<header> <level>``, a blank line, then the proposal bullets."""
    lines = [f"{header} {level_label}", ""]
    if not proposals:
        lines.append(empty_message)
    else:
        lines.append(proposals_header)
        lines.extend(f"- {proposal.message}" for proposal in proposals)
    return "\n".join(lines)
