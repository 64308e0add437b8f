"""Inflammation rules: fever and lab judgement, suggestions and the note.

Inflammation has no risk level.  Three independent findings (labs, fever,
pain) each yield either an alert or a reassurance; an unknown finding
yields nothing.
"""

from __future__ import annotations

from careplan_engine.constants import FEVER_THRESHOLD, NO_INFLAMMATION_FINDINGS_MESSAGE
from careplan_engine.dehydration import evaluate_lab_deviation
from careplan_engine.models.assessment import Proposal
from careplan_engine.models.inflammation import InflammationDetails
from careplan_engine.rules import ProposalRule, evaluate_rules


def judge_fever(temperature: float | None) -> bool | None:
    """True at or above the fever threshold; None when not measured."""
    if temperature is None:
        return None
    return temperature >= FEVER_THRESHOLD


def judge_inflammation(details: InflammationDetails) -> bool | None:
    """True when CRP or WBC is above range; None when neither has a value."""
    deviations = [
        evaluate_lab_deviation(lab)
        for lab in (details.lab_crp, details.lab_wbc)
    ]
    measured = [d for d in deviations if d != "NO_DATA"]
    if not measured:
        return None
    return "HIGH" in measured


SUGGESTION_RULES: tuple[ProposalRule, ...] = (
    ProposalRule(
        id="inflammation_detected",
        category="inflammation",
        message=(
            "Lab results show an inflammatory response. Check for signs of "
            "infection and discuss antibiotics with the physician."
        ),
        priority=1,
        applies=lambda d: judge_inflammation(d) is True,
    ),
    ProposalRule(
        id="inflammation_monitor",
        category="inflammation",
        message="Follow the CRP and WBC trend over time.",
        priority=2,
        applies=lambda d: judge_inflammation(d) is True,
    ),
    ProposalRule(
        id="inflammation_normal",
        category="inflammation",
        message="Inflammation markers are within range. Continue to observe.",
        priority=3,
        applies=lambda d: judge_inflammation(d) is False,
    ),
    ProposalRule(
        id="fever_detected",
        category="fever",
        message=(
            "Fever observed. Apply cooling, keep the patient hydrated and "
            "consult the physician about an antipyretic."
        ),
        priority=1,
        applies=lambda d: judge_fever(d.body_temperature) is True,
    ),
    ProposalRule(
        id="fever_environment",
        category="fever",
        message="Adjust room temperature and bedding to keep the patient comfortable.",
        priority=2,
        applies=lambda d: judge_fever(d.body_temperature) is True,
    ),
    ProposalRule(
        id="fever_normal",
        category="fever",
        message="Body temperature is normal. Continue to observe.",
        priority=3,
        applies=lambda d: judge_fever(d.body_temperature) is False,
    ),
    ProposalRule(
        id="pain_detected",
        category="pain",
        message="Pain reported. Create the pain care plan as well.",
        priority=1,
        applies=lambda d: d.has_pain is True,
    ),
    ProposalRule(
        id="pain_normal",
        category="pain",
        message="No pain reported. Continue to observe.",
        priority=3,
        applies=lambda d: d.has_pain is False,
    ),
)


def generate_inflammation_proposals(details: InflammationDetails) -> list[Proposal]:
    return evaluate_rules(SUGGESTION_RULES, details)


def inflammation_follow_ups(details: InflammationDetails) -> list[str]:
    """Reported pain sends the nurse on to the pain wizard."""
    return ["PAIN"] if details.has_pain else []


def generate_inflammation_instructions(proposals: list[Proposal]) -> str:
    """One ``[category] message`` line per proposal, in priority order."""
    if not proposals:
        return NO_INFLAMMATION_FINDINGS_MESSAGE
    return "\n".join(f"[{p.category}] {p.message}" for p in proposals)
