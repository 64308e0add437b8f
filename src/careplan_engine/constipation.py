"""Constipation rules: severity, suggestions and the note.

Severity comes from a point score over bowel history, stool form and
abdominal findings, with a short-cut to NONE for a recent normal stool.
Unanswered fields contribute nothing; in particular an unanswered bowel
sound check is not counted as "no bowel sounds".
"""

from __future__ import annotations

from typing import Mapping

from careplan_engine.constants import (
    CONSTIPATION_NOTE_HEADER,
    CONSTIPATION_SEVERITY_THRESHOLDS,
    PROPOSALS_HEADER,
)
from careplan_engine.models.assessment import Proposal
from careplan_engine.models.constipation import ConstipationDetails
from careplan_engine.rules import ProposalRule, compose_note, evaluate_rules

NO_CONSTIPATION_MESSAGE = "No signs of constipation at present. Continue to observe."


# ---------------------------------------------------------------------------
# Severity
# ---------------------------------------------------------------------------

def _days_score(days: int) -> int:
    if days >= 5:
        return 3
    if days >= 3:
        return 2
    if days >= 2:
        return 1
    return 0


def _normal_stool(bristol: int | None) -> bool:
    return bristol is None or 3 <= bristol <= 5


def calculate_constipation_score(details: ConstipationDetails) -> int:
    score = _days_score(details.days_without_bowel_movement or 0)
    if details.bristol_scale is not None and details.bristol_scale <= 2:
        score += 2
    if details.has_nausea:
        score += 2
    if details.has_abdominal_distension:
        score += 1
    if details.has_bowel_sounds is False:
        score += 2
    if details.has_fecal_mass:
        score += 2
    return score


def determine_constipation_severity(details: ConstipationDetails) -> str:
    """NONE for at most one day without a normal stool, else by score.

    Score 0 -> NONE, 1-3 -> MILD, 4-6 -> MODERATE, 7+ -> SEVERE.
    """
    days = details.days_without_bowel_movement or 0
    if days <= 1 and _normal_stool(details.bristol_scale):
        return "NONE"
    score = calculate_constipation_score(details)
    for lower_bound, severity in CONSTIPATION_SEVERITY_THRESHOLDS:
        if score >= lower_bound:
            return severity
    return "NONE"


# ---------------------------------------------------------------------------
# Suggestions
# ---------------------------------------------------------------------------

def _poor_intake(d: ConstipationDetails) -> bool:
    return d.has_appetite is False or d.meal_amount == "SMALL"


def _always(d: ConstipationDetails) -> bool:
    return True


def _rule(rule_id: str, priority: int, message: str, applies=_always) -> ProposalRule:
    return ProposalRule(
        id=rule_id, category="constipation", message=message, priority=priority, applies=applies,
    )


# Severity -> table.  Priorities follow the order the nurse should act in.
SUGGESTION_RULES: Mapping[str, tuple[ProposalRule, ...]] = {
    "NONE": (
        _rule("constipation_none", 1, NO_CONSTIPATION_MESSAGE),
    ),
    "MILD": (
        _rule("constipation_mild_fluids", 1, "Consider increasing fluid intake."),
        _rule("constipation_mild_fiber", 2, "Recommend meals containing dietary fibre."),
        _rule(
            "constipation_mild_small_meals",
            3,
            "Poor appetite or small meals observed. Consider small, frequent meals.",
            _poor_intake,
        ),
        _rule("constipation_mild_mobilise", 4, "Encourage moderate exercise and getting out of bed."),
    ),
    "MODERATE": (
        _rule("constipation_moderate_fluids", 1, "Check fluid intake and consider increasing it."),
        _rule("constipation_moderate_fiber", 2, "Consider providing meals containing dietary fibre."),
        _rule("constipation_moderate_massage", 3, "Consider abdominal massage."),
        _rule(
            "constipation_moderate_warm_compress",
            4,
            "Abdominal distension observed. Consider a warm compress on the abdomen.",
            lambda d: bool(d.has_abdominal_distension),
        ),
        _rule(
            "constipation_moderate_dietitian",
            5,
            "Poor appetite or small meals observed. Consider consulting a dietitian.",
            _poor_intake,
        ),
        _rule("constipation_moderate_laxative", 6, "Consult the physician about a laxative."),
    ),
    "SEVERE": (
        _rule(
            "constipation_severe_report",
            1,
            "Report to the physician and discuss prescribing a laxative or an enema.",
        ),
        _rule(
            "constipation_severe_antiemetic",
            2,
            "Nausea observed. Consult the physician about an antiemetic.",
            lambda d: bool(d.has_nausea),
        ),
        _rule(
            "constipation_severe_xray",
            3,
            "Marked abdominal distension. Suggest an abdominal X-ray to the physician.",
            lambda d: bool(d.has_abdominal_distension),
        ),
        _rule(
            "constipation_severe_disimpaction",
            4,
            "Fecal mass found on palpation. Consult the physician about manual disimpaction.",
            lambda d: bool(d.has_fecal_mass),
        ),
        _rule(
            "constipation_severe_ileus",
            5,
            "No bowel sounds heard. Report the possibility of ileus to the physician.",
            lambda d: d.has_bowel_sounds is False,
        ),
        _rule("constipation_severe_monitor", 6, "Monitor fluid and food intake more closely."),
        _rule("constipation_severe_record", 7, "Keep recording bowel movements."),
    ),
}


def generate_constipation_proposals(details: ConstipationDetails) -> list[Proposal]:
    """Suggestions for the severity of *details*; never empty."""
    severity = determine_constipation_severity(details)
    return evaluate_rules(SUGGESTION_RULES[severity], details)


# ---------------------------------------------------------------------------
# Instructions
# ---------------------------------------------------------------------------

def generate_constipation_instructions(
    severity: str,
    proposals: list[Proposal],
    *,
    severity_labels: Mapping[str, str],
) -> str:
    """Compose the constipation note stored on the care plan item."""
    return compose_note(
        CONSTIPATION_NOTE_HEADER,
        severity_labels.get(severity, severity),
        proposals,
        empty_message=NO_CONSTIPATION_MESSAGE,
        proposals_header=PROPOSALS_HEADER,
    )
