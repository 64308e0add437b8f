"""Dehydration rules: lab deviation, risk score, proposals and the note.

All functions here are pure.  The risk score and the proposal table are
deliberately independent rule sets: their thresholds overlap but are not
the same (systolic BP scores in two tiers, yet a single "low BP" proposal
fires below 100), so neither is derived from the other.
"""

from __future__ import annotations

from typing import Mapping

from careplan_engine.constants import (
    DEHYDRATION_NOTE_HEADER,
    NO_ACTION_NEEDED_MESSAGE,
    PROPOSALS_HEADER,
    RISK_LEVEL_THRESHOLDS,
)
from careplan_engine.models.assessment import AssessmentResult, Proposal
from careplan_engine.models.dehydration import DehydrationDetails, LabValueAnswer
from careplan_engine.rules import ProposalRule, compose_note, evaluate_rules


# ---------------------------------------------------------------------------
# Lab deviation
# ---------------------------------------------------------------------------

def evaluate_lab_deviation(lab: LabValueAnswer | None) -> str:
    """Classify a lab value against its reference range.

    A missing limit never forces HIGH or LOW.
    """
    if lab is None or lab.value is None:
        return "NO_DATA"
    if lab.upper_limit is not None and lab.value > lab.upper_limit:
        return "HIGH"
    if lab.lower_limit is not None and lab.value < lab.lower_limit:
        return "LOW"
    return "NORMAL"


# ---------------------------------------------------------------------------
# Risk score
# ---------------------------------------------------------------------------

_LAB_SCORES = {"HIGH": 3, "LOW": 1}
_VISUAL_SCORES = {"SEVERE": 2, "MILD": 1}
_FREQUENCY_SCORES = {"RARE": 3, "MODERATE": 1}


def _pulse_score(pulse: int | None) -> int:
    if pulse is None:
        return 0
    if pulse > 100:
        return 2
    if pulse > 90:
        return 1
    return 0


def _systolic_score(systolic: int | None) -> int:
    if systolic is None:
        return 0
    if systolic < 90:
        return 3
    if systolic < 100:
        return 2
    return 0


def _intake_amount_score(amount: float | None) -> int:
    if amount is None:
        return 0
    if amount < 500:
        return 3
    if amount < 1000:
        return 2
    if amount < 1500:
        return 1
    return 0


def calculate_dehydration_risk_score(details: DehydrationDetails) -> int:
    """Sum the independent per-field contributions.  Null fields add 0.

    The score is not clamped; anything from 10 up is HIGH.
    """
    score = 0
    for lab in (details.lab_ht, details.lab_hb):
        score += _LAB_SCORES.get(evaluate_lab_deviation(lab), 0)
    score += _pulse_score(details.vital_pulse)
    score += _systolic_score(details.vital_systolic_bp)
    for visual in (
        details.visual_skin,
        details.visual_oral,
        details.visual_dizziness,
        details.visual_urine,
    ):
        score += _VISUAL_SCORES.get(visual, 0)
    score += _FREQUENCY_SCORES.get(details.intake_frequency, 0)
    score += _intake_amount_score(details.intake_amount)
    return score


def determine_risk_level(score: int) -> str:
    """0 -> NONE, 1-4 -> LOW, 5-9 -> MODERATE, 10+ -> HIGH."""
    for lower_bound, level in RISK_LEVEL_THRESHOLDS:
        if score >= lower_bound:
            return level
    return "NONE"


def dehydration_risk_level(details: DehydrationDetails) -> str:
    return determine_risk_level(calculate_dehydration_risk_score(details))


# ---------------------------------------------------------------------------
# Proposals
# ---------------------------------------------------------------------------

def _lab_high(d: DehydrationDetails) -> bool:
    return evaluate_lab_deviation(d.lab_ht) == "HIGH" or evaluate_lab_deviation(d.lab_hb) == "HIGH"


def _below(value: float | None, limit: float) -> bool:
    return value is not None and value < limit


def _skin_or_oral(d: DehydrationDetails, condition: str) -> bool:
    return d.visual_skin == condition or d.visual_oral == condition


PROPOSAL_RULES: tuple[ProposalRule, ...] = (
    ProposalRule(
        id="dehydration_lab_high",
        category="dehydration",
        message=(
            "Lab results show signs of dehydration. Report to the physician "
            "and discuss whether IV fluids are needed."
        ),
        priority=1,
        applies=_lab_high,
    ),
    ProposalRule(
        id="dehydration_bp_low",
        category="dehydration",
        message=(
            "Blood pressure is low. Watch for orthostatic hypotension and "
            "change the patient's position slowly."
        ),
        priority=1,
        applies=lambda d: _below(d.vital_systolic_bp, 100),
    ),
    ProposalRule(
        id="dehydration_pulse_high",
        category="dehydration",
        message="Tachycardia observed. Circulating blood volume may be reduced by dehydration.",
        priority=2,
        applies=lambda d: d.vital_pulse is not None and d.vital_pulse > 100,
    ),
    ProposalRule(
        id="dehydration_visual_severe",
        category="dehydration",
        message=(
            "Marked dryness of skin and oral mucosa. Dehydration may be "
            "progressing; consider oral rehydration or IV fluids."
        ),
        priority=1,
        applies=lambda d: _skin_or_oral(d, "SEVERE"),
        exclusive="visual",
    ),
    ProposalRule(
        id="dehydration_visual_mild",
        category="dehydration",
        message="Mild dryness of skin and oral mucosa. Encourage frequent small drinks.",
        priority=3,
        applies=lambda d: _skin_or_oral(d, "MILD"),
        exclusive="visual",
    ),
    ProposalRule(
        id="dehydration_dizziness_severe",
        category="dehydration",
        message="Strong dizziness on standing. Mind the fall risk and keep the patient at rest.",
        priority=1,
        applies=lambda d: d.visual_dizziness == "SEVERE",
        exclusive="dizziness",
    ),
    ProposalRule(
        id="dehydration_dizziness_mild",
        category="dehydration",
        message="Mild dizziness on standing. Avoid sudden changes of position.",
        priority=3,
        applies=lambda d: d.visual_dizziness == "MILD",
        exclusive="dizziness",
    ),
    ProposalRule(
        id="dehydration_urine_severe",
        category="dehydration",
        message="Urine is markedly concentrated. Dehydration may be progressing; increase fluid intake.",
        priority=2,
        applies=lambda d: d.visual_urine == "SEVERE",
    ),
    ProposalRule(
        id="intake_frequency_rare",
        category="intake",
        message="Drinking frequency is insufficient. Aim for a drink at least once an hour.",
        priority=2,
        applies=lambda d: d.intake_frequency == "RARE",
        exclusive="frequency",
    ),
    ProposalRule(
        id="intake_frequency_moderate",
        category="intake",
        message="Keep drinking frequency in mind and encourage regular small drinks.",
        priority=4,
        applies=lambda d: d.intake_frequency == "MODERATE",
        exclusive="frequency",
    ),
    ProposalRule(
        id="intake_amount_very_low",
        category="intake",
        message=(
            "Daily fluid intake is severely insufficient. Encourage at least "
            "1,500 ml/day; consider IV fluids if oral intake is difficult."
        ),
        priority=1,
        applies=lambda d: _below(d.intake_amount, 500),
        exclusive="amount",
    ),
    ProposalRule(
        id="intake_amount_low",
        category="intake",
        message="Daily fluid intake is insufficient. Encourage a target of 1,500 ml/day.",
        priority=2,
        applies=lambda d: _below(d.intake_amount, 1000),
        exclusive="amount",
    ),
    ProposalRule(
        id="intake_amount_moderate",
        category="intake",
        message="Fluid intake could be a little higher. 1,500 ml/day or more is recommended.",
        priority=3,
        applies=lambda d: _below(d.intake_amount, 1500),
        exclusive="amount",
    ),
)


def generate_dehydration_proposals(details: DehydrationDetails) -> list[Proposal]:
    """Evaluate every rule, then stable-sort ascending by priority."""
    return evaluate_rules(PROPOSAL_RULES, details)


# ---------------------------------------------------------------------------
# Instructions
# ---------------------------------------------------------------------------

def _default_risk_level_labels() -> Mapping[str, str]:
    from careplan_engine.registry import default_registry

    return default_registry().risk_level_labels


def generate_instructions(
    risk_level: str,
    proposals: list[Proposal],
    *,
    risk_level_labels: Mapping[str, str] | None = None,
) -> str:
    """Compose the dehydration note stored on the care plan item."""
    labels = risk_level_labels if risk_level_labels is not None else _default_risk_level_labels()
    return compose_note(
        DEHYDRATION_NOTE_HEADER,
        labels.get(risk_level, risk_level),
        proposals,
        empty_message=NO_ACTION_NEEDED_MESSAGE,
        proposals_header=PROPOSALS_HEADER,
    )


def assess_dehydration(
    details: DehydrationDetails,
    *,
    risk_level_labels: Mapping[str, str] | None = None,
) -> AssessmentResult:
    """Score, propose and compose in one go."""
    labels = risk_level_labels if risk_level_labels is not None else _default_risk_level_labels()
    risk_level = dehydration_risk_level(details)
    proposals = generate_dehydration_proposals(details)
    return AssessmentResult(
        risk_level=risk_level,
        risk_level_label=labels.get(risk_level, risk_level),
        proposals=proposals,
        instructions=generate_instructions(risk_level, proposals, risk_level_labels=labels),
    )
