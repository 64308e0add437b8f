"""Constipation rules: severity, suggestions and the note."""

import pytest

from careplan_engine.constipation import (
    NO_CONSTIPATION_MESSAGE,
    SUGGESTION_RULES,
    calculate_constipation_score,
    determine_constipation_severity,
    generate_constipation_instructions,
    generate_constipation_proposals,
)
from careplan_engine.models import ConstipationDetails


def answers(**overrides):
    """A complete answer set with no findings, overridden per test."""
    base = dict(
        days_without_bowel_movement=0,
        bristol_scale=4,
        has_nausea=False,
        has_abdominal_distension=False,
        has_appetite=True,
        meal_amount="NORMAL",
        has_bowel_sounds=True,
        has_intestinal_gas=False,
        has_fecal_mass=False,
    )
    base.update(overrides)
    return ConstipationDetails(**base)


def ids(proposals):
    return [p.id for p in proposals]


# =====================================================================
# Severity
# =====================================================================


class TestSeverity:

    @pytest.mark.parametrize(
        "days, expected",
        [(0, 0), (1, 0), (2, 1), (3, 2), (4, 2), (5, 3), (30, 3)],
    )
    def test_days_score(self, days, expected):
        assert calculate_constipation_score(answers(days_without_bowel_movement=days)) == expected

    def test_findings_add_up(self):
        details = answers(
            days_without_bowel_movement=5,
            bristol_scale=1,
            has_nausea=True,
            has_abdominal_distension=True,
            has_bowel_sounds=False,
            has_fecal_mass=True,
        )
        assert calculate_constipation_score(details) == 3 + 2 + 2 + 1 + 2 + 2

    def test_unanswered_fields_add_nothing(self):
        assert calculate_constipation_score(ConstipationDetails()) == 0

    def test_unanswered_bowel_sounds_are_not_absent(self):
        details = answers(days_without_bowel_movement=2, has_bowel_sounds=None)
        assert calculate_constipation_score(details) == 1

    @pytest.mark.parametrize("bristol", [None, 3, 4, 5])
    def test_recent_normal_stool_is_none(self, bristol):
        details = answers(days_without_bowel_movement=1, bristol_scale=bristol, has_nausea=True)
        assert determine_constipation_severity(details) == "NONE"

    @pytest.mark.parametrize("bristol", [1, 2, 6, 7])
    def test_recent_abnormal_stool_is_scored(self, bristol):
        details = answers(days_without_bowel_movement=1, bristol_scale=bristol, has_nausea=True)
        assert determine_constipation_severity(details) != "NONE"

    def test_abnormal_stool_without_findings_is_none(self):
        # watery stool scores nothing on its own
        assert determine_constipation_severity(answers(bristol_scale=7)) == "NONE"

    @pytest.mark.parametrize(
        "overrides, expected",
        [
            ({"days_without_bowel_movement": 2}, "MILD"),
            ({"days_without_bowel_movement": 3, "has_abdominal_distension": True}, "MILD"),
            ({"days_without_bowel_movement": 3, "has_nausea": True}, "MODERATE"),
            ({"days_without_bowel_movement": 5, "has_fecal_mass": True, "has_abdominal_distension": True}, "MODERATE"),
            ({"days_without_bowel_movement": 5, "has_fecal_mass": True, "has_nausea": True}, "SEVERE"),
        ],
    )
    def test_thresholds(self, overrides, expected):
        assert determine_constipation_severity(answers(**overrides)) == expected


# =====================================================================
# Suggestions
# =====================================================================


class TestSuggestions:

    def test_every_severity_has_a_table(self):
        assert set(SUGGESTION_RULES) == {"NONE", "MILD", "MODERATE", "SEVERE"}

    def test_none(self):
        proposals = generate_constipation_proposals(answers())
        assert ids(proposals) == ["constipation_none"]
        assert proposals[0].message == NO_CONSTIPATION_MESSAGE

    def test_mild_with_good_intake(self):
        proposals = generate_constipation_proposals(answers(days_without_bowel_movement=2))
        assert ids(proposals) == [
            "constipation_mild_fluids",
            "constipation_mild_fiber",
            "constipation_mild_mobilise",
        ]

    @pytest.mark.parametrize(
        "overrides", [{"has_appetite": False}, {"meal_amount": "SMALL"}],
    )
    def test_mild_with_poor_intake(self, overrides):
        details = answers(days_without_bowel_movement=2, **overrides)
        assert "constipation_mild_small_meals" in ids(generate_constipation_proposals(details))

    def test_moderate_with_distension_and_poor_appetite(self):
        details = answers(
            days_without_bowel_movement=4,
            has_nausea=True,
            has_abdominal_distension=True,
            has_appetite=False,
        )
        assert ids(generate_constipation_proposals(details)) == [
            "constipation_moderate_fluids",
            "constipation_moderate_fiber",
            "constipation_moderate_massage",
            "constipation_moderate_warm_compress",
            "constipation_moderate_dietitian",
            "constipation_moderate_laxative",
        ]

    def test_severe_with_fecal_mass(self):
        details = answers(
            days_without_bowel_movement=7,
            bristol_scale=1,
            has_fecal_mass=True,
        )
        assert ids(generate_constipation_proposals(details)) == [
            "constipation_severe_report",
            "constipation_severe_disimpaction",
            "constipation_severe_monitor",
            "constipation_severe_record",
        ]

    def test_all_suggestions_are_constipation(self):
        details = answers(days_without_bowel_movement=9, has_nausea=True, has_bowel_sounds=False)
        assert {p.category for p in generate_constipation_proposals(details)} == {"constipation"}


# =====================================================================
# Instructions
# =====================================================================


class TestInstructions:

    def test_header_and_bullets(self, registry):
        details = answers(days_without_bowel_movement=2)
        proposals = generate_constipation_proposals(details)
        text = generate_constipation_instructions(
            "MILD", proposals, severity_labels=registry.get("CONSTIPATION").risk_level_labels,
        )
        lines = text.split("\n")
        assert lines[0] == "[Constipation assessment] Mild constipation"
        assert lines[1] == ""
        assert lines[2] == "[Proposed actions]"
        assert lines[3:] == [f"- {p.message}" for p in proposals]

    def test_matches_registry_variant(self, registry):
        details = answers(days_without_bowel_movement=3, has_nausea=True)
        result = registry.get("CONSTIPATION").assess(details)

        assert result.risk_level == "MODERATE"
        assert result.risk_level_label == "Moderate constipation"
        assert result.follow_up_categories == []
        for proposal in result.proposals:
            assert proposal.message in result.instructions
