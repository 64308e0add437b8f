"""Pain composer, pain details schema and site helpers."""

import pytest
from pydantic import ValidationError

from careplan_engine.constants import NO_PAIN_REPORTED_MESSAGE
from careplan_engine.models import PainCarePlanDetails, PainSiteDetail
from careplan_engine.pain import (
    assess_pain,
    create_initial_pain_details,
    generate_pain_instructions,
    group_pain_sites,
    has_selected_sites,
    toggle_pain_site,
)


@pytest.fixture(scope="module")
def vocab(registry):
    return registry.pain_vocabulary


def compose(details, vocab):
    return generate_pain_instructions(details, vocabulary=vocab)


# =====================================================================
# Instruction composer
# =====================================================================


class TestPainInstructions:

    def test_initial_details_report_no_pain(self, vocab):
        assert compose(create_initial_pain_details(), vocab) == NO_PAIN_REPORTED_MESSAGE

    def test_all_false_reports_no_pain(self, vocab):
        details = PainCarePlanDetails(
            has_daytime_pain=False,
            has_nighttime_awakening=False,
            sleep_impact=False,
            mobility_impact=False,
            toilet_impact=False,
        )
        assert compose(details, vocab) == NO_PAIN_REPORTED_MESSAGE

    def test_daytime_pain_only(self, vocab):
        text = compose(PainCarePlanDetails(has_daytime_pain=True), vocab)
        assert text == "- Pain during daytime activity"

    def test_nighttime_awakening(self, vocab):
        text = compose(PainCarePlanDetails(has_nighttime_awakening=True), vocab)
        assert text == "- Woken at night by pain"

    def test_selected_site_without_findings_is_reported(self, vocab):
        details = PainCarePlanDetails(selected_site_ids=["RIGHT_KNEE"])
        text = compose(details, vocab)
        assert text != NO_PAIN_REPORTED_MESSAGE
        assert text == "- Pain sites: Right knee"

    def test_one_line_per_true_site_finding(self, vocab):
        details = PainCarePlanDetails(
            selected_site_ids=["LOWER_BACK", "RIGHT_KNEE"],
            site_details=[
                PainSiteDetail(site_id="LOWER_BACK", touch_pain=True, movement_pain=True),
                PainSiteDetail(site_id="RIGHT_KNEE", movement_pain=False, numbness=True),
            ],
        )
        assert compose(details, vocab).split("\n") == [
            "- Pain sites: Lower back, Right knee",
            "- Lower back: pain on touch",
            "- Lower back: pain on movement",
            "- Right knee: numbness or discomfort",
        ]

    def test_life_impacts_use_their_labels(self, vocab):
        details = PainCarePlanDetails(sleep_impact=True, mobility_impact=None, toilet_impact=True)
        assert compose(details, vocab).split("\n") == [
            "- Pain affects sleep",
            "- Pain affects toileting",
        ]

    def test_full_report_line_count(self, vocab):
        details = PainCarePlanDetails(
            has_daytime_pain=True,
            has_nighttime_awakening=True,
            selected_site_ids=["HEAD"],
            site_details=[PainSiteDetail(site_id="HEAD", touch_pain=True)],
            sleep_impact=True,
            mobility_impact=True,
            toilet_impact=True,
        )
        # daytime, night, site list, one finding, three impacts
        assert len(compose(details, vocab).split("\n")) == 7

    def test_default_vocabulary_is_packaged_registry(self):
        assert generate_pain_instructions(PainCarePlanDetails(has_daytime_pain=True)).startswith("- ")


class TestAssessPain:

    def test_no_score_and_no_proposals(self, vocab):
        result = assess_pain(PainCarePlanDetails(has_daytime_pain=True), vocabulary=vocab)
        assert result.risk_level is None
        assert result.risk_level_label is None
        assert result.proposals == []
        assert result.instructions == "- Pain during daytime activity"

    def test_matches_registry_variant(self, registry, vocab):
        details = PainCarePlanDetails(sleep_impact=True)
        assert registry.get("PAIN").assess(details) == assess_pain(details, vocabulary=vocab)


# =====================================================================
# Schema
# =====================================================================


class TestPainDetailsSchema:

    def test_camel_case_payload(self):
        details = PainCarePlanDetails.model_validate({
            "hasDaytimePain": True,
            "hasNighttimeAwakening": None,
            "selectedSiteIds": ["NECK"],
            "siteDetails": [{"siteId": "NECK", "touchPain": True, "movementPain": None, "numbness": None}],
            "sleepImpact": None,
            "mobilityImpact": False,
            "toiletImpact": None,
        })
        assert details.selected_site_ids == ["NECK"]
        assert details.detail_for("NECK").touch_pain is True

    def test_unknown_site_rejected(self):
        with pytest.raises(ValidationError):
            PainCarePlanDetails(selected_site_ids=["TAIL"])

    def test_duplicate_sites_rejected(self):
        with pytest.raises(ValidationError):
            PainCarePlanDetails(selected_site_ids=["HEAD", "HEAD"])

    def test_detail_for_unselected_site_rejected(self):
        with pytest.raises(ValidationError):
            PainCarePlanDetails(
                selected_site_ids=["HEAD"],
                site_details=[PainSiteDetail(site_id="NECK", touch_pain=True)],
            )

    def test_unknown_key_rejected(self):
        with pytest.raises(ValidationError):
            PainCarePlanDetails.model_validate({"painScore": 7})


# =====================================================================
# Site helpers
# =====================================================================


class TestSiteHelpers:

    def test_toggle_adds_site_with_empty_detail(self):
        details = toggle_pain_site(create_initial_pain_details(), "LEFT_HAND")
        assert details.selected_site_ids == ["LEFT_HAND"]
        assert details.site_details == [PainSiteDetail(site_id="LEFT_HAND")]

    def test_toggle_removes_site_and_detail(self):
        details = PainCarePlanDetails(
            selected_site_ids=["HEAD", "NECK"],
            site_details=[
                PainSiteDetail(site_id="HEAD", touch_pain=True),
                PainSiteDetail(site_id="NECK"),
            ],
        )
        toggled = toggle_pain_site(details, "HEAD")
        assert toggled.selected_site_ids == ["NECK"]
        assert [d.site_id for d in toggled.site_details] == ["NECK"]
        # input is not mutated
        assert details.selected_site_ids == ["HEAD", "NECK"]

    def test_step_guard(self):
        assert has_selected_sites(PainCarePlanDetails()) is False
        assert has_selected_sites(PainCarePlanDetails(selected_site_ids=["CHEST"])) is True

    def test_group_pain_sites(self, vocab):
        groups = group_pain_sites(vocab)
        assert list(groups) == ["HEAD_NECK", "TRUNK", "UPPER_LIMB", "LOWER_LIMB"]
        assert sum(len(sites) for sites in groups.values()) == 23
        assert [s.id for s in groups["HEAD_NECK"]] == ["HEAD", "NECK"]
        assert "HIP" in [s.id for s in groups["TRUNK"]]
