"""Pain assessment answers and the pain vocabulary tables.

Pain has no score: the answers are booleans per condition plus the set of
anatomical sites the patient reported.  The vocabulary (site labels, body
regions, per-site checks and life-impact items) is loaded from the category
YAML by the registry; the frozen models below are its typed form.
"""

from datetime import datetime
from typing import Literal, Mapping

from pydantic import BaseModel, ConfigDict, Field, model_validator

from careplan_engine.models.base import StrictWireModel, WireModel

PainQuestionId = Literal[
    "PAIN_MEDICATION",
    "DAYTIME_PAIN",
    "NIGHTTIME_AWAKENING",
    "PAIN_SITES",
    "SITE_DETAILS",
    "LIFE_IMPACT",
    "CONFIRMATION",
]

PainSiteId = Literal[
    "HEAD",
    "NECK",
    "RIGHT_SHOULDER",
    "LEFT_SHOULDER",
    "CHEST",
    "UPPER_BACK",
    "ABDOMEN",
    "LOWER_BACK",
    "RIGHT_UPPER_ARM",
    "LEFT_UPPER_ARM",
    "RIGHT_FOREARM",
    "LEFT_FOREARM",
    "RIGHT_HAND",
    "LEFT_HAND",
    "HIP",
    "RIGHT_THIGH",
    "LEFT_THIGH",
    "RIGHT_KNEE",
    "LEFT_KNEE",
    "RIGHT_LOWER_LEG",
    "LEFT_LOWER_LEG",
    "RIGHT_FOOT",
    "LEFT_FOOT",
]


class PainSiteDetail(StrictWireModel):
    """Findings for one selected site; each check is a nullable boolean."""

    site_id: PainSiteId
    touch_pain: bool | None = None
    movement_pain: bool | None = None
    numbness: bool | None = None


class PainCarePlanDetails(StrictWireModel):
    """Answers collected by the pain wizard."""

    has_daytime_pain: bool | None = None
    has_nighttime_awakening: bool | None = None
    selected_site_ids: list[PainSiteId] = Field(default_factory=list)
    site_details: list[PainSiteDetail] = Field(default_factory=list)
    sleep_impact: bool | None = None
    mobility_impact: bool | None = None
    toilet_impact: bool | None = None

    @model_validator(mode="after")
    def _check_sites(self) -> "PainCarePlanDetails":
        if len(set(self.selected_site_ids)) != len(self.selected_site_ids):
            raise ValueError("selectedSiteIds must not contain duplicates")
        selected = set(self.selected_site_ids)
        seen: set[str] = set()
        for detail in self.site_details:
            if detail.site_id not in selected:
                raise ValueError(f"siteDetails entry for unselected site {detail.site_id}")
            if detail.site_id in seen:
                raise ValueError(f"duplicate siteDetails entry for {detail.site_id}")
            seen.add(detail.site_id)
        return self

    def detail_for(self, site_id: str) -> PainSiteDetail | None:
        for detail in self.site_details:
            if detail.site_id == site_id:
                return detail
        return None


class PainMedication(WireModel):
    """A prescription on the admission, shown on the PAIN_MEDICATION step."""

    id: int
    drug_name: str
    prescription_type: str | None = None
    prescribed_at: datetime


# ---------------------------------------------------------------------------
# Vocabulary: the ``pain`` section of categories.yaml
# ---------------------------------------------------------------------------

class PainSiteDef(BaseModel):
    """An anatomical site the patient can select."""

    model_config = ConfigDict(frozen=True)

    id: str
    label: str
    group: str


class PainCheckDef(BaseModel):
    """A boolean finding rendered as one instruction line when true.

    ``field`` names the attribute on ``PainSiteDetail`` (site checks) or on
    ``PainCarePlanDetails`` (life impacts).
    """

    model_config = ConfigDict(frozen=True)

    field: str
    label: str
    finding: str


class PainVocabulary(BaseModel):
    """Everything the pain composer and site picker need to render labels."""

    model_config = ConfigDict(frozen=True)

    groups: Mapping[str, str]
    sites: tuple[PainSiteDef, ...]
    site_checks: tuple[PainCheckDef, ...]
    life_impacts: tuple[PainCheckDef, ...]
    daytime_pain_line: str
    nighttime_awakening_line: str
    sites_line: str

    def site_label(self, site_id: str) -> str:
        for site in self.sites:
            if site.id == site_id:
                return site.label
        return site_id
