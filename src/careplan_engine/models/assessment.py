"""Assessment result and wizard response models.

These are the contract between the wizard and API callers.  They are
decoupled from the ORM models in ``careplan_db`` so that consumers never
see database internals.
"""

from datetime import datetime
from typing import Literal

from pydantic import Field

from careplan_engine.models.base import WireModel
from careplan_engine.models.constipation import ConstipationDetails
from careplan_engine.models.dehydration import DehydrationDetails
from careplan_engine.models.inflammation import InflammationDetails
from careplan_engine.models.pain import PainCarePlanDetails, PainMedication

# Dehydration uses NONE/LOW/MODERATE/HIGH, constipation NONE/MILD/MODERATE/SEVERE
RiskLevel = Literal["NONE", "LOW", "MILD", "MODERATE", "HIGH", "SEVERE"]
ItemStatus = Literal["NOT_STARTED", "IN_PROGRESS", "COMPLETED", "NOT_APPLICABLE"]

# Details of every category that has a wizard
AssessmentDetails = (
    DehydrationDetails | PainCarePlanDetails | ConstipationDetails | InflammationDetails
)


class Proposal(WireModel):
    """An actionable suggestion.  Lower ``priority`` is more urgent."""

    id: str
    category: str
    message: str
    priority: int = Field(ge=1)


class AssessmentResult(WireModel):
    """Derived on demand from the answers; only ``instructions`` is stored."""

    risk_level: RiskLevel | None = None
    risk_level_label: str | None = None
    proposals: list[Proposal] = Field(default_factory=list)
    instructions: str
    # Categories whose wizard the nurse should open next (inflammation -> PAIN)
    follow_up_categories: list[str] = Field(default_factory=list)


class AssessmentResponse(WireModel):
    """What every wizard operation returns."""

    item_id: int
    status: ItemStatus
    current_question_id: str | None = None
    details: AssessmentDetails
    assessment_result: AssessmentResult | None = None
    # Pain only: the admission's prescriptions, newest first
    medications: list[PainMedication] | None = None


class ResumePoint(WireModel):
    """Where the wizard UI should re-enter an item.

    ``view`` is "result" for completed items (``question_id`` and
    ``step_index`` are then None) and "question" otherwise.
    """

    view: Literal["question", "result"]
    question_id: str | None = None
    step_index: int | None = None
    total_steps: int


# ---------------------------------------------------------------------------
# Care plan overview
# ---------------------------------------------------------------------------

class CarePlanItemEntry(WireModel):
    """One row of the care plan overview."""

    id: int
    category: str
    label: str
    status: ItemStatus
    current_question_id: str | None = None
    instructions: str | None = None
    updated_at: datetime | None = None


class CarePlanOverview(WireModel):
    """A care plan with its items and the derived overall status."""

    care_plan_id: int
    admission_id: int
    overall_status: Literal["NOT_STARTED", "IN_PROGRESS", "COMPLETED"]
    created_by: str
    created_at: datetime | None = None
    updated_at: datetime | None = None
    items: list[CarePlanItemEntry]


class CreateCarePlanResult(WireModel):
    care_plan_id: int
    item_count: int


class StepPointer(WireModel):
    """A wizard step id; None past either end of the step order."""

    current_question_id: str | None = None
