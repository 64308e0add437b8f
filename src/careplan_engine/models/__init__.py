"""Public model re-exports for careplan_engine.

Consumers should import from ``careplan_engine.models`` rather than
reaching into sub-modules directly.
"""

# --- Assessment / wizard ---
from careplan_engine.models.assessment import (
    AssessmentDetails,
    AssessmentResponse,
    AssessmentResult,
    CarePlanItemEntry,
    CarePlanOverview,
    CreateCarePlanResult,
    ItemStatus,
    Proposal,
    ResumePoint,
    RiskLevel,
    StepPointer,
)
from careplan_engine.models.base import StrictWireModel, WireModel

# --- Constipation ---
from careplan_engine.models.constipation import (
    BRISTOL_SCALE_LABELS,
    ConstipationDetails,
    ConstipationQuestionId,
    ConstipationSeverity,
    MealAmount,
)

# --- Dehydration ---
from careplan_engine.models.dehydration import (
    DehydrationDetails,
    DehydrationQuestionId,
    DeviationStatus,
    IntakeFrequency,
    LabValueAnswer,
    VisualCondition,
)

# --- Inflammation ---
from careplan_engine.models.inflammation import InflammationDetails, InflammationQuestionId

# --- Pain ---
from careplan_engine.models.pain import (
    PainCarePlanDetails,
    PainCheckDef,
    PainMedication,
    PainQuestionId,
    PainSiteDef,
    PainSiteDetail,
    PainSiteId,
    PainVocabulary,
)

__all__ = [
    # Assessment
    "AssessmentDetails",
    "AssessmentResponse",
    "AssessmentResult",
    "CarePlanItemEntry",
    "CarePlanOverview",
    "CreateCarePlanResult",
    "ItemStatus",
    "Proposal",
    "ResumePoint",
    "RiskLevel",
    "StepPointer",
    "StrictWireModel",
    "WireModel",
    # Constipation
    "BRISTOL_SCALE_LABELS",
    "ConstipationDetails",
    "ConstipationQuestionId",
    "ConstipationSeverity",
    "MealAmount",
    # Dehydration
    "DehydrationDetails",
    "DehydrationQuestionId",
    "DeviationStatus",
    "IntakeFrequency",
    "LabValueAnswer",
    "VisualCondition",
    # Inflammation
    "InflammationDetails",
    "InflammationQuestionId",
    # Pain
    "PainCarePlanDetails",
    "PainCheckDef",
    "PainMedication",
    "PainQuestionId",
    "PainSiteDef",
    "PainSiteDetail",
    "PainSiteId",
    "PainVocabulary",
]
