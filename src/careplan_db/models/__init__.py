"""ORM models for careplan_db."""

from careplan_db.models.base import Base
from careplan_db.models.care_plan import CarePlan, CarePlanItem
from careplan_db.models.enums import CarePlanCategory, CarePlanItemStatus, PatientSex
from careplan_db.models.reference import (
    Admission,
    LabResult,
    Prescription,
    ReferenceValue,
    VitalSign,
)

__all__ = [
    "Base",
    "CarePlanCategory",
    "CarePlanItemStatus",
    "PatientSex",
    "CarePlan",
    "CarePlanItem",
    "Admission",
    "LabResult",
    "Prescription",
    "ReferenceValue",
    "VitalSign",
]
