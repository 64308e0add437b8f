"""Dehydration assessment answers.

``DehydrationDetails`` holds *progressive* answers: every field is
independently nullable and any subset may be filled while the wizard is in
progress.  Bounds mirror what the bedside UI can enter.
"""

from typing import Literal

from pydantic import Field

from careplan_engine.models.base import StrictWireModel

DeviationStatus = Literal["NORMAL", "HIGH", "LOW", "NO_DATA"]
VisualCondition = Literal["NORMAL", "MILD", "SEVERE"]
IntakeFrequency = Literal["FREQUENT", "MODERATE", "RARE"]

# Wizard step ids, in no particular order (the order lives in the registry)
DehydrationQuestionId = Literal[
    "lab_ht",
    "lab_hb",
    "vital_pulse",
    "vital_bp",
    "visual_skin",
    "visual_oral",
    "visual_dizziness",
    "visual_urine",
    "intake_frequency",
    "intake_amount",
]


class LabValueAnswer(StrictWireModel):
    """A lab value together with the reference range it was judged against."""

    value: float | None = None
    lower_limit: float | None = None
    upper_limit: float | None = None
    unit: str | None = None
    deviation_status: DeviationStatus = "NO_DATA"


class DehydrationDetails(StrictWireModel):
    """Answers collected by the dehydration wizard."""

    lab_ht: LabValueAnswer | None = None
    lab_hb: LabValueAnswer | None = None
    vital_pulse: int | None = Field(default=None, ge=0, le=300)
    vital_systolic_bp: int | None = Field(default=None, ge=0, le=300)
    vital_diastolic_bp: int | None = Field(default=None, ge=0, le=300)
    visual_skin: VisualCondition | None = None
    visual_oral: VisualCondition | None = None
    visual_dizziness: VisualCondition | None = None
    visual_urine: VisualCondition | None = None
    intake_frequency: IntakeFrequency | None = None
    # Millilitres per day
    intake_amount: float | None = Field(default=None, ge=0, le=10000)
