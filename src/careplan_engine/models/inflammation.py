"""Inflammation assessment answers.

Labs (CRP, WBC) and vital signs are filled from the reference tables on
every read and save; the nurse only answers ``has_pain``.  Whether there
is fever or a lab inflammation sign is derived from these values and is
never stored.
"""

from typing import Literal

from pydantic import Field

from careplan_engine.models.base import StrictWireModel
from careplan_engine.models.dehydration import LabValueAnswer

InflammationQuestionId = Literal[
    "lab_results",
    "vital_signs",
    "pain_check",
    "suggestion",
]


class InflammationDetails(StrictWireModel):
    """Answers collected by the inflammation wizard."""

    lab_crp: LabValueAnswer | None = None
    lab_wbc: LabValueAnswer | None = None
    vital_pulse: int | None = Field(default=None, ge=0, le=300)
    vital_systolic_bp: int | None = Field(default=None, ge=0, le=300)
    vital_diastolic_bp: int | None = Field(default=None, ge=0, le=300)
    vital_spo2: int | None = Field(default=None, ge=0, le=100)
    # Degrees Celsius
    body_temperature: float | None = Field(default=None, ge=30, le=45)
    has_pain: bool | None = None
