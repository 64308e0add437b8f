"""Constipation assessment answers.

Every field is nullable while the wizard is in progress.  Completion
needs the full answer set (see ``ConstipationDetails.missing_answers``);
only the stool form may legitimately stay unknown.
"""

from typing import Literal

from pydantic import Field
from pydantic.alias_generators import to_camel

from careplan_engine.models.base import StrictWireModel

ConstipationQuestionId = Literal[
    "daysWithoutBowelMovement",
    "bristolScale",
    "physicalCondition",
    "diet",
    "bowelState",
    "confirm",
]

ConstipationSeverity = Literal["NONE", "MILD", "MODERATE", "SEVERE"]
MealAmount = Literal["LARGE", "NORMAL", "SMALL"]

# Bristol stool form scale, 1 (hard lumps) to 7 (entirely liquid)
BRISTOL_SCALE_LABELS: dict[int, str] = {
    1: "Separate hard lumps",
    2: "Lumpy and sausage-like",
    3: "Sausage-shaped with cracks on the surface",
    4: "Smooth, soft sausage",
    5: "Soft blobs with clear-cut edges",
    6: "Mushy, ragged pieces",
    7: "Entirely liquid",
}


class ConstipationDetails(StrictWireModel):
    """Answers collected by the constipation wizard."""

    days_without_bowel_movement: int | None = Field(default=None, ge=0, le=30)
    # Most recent stool; None when there has been none to observe
    bristol_scale: int | None = Field(default=None, ge=1, le=7)
    has_nausea: bool | None = None
    has_abdominal_distension: bool | None = None
    has_appetite: bool | None = None
    meal_amount: MealAmount | None = None
    # True = bowel sounds heard on auscultation
    has_bowel_sounds: bool | None = None
    has_intestinal_gas: bool | None = None
    # True = fecal mass found on palpation
    has_fecal_mass: bool | None = None

    def missing_answers(self) -> list[str]:
        """Wire names of the fields completion still needs."""
        return [
            to_camel(name)
            for name in type(self).model_fields
            if name != "bristol_scale" and getattr(self, name) is None
        ]
