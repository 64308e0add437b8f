"""Pain wizard endpoints.

The SITE_DETAILS step is skipped by advance/previous while no pain site
is selected.

Every request body is schema-validated (bounds, enumerations, question
ids) before it reaches the wizard; failures return 400 INVALID_INPUT
without touching the database.
"""

from fastapi import APIRouter, Depends, Query
from pydantic import Field
from sqlalchemy.ext.asyncio import AsyncSession

from careplan_engine.models import (
    AssessmentResponse,
    PainCarePlanDetails,
    PainQuestionId,
    ResumePoint,
    StepPointer,
    WireModel,
)
from careplan_engine.wizard import AssessmentWizard

from careplan_server.dependencies import get_db, get_pain_wizard, get_user_id

router = APIRouter(prefix="/care-plan/pain", tags=["pain"])


# ------------------------------------------------------------------
# Request models
# ------------------------------------------------------------------

class SavePainRequest(WireModel):
    """Body for PUT /care-plan/pain and POST .../advance."""
    item_id: int = Field(gt=0)
    current_question_id: PainQuestionId
    details: PainCarePlanDetails


class CompletePainRequest(WireModel):
    """Body for POST /care-plan/pain."""
    item_id: int = Field(gt=0)
    details: PainCarePlanDetails


class PainStepRequest(WireModel):
    """Body for POST /care-plan/pain/previous."""
    current_question_id: PainQuestionId
    details: PainCarePlanDetails


# ------------------------------------------------------------------
# Endpoints
# ------------------------------------------------------------------

@router.get("")
async def get_pain(
    item_id: int = Query(..., alias="itemId", gt=0),
    user_id: str = Depends(get_user_id),
    db: AsyncSession = Depends(get_db),
    wizard: AssessmentWizard = Depends(get_pain_wizard),
) -> AssessmentResponse:
    """Stored pain answers and the admission's prescriptions."""
    return await wizard.get_assessment_data(db, item_id)


@router.put("")
async def save_pain(
    body: SavePainRequest,
    user_id: str = Depends(get_user_id),
    db: AsyncSession = Depends(get_db),
    wizard: AssessmentWizard = Depends(get_pain_wizard),
) -> AssessmentResponse:
    """Save partial answers and the current question; status -> IN_PROGRESS."""
    return await wizard.save_progress(db, body.item_id, body.current_question_id, body.details)


@router.post("")
async def complete_pain(
    body: CompletePainRequest,
    user_id: str = Depends(get_user_id),
    db: AsyncSession = Depends(get_db),
    wizard: AssessmentWizard = Depends(get_pain_wizard),
) -> AssessmentResponse:
    """Assess and complete; the response carries the assessment result."""
    return await wizard.complete(db, body.item_id, body.details)


@router.post("/advance")
async def advance_pain(
    body: SavePainRequest,
    user_id: str = Depends(get_user_id),
    db: AsyncSession = Depends(get_db),
    wizard: AssessmentWizard = Depends(get_pain_wizard),
) -> AssessmentResponse:
    """Save answers and move the pointer to the next question."""
    return await wizard.advance(db, body.item_id, body.current_question_id, body.details)


@router.post("/previous")
async def previous_pain(
    body: PainStepRequest,
    user_id: str = Depends(get_user_id),
    wizard: AssessmentWizard = Depends(get_pain_wizard),
) -> StepPointer:
    """Question before the current one (nothing is saved)."""
    return StepPointer(
        current_question_id=wizard.previous(body.current_question_id, body.details),
    )


@router.get("/resume")
async def resume_pain(
    item_id: int = Query(..., alias="itemId", gt=0),
    user_id: str = Depends(get_user_id),
    db: AsyncSession = Depends(get_db),
    wizard: AssessmentWizard = Depends(get_pain_wizard),
) -> ResumePoint:
    """Where the wizard should re-open the item."""
    return await wizard.resume(db, item_id)
