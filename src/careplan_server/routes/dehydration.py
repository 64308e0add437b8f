"""Dehydration wizard endpoints.

Every request body is schema-validated (bounds, enumerations, question
ids) before it reaches the wizard; failures return 400 INVALID_INPUT
without touching the database.
"""

from fastapi import APIRouter, Depends, Query
from pydantic import Field
from sqlalchemy.ext.asyncio import AsyncSession

from careplan_engine.models import (
    AssessmentResponse,
    DehydrationDetails,
    DehydrationQuestionId,
    ResumePoint,
    StepPointer,
    WireModel,
)
from careplan_engine.wizard import AssessmentWizard

from careplan_server.dependencies import get_db, get_dehydration_wizard, get_user_id

router = APIRouter(prefix="/care-plan/dehydration", tags=["dehydration"])


# ------------------------------------------------------------------
# Request models
# ------------------------------------------------------------------

class SaveDehydrationRequest(WireModel):
    """Body for PUT /care-plan/dehydration and POST .../advance."""
    item_id: int = Field(gt=0)
    current_question_id: DehydrationQuestionId
    details: DehydrationDetails


class CompleteDehydrationRequest(WireModel):
    """Body for POST /care-plan/dehydration."""
    item_id: int = Field(gt=0)
    details: DehydrationDetails


class DehydrationStepRequest(WireModel):
    """Body for POST /care-plan/dehydration/previous."""
    current_question_id: DehydrationQuestionId
    details: DehydrationDetails


# ------------------------------------------------------------------
# Endpoints
# ------------------------------------------------------------------

@router.get("")
async def get_dehydration(
    item_id: int = Query(..., alias="itemId", gt=0),
    user_id: str = Depends(get_user_id),
    db: AsyncSession = Depends(get_db),
    wizard: AssessmentWizard = Depends(get_dehydration_wizard),
) -> AssessmentResponse:
    """Stored answers merged with the latest labs and vital signs."""
    return await wizard.get_assessment_data(db, item_id)


@router.put("")
async def save_dehydration(
    body: SaveDehydrationRequest,
    user_id: str = Depends(get_user_id),
    db: AsyncSession = Depends(get_db),
    wizard: AssessmentWizard = Depends(get_dehydration_wizard),
) -> AssessmentResponse:
    """Save partial answers and the current question; status -> IN_PROGRESS."""
    return await wizard.save_progress(db, body.item_id, body.current_question_id, body.details)


@router.post("")
async def complete_dehydration(
    body: CompleteDehydrationRequest,
    user_id: str = Depends(get_user_id),
    db: AsyncSession = Depends(get_db),
    wizard: AssessmentWizard = Depends(get_dehydration_wizard),
) -> AssessmentResponse:
    """Assess and complete; the response carries the assessment result."""
    return await wizard.complete(db, body.item_id, body.details)


@router.post("/advance")
async def advance_dehydration(
    body: SaveDehydrationRequest,
    user_id: str = Depends(get_user_id),
    db: AsyncSession = Depends(get_db),
    wizard: AssessmentWizard = Depends(get_dehydration_wizard),
) -> AssessmentResponse:
    """Save answers and move the pointer to the next question."""
    return await wizard.advance(db, body.item_id, body.current_question_id, body.details)


@router.post("/previous")
async def previous_dehydration(
    body: DehydrationStepRequest,
    user_id: str = Depends(get_user_id),
    wizard: AssessmentWizard = Depends(get_dehydration_wizard),
) -> StepPointer:
    """Question before the current one (nothing is saved)."""
    return StepPointer(
        current_question_id=wizard.previous(body.current_question_id, body.details),
    )


@router.get("/resume")
async def resume_dehydration(
    item_id: int = Query(..., alias="itemId", gt=0),
    user_id: str = Depends(get_user_id),
    db: AsyncSession = Depends(get_db),
    wizard: AssessmentWizard = Depends(get_dehydration_wizard),
) -> ResumePoint:
    """Where the wizard should re-open the item."""
    return await wizard.resume(db, item_id)
