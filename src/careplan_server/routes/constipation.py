"""Constipation wizard endpoints.

Completing requires every answer except the stool form; a missing answer
returns 400 INVALID_INPUT listing the unanswered fields.

Every request body is schema-validated (bounds, enumerations, question
ids) before it reaches the wizard; failures return 400 INVALID_INPUT
without touching the database.
"""

from fastapi import APIRouter, Depends, Query
from pydantic import Field
from sqlalchemy.ext.asyncio import AsyncSession

from careplan_engine.models import (
    AssessmentResponse,
    ConstipationDetails,
    ConstipationQuestionId,
    ResumePoint,
    StepPointer,
    WireModel,
)
from careplan_engine.wizard import AssessmentWizard

from careplan_server.dependencies import get_constipation_wizard, get_db, get_user_id

router = APIRouter(prefix="/care-plan/constipation", tags=["constipation"])


# ------------------------------------------------------------------
# Request models
# ------------------------------------------------------------------

class SaveConstipationRequest(WireModel):
    """Body for PUT /care-plan/constipation and POST .../advance."""
    item_id: int = Field(gt=0)
    current_question_id: ConstipationQuestionId
    details: ConstipationDetails


class CompleteConstipationRequest(WireModel):
    """Body for POST /care-plan/constipation."""
    item_id: int = Field(gt=0)
    details: ConstipationDetails


class ConstipationStepRequest(WireModel):
    """Body for POST /care-plan/constipation/previous."""
    current_question_id: ConstipationQuestionId
    details: ConstipationDetails


# ------------------------------------------------------------------
# Endpoints
# ------------------------------------------------------------------

@router.get("")
async def get_constipation(
    item_id: int = Query(..., alias="itemId", gt=0),
    user_id: str = Depends(get_user_id),
    db: AsyncSession = Depends(get_db),
    wizard: AssessmentWizard = Depends(get_constipation_wizard),
) -> AssessmentResponse:
    """Stored constipation answers."""
    return await wizard.get_assessment_data(db, item_id)


@router.put("")
async def save_constipation(
    body: SaveConstipationRequest,
    user_id: str = Depends(get_user_id),
    db: AsyncSession = Depends(get_db),
    wizard: AssessmentWizard = Depends(get_constipation_wizard),
) -> AssessmentResponse:
    """Save partial answers and the current question; status -> IN_PROGRESS."""
    return await wizard.save_progress(db, body.item_id, body.current_question_id, body.details)


@router.post("")
async def complete_constipation(
    body: CompleteConstipationRequest,
    user_id: str = Depends(get_user_id),
    db: AsyncSession = Depends(get_db),
    wizard: AssessmentWizard = Depends(get_constipation_wizard),
) -> AssessmentResponse:
    """Assess severity and complete; the response carries the suggestions."""
    return await wizard.complete(db, body.item_id, body.details)


@router.post("/advance")
async def advance_constipation(
    body: SaveConstipationRequest,
    user_id: str = Depends(get_user_id),
    db: AsyncSession = Depends(get_db),
    wizard: AssessmentWizard = Depends(get_constipation_wizard),
) -> AssessmentResponse:
    """Save answers and move the pointer to the next question."""
    return await wizard.advance(db, body.item_id, body.current_question_id, body.details)


@router.post("/previous")
async def previous_constipation(
    body: ConstipationStepRequest,
    user_id: str = Depends(get_user_id),
    wizard: AssessmentWizard = Depends(get_constipation_wizard),
) -> StepPointer:
    """Question before the current one (nothing is saved)."""
    return StepPointer(
        current_question_id=wizard.previous(body.current_question_id, body.details),
    )


@router.get("/resume")
async def resume_constipation(
    item_id: int = Query(..., alias="itemId", gt=0),
    user_id: str = Depends(get_user_id),
    db: AsyncSession = Depends(get_db),
    wizard: AssessmentWizard = Depends(get_constipation_wizard),
) -> ResumePoint:
    """Where the wizard should re-open the item."""
    return await wizard.resume(db, item_id)
