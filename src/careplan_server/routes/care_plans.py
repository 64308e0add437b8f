"""Care plan endpoints — create a plan, read the overview, override a status.

The overview's ``overallStatus`` is derived from the item statuses on every
read; it is never stored.
"""

from fastapi import APIRouter, Depends, Path
from pydantic import Field
from sqlalchemy.ext.asyncio import AsyncSession

from careplan_engine.care_plan import CarePlanService
from careplan_engine.errors import NotFoundError
from careplan_engine.models import CarePlanOverview, CreateCarePlanResult, ItemStatus, WireModel

from careplan_server.dependencies import get_care_plan_service, get_db, get_user_id

router = APIRouter(tags=["care-plans"])


# ------------------------------------------------------------------
# Request models
# ------------------------------------------------------------------

class CreateCarePlanRequest(WireModel):
    """Body for POST /care-plans."""
    admission_id: int = Field(gt=0)


class UpdateItemStatusRequest(WireModel):
    """Body for PATCH /care-plan-items/{itemId}/status."""
    status: ItemStatus


# ------------------------------------------------------------------
# Endpoints
# ------------------------------------------------------------------

@router.post("/care-plans", status_code=201)
async def create_care_plan(
    body: CreateCarePlanRequest,
    user_id: str = Depends(get_user_id),
    db: AsyncSession = Depends(get_db),
    service: CarePlanService = Depends(get_care_plan_service),
) -> CreateCarePlanResult:
    """Create the plan with one NOT_STARTED item per category.

    Returns 201 on success, 404 if the admission does not exist and 409
    if it already has a care plan.
    """
    return await service.create_care_plan(db, body.admission_id, created_by=user_id)


@router.get("/care-plans/{admission_id}")
async def get_care_plan(
    admission_id: int = Path(..., gt=0),
    user_id: str = Depends(get_user_id),
    db: AsyncSession = Depends(get_db),
    service: CarePlanService = Depends(get_care_plan_service),
) -> CarePlanOverview:
    """Care plan overview for an admission; 404 if there is none."""
    overview = await service.get_care_plan(db, admission_id)
    if overview is None:
        raise NotFoundError(f"Care plan not found for admission {admission_id}")
    return overview


@router.patch("/care-plan-items/{item_id}/status")
async def update_item_status(
    body: UpdateItemStatusRequest,
    item_id: int = Path(..., gt=0),
    user_id: str = Depends(get_user_id),
    db: AsyncSession = Depends(get_db),
    service: CarePlanService = Depends(get_care_plan_service),
) -> CarePlanOverview:
    """Set an item's status directly (e.g. NOT_APPLICABLE)."""
    return await service.update_item_status(db, item_id, body.status)
