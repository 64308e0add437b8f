"""CarePlanService — plan creation, overview and the generic status override.

The overview's ``overall_status`` is projected from the item statuses on
every read (:func:`careplan_engine.status.derive_overall_status`).
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from careplan_db.models.enums import CarePlanItemStatus
from careplan_db.repository import CarePlanRepository
from careplan_engine.errors import (
    AlreadyExistsError,
    InvalidInputError,
    NotFoundError,
    PersistenceError,
)
from careplan_engine.models.assessment import (
    CarePlanItemEntry,
    CarePlanOverview,
    CreateCarePlanResult,
)
from careplan_engine.registry import CategoryRegistry
from careplan_engine.status import derive_overall_status

logger = logging.getLogger(__name__)


class CarePlanService:
    """Care plan CRUD around the wizards."""

    def __init__(self, registry: CategoryRegistry) -> None:
        self._registry = registry
        self._repo = CarePlanRepository()

    @asynccontextmanager
    async def _store_errors(self, operation: str, **ids: int) -> AsyncIterator[None]:
        try:
            yield
        except SQLAlchemyError as exc:
            context = " ".join(f"{k}={v}" for k, v in ids.items())
            logger.error("%s failed: %s error=%s", operation, context, exc)
            raise PersistenceError(
                f"Failed to {operation.replace('_', ' ')}"
            ) from exc

    async def create_care_plan(
        self, db: AsyncSession, admission_id: int, created_by: str
    ) -> CreateCarePlanResult:
        """Create the plan with one NOT_STARTED item per registry category."""
        async with self._store_errors("create_care_plan", admission_id=admission_id):
            if await self._repo.get_admission(db, admission_id) is None:
                raise NotFoundError(f"Admission not found: {admission_id}")
            if await self._repo.get_care_plan_by_admission(db, admission_id) is not None:
                raise AlreadyExistsError(f"Care plan already exists for admission {admission_id}")
            try:
                plan = await self._repo.create_care_plan(
                    db,
                    admission_id=admission_id,
                    created_by=created_by,
                    categories=[c.value for c in self._registry.categories],
                )
            except IntegrityError as exc:
                # Lost a race with a concurrent create for the same admission
                raise AlreadyExistsError(
                    f"Care plan already exists for admission {admission_id}"
                ) from exc
        logger.info(
            "Created care plan %d for admission %d (%d items) by %s",
            plan.id, admission_id, len(plan.items), created_by,
        )
        return CreateCarePlanResult(care_plan_id=plan.id, item_count=len(plan.items))

    async def get_care_plan(self, db: AsyncSession, admission_id: int) -> CarePlanOverview | None:
        """Overview with items in registry order, or None if no plan exists."""
        async with self._store_errors("get_care_plan", admission_id=admission_id):
            plan = await self._repo.get_care_plan_by_admission(db, admission_id)
        if plan is None:
            return None
        return self._to_overview(plan)

    async def update_item_status(
        self, db: AsyncSession, item_id: int, status: str
    ) -> CarePlanOverview:
        """Generic status override; the only way to reach NOT_APPLICABLE.

        The resume pointer is cleared for every status but IN_PROGRESS.
        """
        try:
            new_status = CarePlanItemStatus(status)
        except ValueError as exc:
            raise InvalidInputError(
                f"Unknown status: {status!r}",
                errors=[{"loc": ["status"], "msg": "unknown status"}],
            ) from exc

        async with self._store_errors("update_item_status", item_id=item_id):
            item = await self._repo.get_item(db, item_id)
            if item is None:
                raise NotFoundError(f"Care plan item not found: {item_id}")
            await self._repo.set_status(
                db,
                item,
                new_status.value,
                clear_question=new_status is not CarePlanItemStatus.IN_PROGRESS,
            )
            plan = await self._repo.get_care_plan_by_admission(db, item.admission_id)
        logger.info("Item %d (%s) status set to %s", item_id, item.category, new_status.value)
        return self._to_overview(plan)

    def _to_overview(self, plan) -> CarePlanOverview:
        order = {c.value: i for i, c in enumerate(self._registry.categories)}
        items = sorted(plan.items, key=lambda it: order.get(it.category, len(order)))
        entries = []
        for item in items:
            try:
                label = self._registry.get(item.category).label
            except KeyError:
                label = item.category
            entries.append(
                CarePlanItemEntry(
                    id=item.id,
                    category=item.category,
                    label=label,
                    status=item.status,
                    current_question_id=item.current_question_id,
                    instructions=item.instructions,
                    updated_at=item.updated_at,
                )
            )
        return CarePlanOverview(
            care_plan_id=plan.id,
            admission_id=plan.admission_id,
            overall_status=derive_overall_status(item.status for item in items),
            created_by=plan.created_by,
            created_at=plan.created_at,
            updated_at=plan.updated_at,
            items=entries,
        )
