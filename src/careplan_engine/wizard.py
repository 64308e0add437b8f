"""AssessmentWizard — one-question-at-a-time assessment of a care plan item.

Stateless: each call loads the item from the database, applies the
operation, flushes, and returns the fresh view.  The caller (typically a
FastAPI endpoint) owns the ``AsyncSession`` and the transaction, so a
failure anywhere rolls back the whole operation.

Item status machine driven by the wizard::

    NOT_STARTED --save_progress--> IN_PROGRESS --complete--> COMPLETED
                                        ^                        |
                                        +------save_progress-----+

NOT_APPLICABLE is outside this machine; only the care plan service's
generic status override sets it.

Validation of the question id and the submitted details always happens
before the store is touched.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator

from pydantic import BaseModel, ValidationError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from careplan_db.models.enums import CarePlanCategory, CarePlanItemStatus
from careplan_db.repository import CarePlanRepository
from careplan_engine.constants import (
    LAB_CRP_ITEM_CODE,
    LAB_HB_ITEM_CODE,
    LAB_HT_ITEM_CODE,
    LAB_WBC_ITEM_CODE,
)
from careplan_engine.errors import (
    InvalidCategoryError,
    InvalidInputError,
    NotFoundError,
    PersistenceError,
)
from careplan_engine.interfaces import ReferenceDataSource
from careplan_engine.models.assessment import AssessmentResponse, ResumePoint
from careplan_engine.navigation import next_question, previous_question, resume_point
from careplan_engine.reference import DatabaseReferenceSource
from careplan_engine.registry import CategoryRegistry

logger = logging.getLogger(__name__)


def validation_errors(exc: ValidationError) -> list[dict[str, Any]]:
    """Flatten a pydantic error into ``[{"loc": [...], "msg": ...}]``."""
    return [{"loc": list(err["loc"]), "msg": err["msg"]} for err in exc.errors()]


class AssessmentWizard:
    """Wizard controller for one category with a details model."""

    def __init__(
        self,
        registry: CategoryRegistry,
        category: CarePlanCategory | str,
        reference: ReferenceDataSource | None = None,
    ) -> None:
        self._variant = registry.get(category)
        if not self._variant.has_wizard:
            raise ValueError(f"{self._variant.category.value} has no assessment wizard")
        self._repo = CarePlanRepository()
        self._reference = reference or DatabaseReferenceSource()

    @property
    def category(self) -> CarePlanCategory:
        return self._variant.category

    @property
    def variant(self):
        return self._variant

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    async def get_assessment_data(self, db: AsyncSession, item_id: int) -> AssessmentResponse:
        """Stored answers merged with fresh reference data.

        ``assessment_result`` is computed only for completed items.
        """
        async with self._store_errors("get_assessment_data", item_id):
            item = await self._load_item(db, item_id)
            return await self._build_response(db, item)

    async def save_progress(
        self,
        db: AsyncSession,
        item_id: int,
        question_id: str,
        details: Any,
    ) -> AssessmentResponse:
        """Store partial answers and the resume pointer; status becomes IN_PROGRESS.

        A COMPLETED item is re-opened.
        """
        parsed = self._validate_details(details)
        self._validate_question(question_id)
        async with self._store_errors("save_progress", item_id):
            item = await self._load_item(db, item_id)
            if item.status == CarePlanItemStatus.COMPLETED.value:
                logger.info(
                    "Re-opening completed %s item %d at %s",
                    self.category.value, item_id, question_id,
                )
            await self._repo.save_progress(
                db, item, question_id=question_id, details=self._dump(parsed),
            )
            return await self._build_response(db, item)

    async def complete(self, db: AsyncSession, item_id: int, details: Any) -> AssessmentResponse:
        """Assess the final answers, store the note and mark the item COMPLETED.

        Reference data is merged before assessing, so the stored details,
        the stored note and the returned result describe the same values.
        """
        parsed = self._validate_details(details)
        self._validate_complete(parsed)
        async with self._store_errors("complete", item_id):
            item = await self._load_item(db, item_id)
            parsed = await self._enrich(db, item.admission_id, parsed)
            result = self._variant.assess(parsed)
            await self._repo.complete_item(
                db, item, details=self._dump(parsed), instructions=result.instructions,
            )
            logger.info(
                "Completed %s item %d (risk_level=%s, proposals=%d)",
                self.category.value, item_id, result.risk_level, len(result.proposals),
            )
            return await self._build_response(db, item)

    async def advance(
        self,
        db: AsyncSession,
        item_id: int,
        question_id: str,
        details: Any,
    ) -> AssessmentResponse:
        """Save progress with the pointer moved to the step after *question_id*."""
        parsed = self._validate_details(details)
        self._validate_question(question_id)
        target = next_question(self._variant, question_id, parsed)
        if target is None:
            raise InvalidInputError(
                f"{question_id} is the last step of {self.category.value}",
                errors=[{"loc": ["currentQuestionId"], "msg": "already at the last step"}],
            )
        return await self.save_progress(db, item_id, target, parsed)

    def previous(self, question_id: str, details: Any) -> str | None:
        """Step before *question_id* given the current answers (no store access)."""
        parsed = self._validate_details(details)
        self._validate_question(question_id)
        return previous_question(self._variant, question_id, parsed)

    async def resume(self, db: AsyncSession, item_id: int) -> ResumePoint:
        """Where the wizard UI should re-enter the item."""
        async with self._store_errors("resume", item_id):
            item = await self._load_item(db, item_id)
        details = self._parse_stored(item)
        return resume_point(self._variant, item.status, item.current_question_id, details)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    @asynccontextmanager
    async def _store_errors(self, operation: str, item_id: int) -> AsyncIterator[None]:
        """Turn store failures into PersistenceError with a safe message."""
        try:
            yield
        except SQLAlchemyError as exc:
            logger.error(
                "%s failed: category=%s item_id=%s error=%s",
                operation, self.category.value, item_id, exc,
            )
            raise PersistenceError(
                f"Failed to {operation.replace('_', ' ')} for the care plan item"
            ) from exc

    async def _load_item(self, db: AsyncSession, item_id: int):
        item = await self._repo.get_item(db, item_id)
        if item is None:
            raise NotFoundError(f"Care plan item not found: {item_id}")
        if item.category != self.category.value:
            raise InvalidCategoryError(
                f"Care plan item {item_id} is {item.category}, not {self.category.value}"
            )
        return item

    def _validate_details(self, details: Any) -> BaseModel:
        try:
            return self._variant.parse_details(details)
        except ValidationError as exc:
            raise InvalidInputError(
                f"Invalid {self.category.value} details", errors=validation_errors(exc),
            ) from exc

    def _validate_question(self, question_id: str) -> None:
        if self._variant.index_of(question_id) is None:
            raise InvalidInputError(
                f"Unknown {self.category.value} question: {question_id!r}",
                errors=[{"loc": ["currentQuestionId"], "msg": "unknown question id"}],
            )

    def _validate_complete(self, details: BaseModel) -> None:
        missing = self._variant.missing_answers(details)
        if missing:
            raise InvalidInputError(
                f"{self.category.value} cannot be completed with unanswered questions",
                errors=[{"loc": ["details", name], "msg": "answer required"} for name in missing],
            )

    def _parse_stored(self, item) -> BaseModel:
        """Parse the stored blob; a malformed blob is a store failure."""
        try:
            return self._variant.parse_details(item.details)
        except ValidationError as exc:
            logger.error(
                "Stored details failed validation: category=%s item_id=%s error=%s",
                self.category.value, item.id, exc,
            )
            raise PersistenceError("Stored assessment details are unreadable") from exc

    @staticmethod
    def _dump(details: BaseModel) -> dict[str, Any]:
        return details.model_dump(mode="json", by_alias=True)

    async def _enrich(self, db: AsyncSession, admission_id: int, details: BaseModel) -> BaseModel:
        """Hook for merging reference data into the stored answers."""
        return details

    async def _extras(self, db: AsyncSession, item) -> dict[str, Any]:
        """Hook for category-specific response fields."""
        return {}

    async def _build_response(self, db: AsyncSession, item) -> AssessmentResponse:
        details = self._parse_stored(item)
        details = await self._enrich(db, item.admission_id, details)
        result = None
        if item.status == CarePlanItemStatus.COMPLETED.value:
            result = self._variant.assess(details)
        return AssessmentResponse(
            item_id=item.id,
            status=item.status,
            current_question_id=item.current_question_id,
            details=details,
            assessment_result=result,
            **await self._extras(db, item),
        )


class ReferenceMergingWizard(AssessmentWizard):
    """Wizard whose answers include labs and vital signs from the EMR feed.

    Subclasses list the lab fields (always overwritten with the latest
    result) and the vital fields to merge.  With ``_OVERWRITE_VITALS``
    unset, a vital the user entered outranks the fetched one and fresh
    values only fill fields that are still null.
    """

    # (details field, lab item code)
    _LAB_FIELDS: tuple[tuple[str, str], ...] = ()
    # (details field, key of ReferenceDataSource.latest_vitals)
    _VITAL_FIELDS: tuple[tuple[str, str], ...] = ()
    _OVERWRITE_VITALS = False

    async def _enrich(self, db: AsyncSession, admission_id: int, details: BaseModel) -> BaseModel:
        update: dict[str, Any] = {}
        for field, item_code in self._LAB_FIELDS:
            update[field] = await self._reference.latest_lab(db, admission_id, item_code)
        vitals = await self._reference.latest_vitals(db, admission_id)
        for field, key in self._VITAL_FIELDS:
            if vitals.get(key) is None:
                continue
            if self._OVERWRITE_VITALS or getattr(details, field) is None:
                update[field] = vitals[key]
        return details.model_copy(update=update)


class DehydrationWizard(ReferenceMergingWizard):
    """Dehydration wizard: HCT and HGB always fresh, entered vitals kept."""

    _LAB_FIELDS = (
        ("lab_ht", LAB_HT_ITEM_CODE),
        ("lab_hb", LAB_HB_ITEM_CODE),
    )
    _VITAL_FIELDS = (
        ("vital_pulse", "pulse"),
        ("vital_systolic_bp", "systolic_bp"),
        ("vital_diastolic_bp", "diastolic_bp"),
    )

    def __init__(
        self,
        registry: CategoryRegistry,
        reference: ReferenceDataSource | None = None,
    ) -> None:
        super().__init__(registry, CarePlanCategory.DEHYDRATION, reference)


class InflammationWizard(ReferenceMergingWizard):
    """Inflammation wizard: CRP, WBC and every vital sign come from the feed.

    A non-null latest measurement replaces the stored vital.
    """

    _LAB_FIELDS = (
        ("lab_crp", LAB_CRP_ITEM_CODE),
        ("lab_wbc", LAB_WBC_ITEM_CODE),
    )
    _VITAL_FIELDS = (
        ("vital_pulse", "pulse"),
        ("vital_systolic_bp", "systolic_bp"),
        ("vital_diastolic_bp", "diastolic_bp"),
        ("vital_spo2", "spo2"),
        ("body_temperature", "body_temperature"),
    )
    _OVERWRITE_VITALS = True

    def __init__(
        self,
        registry: CategoryRegistry,
        reference: ReferenceDataSource | None = None,
    ) -> None:
        super().__init__(registry, CarePlanCategory.INFLAMMATION, reference)


class PainWizard(AssessmentWizard):
    """Pain wizard: responses also list the admission's prescriptions."""

    def __init__(
        self,
        registry: CategoryRegistry,
        reference: ReferenceDataSource | None = None,
    ) -> None:
        super().__init__(registry, CarePlanCategory.PAIN, reference)

    async def _extras(self, db: AsyncSession, item) -> dict[str, Any]:
        return {"medications": await self._reference.pain_medications(db, item.admission_id)}


_WIZARD_CLASSES: dict[CarePlanCategory, type[AssessmentWizard]] = {
    CarePlanCategory.DEHYDRATION: DehydrationWizard,
    CarePlanCategory.INFLAMMATION: InflammationWizard,
    CarePlanCategory.PAIN: PainWizard,
}


def build_wizards(
    registry: CategoryRegistry,
    reference: ReferenceDataSource | None = None,
) -> dict[CarePlanCategory, AssessmentWizard]:
    """One wizard per category that has a details model."""
    reference = reference or DatabaseReferenceSource()
    wizards: dict[CarePlanCategory, AssessmentWizard] = {}
    for variant in registry:
        if not variant.has_wizard:
            continue
        wizard_cls = _WIZARD_CLASSES.get(variant.category)
        if wizard_cls is not None:
            wizards[variant.category] = wizard_cls(registry, reference)
        else:
            wizards[variant.category] = AssessmentWizard(registry, variant.category, reference)
    return wizards
