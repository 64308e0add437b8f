"""Async repositories for care plans and the read-only reference tables.

All public methods accept an ``AsyncSession`` so the caller controls
transaction boundaries; writes ``flush()`` but never ``commit()``.

The repositories avoid business rules (which status transitions are legal,
what a valid details blob looks like) — that belongs in the engine.  They
*do* rely on DB constraints for structural invariants such as one item per
category and the resume pointer only being set while in progress.
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Iterable

from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from careplan_db.models.care_plan import CarePlan, CarePlanItem
from careplan_db.models.enums import CarePlanItemStatus, PatientSex
from careplan_db.models.reference import (
    Admission,
    LabResult,
    Prescription,
    ReferenceValue,
    VitalSign,
)


class CarePlanRepository:
    """Read/write operations on ``care_plans`` and ``care_plan_items``."""

    # ------------------------------------------------------------------
    # Admissions (read-only)
    # ------------------------------------------------------------------

    async def get_admission(self, db: AsyncSession, admission_id: int) -> Admission | None:
        """Fetch an admission by id."""
        return await db.get(Admission, admission_id)

    # ------------------------------------------------------------------
    # Care plans
    # ------------------------------------------------------------------

    async def get_care_plan_by_admission(
        self, db: AsyncSession, admission_id: int
    ) -> CarePlan | None:
        """Fetch the care plan (with its items) for an admission."""
        stmt = select(CarePlan).where(CarePlan.admission_id == admission_id)
        result = await db.execute(stmt)
        return result.scalar_one_or_none()

    async def create_care_plan(
        self,
        db: AsyncSession,
        *,
        admission_id: int,
        created_by: str,
        categories: Iterable[str],
    ) -> CarePlan:
        """Insert a care plan together with one NOT_STARTED item per category.

        Plan and items are flushed in the same unit of work, so either all
        rows land or none do.
        """
        plan = CarePlan(admission_id=admission_id, created_by=created_by)
        plan.items = [
            CarePlanItem(category=category, status=CarePlanItemStatus.NOT_STARTED.value)
            for category in categories
        ]
        db.add(plan)
        await db.flush()
        return plan

    # ------------------------------------------------------------------
    # Items
    # ------------------------------------------------------------------

    async def get_item(self, db: AsyncSession, item_id: int) -> CarePlanItem | None:
        """Fetch a care plan item by id (its care plan is eagerly joined)."""
        return await db.get(CarePlanItem, item_id)

    async def save_progress(
        self,
        db: AsyncSession,
        item: CarePlanItem,
        *,
        question_id: str,
        details: dict[str, Any],
    ) -> CarePlanItem:
        """Store partial answers and the resume pointer; mark IN_PROGRESS."""
        item.details = details
        item.current_question_id = question_id
        item.status = CarePlanItemStatus.IN_PROGRESS.value
        item.updated_at = datetime.now(timezone.utc)
        await db.flush()
        return item

    async def complete_item(
        self,
        db: AsyncSession,
        item: CarePlanItem,
        *,
        details: dict[str, Any],
        instructions: str,
    ) -> CarePlanItem:
        """Store the final answers and composed note; mark COMPLETED.

        Clears the resume pointer — the ``ck_question_pointer_in_progress``
        constraint rejects a pointer on a completed item.
        """
        item.details = details
        item.instructions = instructions
        item.current_question_id = None
        item.status = CarePlanItemStatus.COMPLETED.value
        item.updated_at = datetime.now(timezone.utc)
        await db.flush()
        return item

    async def set_status(
        self,
        db: AsyncSession,
        item: CarePlanItem,
        status: str,
        *,
        clear_question: bool = False,
    ) -> CarePlanItem:
        """Overwrite an item's status (generic override)."""
        item.status = status
        if clear_question:
            item.current_question_id = None
        item.updated_at = datetime.now(timezone.utc)
        await db.flush()
        return item


# ----------------------------------------------------------------------
# Reference data
# ----------------------------------------------------------------------

@dataclass(frozen=True)
class LatestLab:
    """Most recent lab value plus the matching reference range.

    ``value`` is None when the admission has no result for the item code.
    """

    value: float | None
    lower_limit: float | None
    upper_limit: float | None
    unit: str | None


@dataclass(frozen=True)
class LatestVitals:
    """Most recent vital-sign set; every field None when nothing recorded."""

    pulse: int | None = None
    systolic_bp: int | None = None
    diastolic_bp: int | None = None
    spo2: int | None = None
    body_temperature: float | None = None


def _to_float(value: Any) -> float | None:
    return None if value is None else float(value)


def patient_sex(admission: Admission | None) -> PatientSex | None:
    """The admission's recorded sex; None when missing or unrecognised."""
    if admission is None or not admission.patient_sex:
        return None
    try:
        return PatientSex(admission.patient_sex.strip().upper())
    except ValueError:
        return None


class ReferenceRepository:
    """Read-only lookups of the latest labs, vitals and prescriptions."""

    async def latest_lab(
        self, db: AsyncSession, admission_id: int, item_code: str
    ) -> LatestLab:
        """Return the most recent result for ``item_code`` with its range.

        A known sex accepts a row for that sex or a sex-agnostic row, the
        sex-specific one first.  An unknown or unrecognised sex accepts any
        row, sex-agnostic rows first.
        """
        lab_stmt = (
            select(LabResult)
            .where(LabResult.admission_id == admission_id, LabResult.item_code == item_code)
            .order_by(LabResult.measured_at.desc())
            .limit(1)
        )
        lab = (await db.execute(lab_stmt)).scalar_one_or_none()

        admission = await db.get(Admission, admission_id)
        sex = patient_sex(admission)
        ref_stmt = select(ReferenceValue).where(ReferenceValue.item_code == item_code)
        if sex is not None:
            ref_stmt = ref_stmt.where(
                or_(ReferenceValue.gender == sex.value, ReferenceValue.gender.is_(None))
            ).order_by(ReferenceValue.gender.is_(None))
        else:
            ref_stmt = ref_stmt.order_by(ReferenceValue.gender.is_not(None))
        ref_stmt = ref_stmt.limit(1)
        ref = (await db.execute(ref_stmt)).scalar_one_or_none()

        return LatestLab(
            value=_to_float(lab.value) if lab is not None else None,
            lower_limit=_to_float(ref.lower_limit) if ref is not None else None,
            upper_limit=_to_float(ref.upper_limit) if ref is not None else None,
            unit=ref.unit if ref is not None else None,
        )

    async def latest_vitals(self, db: AsyncSession, admission_id: int) -> LatestVitals:
        """Return the most recent vital-sign set for an admission."""
        stmt = (
            select(VitalSign)
            .where(VitalSign.admission_id == admission_id)
            .order_by(VitalSign.measured_at.desc())
            .limit(1)
        )
        vital = (await db.execute(stmt)).scalar_one_or_none()
        if vital is None:
            return LatestVitals()
        return LatestVitals(
            pulse=vital.pulse,
            systolic_bp=vital.systolic_bp,
            diastolic_bp=vital.diastolic_bp,
            spo2=vital.spo2,
            body_temperature=_to_float(vital.body_temperature),
        )

    async def prescriptions(self, db: AsyncSession, admission_id: int) -> list[Prescription]:
        """Every prescription on the admission, newest first."""
        stmt = (
            select(Prescription)
            .where(Prescription.admission_id == admission_id)
            .order_by(Prescription.prescribed_at.desc(), Prescription.id.desc())
        )
        return list((await db.execute(stmt)).scalars().all())
