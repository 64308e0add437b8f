"""In-memory stand-ins for the persistence layer.

Mock strategy:
  - MockCarePlanItem / MockCarePlan have the same attributes as the ORM
    models but no SQLAlchemy dependency.  The engine reads and writes these
    attributes directly.
  - MockCarePlanRepository implements every async method the wizard and
    the care plan service call, mutating rows in place like the real
    repository.  ``fail_on`` makes a method raise SQLAlchemyError.
  - MockReferenceSource returns canned labs, vitals and prescriptions.
  - AsyncMock stands in for AsyncSession (db); flush() is a no-op.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

from sqlalchemy.exc import SQLAlchemyError

from careplan_engine.interfaces import ReferenceDataSource
from careplan_engine.models import LabValueAnswer, PainMedication


def _now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class MockCarePlanItem:
    """In-memory stand-in for the CarePlanItem ORM model."""

    id: int
    category: str
    status: str = "NOT_STARTED"
    details: dict | None = None
    instructions: str | None = None
    current_question_id: str | None = None
    care_plan_id: int = 1
    admission_id: int = 100
    created_at: datetime = field(default_factory=_now)
    updated_at: datetime = field(default_factory=_now)


@dataclass
class MockCarePlan:
    """In-memory stand-in for the CarePlan ORM model."""

    id: int
    admission_id: int
    created_by: str
    items: list[MockCarePlanItem] = field(default_factory=list)
    created_at: datetime = field(default_factory=_now)
    updated_at: datetime = field(default_factory=_now)


class MockCarePlanRepository:
    """In-memory CarePlanRepository replacement."""

    def __init__(self):
        self.admissions: set[int] = set()
        self.plans: dict[int, MockCarePlan] = {}
        self.items: dict[int, MockCarePlanItem] = {}
        self.fail_on: set[str] = set()
        # Names of the methods called, in order
        self.calls: list[str] = []
        self._next_item_id = 1
        self._next_plan_id = 1

    # --- Test setup helpers ---

    def add_item(self, category: str, **kwargs: Any) -> MockCarePlanItem:
        item = MockCarePlanItem(id=self._next_item_id, category=category, **kwargs)
        self._next_item_id += 1
        self.items[item.id] = item
        return item

    def _record(self, name: str) -> None:
        self.calls.append(name)
        if name in self.fail_on:
            raise SQLAlchemyError(f"boom in {name}: connection reset by peer")

    # --- Repository interface ---

    async def get_admission(self, db, admission_id):
        self._record("get_admission")
        return {"id": admission_id} if admission_id in self.admissions else None

    async def get_care_plan_by_admission(self, db, admission_id):
        self._record("get_care_plan_by_admission")
        return self.plans.get(admission_id)

    async def create_care_plan(self, db, *, admission_id, created_by, categories):
        self._record("create_care_plan")
        plan = MockCarePlan(id=self._next_plan_id, admission_id=admission_id, created_by=created_by)
        self._next_plan_id += 1
        for category in categories:
            item = self.add_item(category, care_plan_id=plan.id, admission_id=admission_id)
            plan.items.append(item)
        self.plans[admission_id] = plan
        return plan

    async def get_item(self, db, item_id):
        self._record("get_item")
        return self.items.get(item_id)

    async def save_progress(self, db, item, *, question_id, details):
        self._record("save_progress")
        item.details = details
        item.current_question_id = question_id
        item.status = "IN_PROGRESS"
        item.updated_at = _now()
        return item

    async def complete_item(self, db, item, *, details, instructions):
        self._record("complete_item")
        item.details = details
        item.instructions = instructions
        item.current_question_id = None
        item.status = "COMPLETED"
        item.updated_at = _now()
        return item

    async def set_status(self, db, item, status, *, clear_question=False):
        self._record("set_status")
        item.status = status
        if clear_question:
            item.current_question_id = None
        item.updated_at = _now()
        return item


class MockReferenceSource(ReferenceDataSource):
    """Canned latest labs (by item code), vitals and prescriptions."""

    def __init__(
        self,
        labs: dict[str, LabValueAnswer] | None = None,
        vitals: dict[str, int | float | None] | None = None,
        medications: list[PainMedication] | None = None,
    ):
        self.labs = labs or {}
        self.vitals = vitals or {}
        self.medications = medications or []

    async def latest_lab(self, db, admission_id, item_code):
        return self.labs.get(item_code, LabValueAnswer())

    async def latest_vitals(self, db, admission_id):
        empty = dict.fromkeys(("pulse", "systolic_bp", "diastolic_bp", "spo2", "body_temperature"))
        return {**empty, **self.vitals}

    async def pain_medications(self, db, admission_id):
        return list(self.medications)
