"""careplan_db — PostgreSQL persistence layer for care plans.

Provides the ORM models, async engine factory, and repositories for reading
and updating care plan items and the reference data (labs, vitals) the
assessment engine consumes.
"""

from careplan_db.engine import get_engine, get_session_factory
from careplan_db.models.care_plan import CarePlan, CarePlanItem
from careplan_db.models.enums import CarePlanCategory, CarePlanItemStatus
from careplan_db.repository import CarePlanRepository, ReferenceRepository

__all__ = [
    "CarePlan",
    "CarePlanItem",
    "CarePlanCategory",
    "CarePlanItemStatus",
    "get_engine",
    "get_session_factory",
    "CarePlanRepository",
    "ReferenceRepository",
]
