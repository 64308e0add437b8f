"""Abstract interface for the reference data the wizards consume.

Reference data (latest labs, vital signs and prescriptions) is owned by
the EMR sync and is read-only for the engine.  The wizard depends on this
ABC so tests can substitute an in-memory source.
"""

from abc import ABC, abstractmethod

from sqlalchemy.ext.asyncio import AsyncSession

from careplan_engine.models.dehydration import LabValueAnswer
from careplan_engine.models.pain import PainMedication


class ReferenceDataSource(ABC):
    """Best-effort lookup of the latest lab results, vital signs and prescriptions."""

    @abstractmethod
    async def latest_lab(
        self, db: AsyncSession, admission_id: int, item_code: str
    ) -> LabValueAnswer:
        """Most recent result for ``(admission_id, item_code)``.

        Returns a ``NO_DATA`` answer (``value`` None) when nothing has been
        recorded; the reference range is still filled when one exists.
        """
        ...

    @abstractmethod
    async def latest_vitals(
        self, db: AsyncSession, admission_id: int
    ) -> dict[str, int | float | None]:
        """Most recent vital signs.

        Keys: ``pulse``, ``systolic_bp``, ``diastolic_bp``, ``spo2`` and
        ``body_temperature``.  Every value is None when no vital signs have
        been recorded.
        """
        ...

    @abstractmethod
    async def pain_medications(self, db: AsyncSession, admission_id: int) -> list[PainMedication]:
        """Every prescription on the admission, newest first."""
        ...
