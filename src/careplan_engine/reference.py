"""Reference data source backed by the ``careplan_db`` read-only tables."""

from sqlalchemy.ext.asyncio import AsyncSession

from careplan_db.repository import ReferenceRepository
from careplan_engine.dehydration import evaluate_lab_deviation
from careplan_engine.interfaces import ReferenceDataSource
from careplan_engine.models.dehydration import LabValueAnswer
from careplan_engine.models.pain import PainMedication


class DatabaseReferenceSource(ReferenceDataSource):
    """Reads the latest labs/vitals and classifies lab deviation."""

    def __init__(self) -> None:
        self._repo = ReferenceRepository()

    async def latest_lab(
        self, db: AsyncSession, admission_id: int, item_code: str
    ) -> LabValueAnswer:
        lab = await self._repo.latest_lab(db, admission_id, item_code)
        answer = LabValueAnswer(
            value=lab.value,
            lower_limit=lab.lower_limit,
            upper_limit=lab.upper_limit,
            unit=lab.unit,
        )
        return answer.model_copy(update={"deviation_status": evaluate_lab_deviation(answer)})

    async def latest_vitals(
        self, db: AsyncSession, admission_id: int
    ) -> dict[str, int | float | None]:
        vitals = await self._repo.latest_vitals(db, admission_id)
        return {
            "pulse": vitals.pulse,
            "systolic_bp": vitals.systolic_bp,
            "diastolic_bp": vitals.diastolic_bp,
            "spo2": vitals.spo2,
            "body_temperature": vitals.body_temperature,
        }

    async def pain_medications(self, db: AsyncSession, admission_id: int) -> list[PainMedication]:
        rows = await self._repo.prescriptions(db, admission_id)
        return [
            PainMedication(
                id=row.id,
                drug_name=row.drug_name,
                prescription_type=row.prescription_type,
                prescribed_at=row.prescribed_at,
            )
            for row in rows
        ]
