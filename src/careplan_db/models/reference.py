"""Read-only reference tables consumed by the assessment engine.

Admissions, lab results, vital signs, prescriptions and the reference-range
master are owned by other parts of the hospital system (admission
management, EMR sync, ordering).  They are mapped here only so the engine
can read the latest values; nothing in this package writes to them.
"""

from datetime import datetime

from sqlalchemy import ForeignKey, Index, Integer, Numeric, String, Text
from sqlalchemy.dialects.postgresql import TIMESTAMP
from sqlalchemy.orm import Mapped, mapped_column

from careplan_db.models.base import Base


class Admission(Base):
    """Minimal view of an admission."""

    __tablename__ = "admissions"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    # PatientSex value, null when unknown
    patient_sex: Mapped[str | None] = mapped_column(String(10), nullable=True)
    # Optimistic-lock counter maintained by the admission flows.  The
    # assessment engine reads it but never checks it.
    version: Mapped[int] = mapped_column(Integer, nullable=False, default=0)


class LabResult(Base):
    """A single lab measurement for an admission (e.g. HCT, HGB)."""

    __tablename__ = "lab_results"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    admission_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("admissions.id", ondelete="CASCADE"), nullable=False,
    )
    item_code: Mapped[str] = mapped_column(String(20), nullable=False)
    value: Mapped[float] = mapped_column(Numeric(10, 3), nullable=False)
    measured_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True), nullable=False,
    )

    __table_args__ = (
        Index("ix_lab_results_latest", "admission_id", "item_code", "measured_at"),
    )


class VitalSign(Base):
    """A vital-sign measurement set for an admission."""

    __tablename__ = "vital_signs"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    admission_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("admissions.id", ondelete="CASCADE"), nullable=False,
    )
    pulse: Mapped[int | None] = mapped_column(Integer, nullable=True)
    systolic_bp: Mapped[int | None] = mapped_column(Integer, nullable=True)
    diastolic_bp: Mapped[int | None] = mapped_column(Integer, nullable=True)
    spo2: Mapped[int | None] = mapped_column(Integer, nullable=True)
    # Degrees Celsius
    body_temperature: Mapped[float | None] = mapped_column(Numeric(4, 1), nullable=True)
    measured_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True), nullable=False,
    )

    __table_args__ = (
        Index("ix_vital_signs_latest", "admission_id", "measured_at"),
    )


class ReferenceValue(Base):
    """Reference range for a lab item, optionally specific to one sex."""

    __tablename__ = "reference_values"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    item_code: Mapped[str] = mapped_column(String(20), nullable=False, index=True)
    # Null = applies regardless of sex
    gender: Mapped[str | None] = mapped_column(String(10), nullable=True)
    lower_limit: Mapped[float | None] = mapped_column(Numeric(10, 3), nullable=True)
    upper_limit: Mapped[float | None] = mapped_column(Numeric(10, 3), nullable=True)
    unit: Mapped[str | None] = mapped_column(Text, nullable=True)


class Prescription(Base):
    """A drug prescribed during an admission."""

    __tablename__ = "prescriptions"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    admission_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("admissions.id", ondelete="CASCADE"), nullable=False,
    )
    drug_name: Mapped[str] = mapped_column(Text, nullable=False)
    # REGULAR / PRN / ... as sent by the ordering system
    prescription_type: Mapped[str | None] = mapped_column(String(20), nullable=True)
    prescribed_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True), nullable=False,
    )

    __table_args__ = (
        Index("ix_prescriptions_admission", "admission_id", "prescribed_at"),
    )
