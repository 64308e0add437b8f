"""CarePlan and CarePlanItem ORM models.

One ``CarePlan`` per admission, owning exactly one ``CarePlanItem`` per
category.  Assessment answers live in the item's ``details`` JSONB column;
its shape is category-specific and is validated by the engine after every
read, never trusted as stored.
"""

from datetime import datetime, timezone

from sqlalchemy import (
    CheckConstraint,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.dialects.postgresql import JSONB, TIMESTAMP
from sqlalchemy.orm import Mapped, mapped_column, relationship

from careplan_db.models.base import Base
from careplan_db.models.enums import CarePlanItemStatus


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class CarePlan(Base):
    """Care plan header — one row per admission."""

    __tablename__ = "care_plans"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    admission_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("admissions.id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
    )
    # Identity of the user who created the plan (X-User-ID at creation time)
    created_by: Mapped[str] = mapped_column(Text, nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True), nullable=False, default=_utcnow,
    )
    updated_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True), nullable=False, default=_utcnow, onupdate=_utcnow,
    )

    items: Mapped[list["CarePlanItem"]] = relationship(
        back_populates="care_plan",
        cascade="all, delete-orphan",
        order_by="CarePlanItem.id",
        lazy="selectin",
    )

    def __repr__(self) -> str:
        return f"<CarePlan(id={self.id}, admission_id={self.admission_id})>"


class CarePlanItem(Base):
    """One category's assessment unit within a care plan."""

    __tablename__ = "care_plan_items"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    care_plan_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("care_plans.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    category: Mapped[str] = mapped_column(String(20), nullable=False)
    status: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default=CarePlanItemStatus.NOT_STARTED.value,
    )

    # Progressive answers; null until the first progress save
    details: Mapped[dict | None] = mapped_column(JSONB, nullable=True)
    # Composed clinical note, written on completion
    instructions: Mapped[str | None] = mapped_column(Text, nullable=True)
    # Resume pointer, only set while IN_PROGRESS
    current_question_id: Mapped[str | None] = mapped_column(Text, nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True), nullable=False, default=_utcnow,
    )
    updated_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True), nullable=False, default=_utcnow, onupdate=_utcnow,
    )

    care_plan: Mapped[CarePlan] = relationship(back_populates="items", lazy="joined")

    __table_args__ = (
        UniqueConstraint("care_plan_id", "category", name="uq_care_plan_category"),
        CheckConstraint(
            "status IN ('NOT_STARTED', 'IN_PROGRESS', 'COMPLETED', 'NOT_APPLICABLE')",
            name="ck_item_status",
        ),
        CheckConstraint(
            "current_question_id IS NULL OR status = 'IN_PROGRESS'",
            name="ck_question_pointer_in_progress",
        ),
        Index("ix_care_plan_items_status", "status"),
    )

    @property
    def admission_id(self) -> int:
        """Admission owning this item's care plan."""
        return self.care_plan.admission_id

    def __repr__(self) -> str:
        return (
            f"<CarePlanItem(id={self.id}, category={self.category!r}, "
            f"status={self.status!r}, question={self.current_question_id!r})>"
        )
