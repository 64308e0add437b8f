"""Create care plan tables and the read-only reference tables.

Creates ``admissions`` (minimal), ``care_plans``, ``care_plan_items``,
``lab_results``, ``vital_signs`` and ``reference_values``.  In deployments
where the reference tables are already owned by the EMR sync schema, stamp
this revision instead of running it.

Revision ID: 20261017_care_plan
Revises:
Create Date: 2026-10-17
"""

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import JSONB, TIMESTAMP

# revision identifiers, used by Alembic.
revision = "20261017_care_plan"
down_revision = None
branch_labels = None
depends_on = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column(
            "created_at",
            TIMESTAMP(timezone=True),
            nullable=False,
            server_default=sa.text("now()"),
        ),
        sa.Column(
            "updated_at",
            TIMESTAMP(timezone=True),
            nullable=False,
            server_default=sa.text("now()"),
        ),
    ]


def upgrade() -> None:
    # --- Reference tables (read-only for this service) ---
    op.create_table(
        "admissions",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("patient_sex", sa.String(10), nullable=True),
        sa.Column("version", sa.Integer, nullable=False, server_default=sa.text("0")),
    )
    op.create_table(
        "lab_results",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column(
            "admission_id",
            sa.Integer,
            sa.ForeignKey("admissions.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("item_code", sa.String(20), nullable=False),
        sa.Column("value", sa.Numeric(10, 3), nullable=False),
        sa.Column("measured_at", TIMESTAMP(timezone=True), nullable=False),
    )
    op.create_index(
        "ix_lab_results_latest", "lab_results", ["admission_id", "item_code", "measured_at"],
    )
    op.create_table(
        "vital_signs",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column(
            "admission_id",
            sa.Integer,
            sa.ForeignKey("admissions.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("pulse", sa.Integer, nullable=True),
        sa.Column("systolic_bp", sa.Integer, nullable=True),
        sa.Column("diastolic_bp", sa.Integer, nullable=True),
        sa.Column("measured_at", TIMESTAMP(timezone=True), nullable=False),
    )
    op.create_index("ix_vital_signs_latest", "vital_signs", ["admission_id", "measured_at"])
    op.create_table(
        "reference_values",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("item_code", sa.String(20), nullable=False),
        sa.Column("gender", sa.String(10), nullable=True),
        sa.Column("lower_limit", sa.Numeric(10, 3), nullable=True),
        sa.Column("upper_limit", sa.Numeric(10, 3), nullable=True),
        sa.Column("unit", sa.Text, nullable=True),
    )
    op.create_index("ix_reference_values_item_code", "reference_values", ["item_code"])

    # --- Care plans ---
    op.create_table(
        "care_plans",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column(
            "admission_id",
            sa.Integer,
            sa.ForeignKey("admissions.id", ondelete="CASCADE"),
            nullable=False,
            unique=True,
        ),
        sa.Column("created_by", sa.Text, nullable=False),
        *_timestamps(),
    )
    op.create_table(
        "care_plan_items",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column(
            "care_plan_id",
            sa.Integer,
            sa.ForeignKey("care_plans.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("category", sa.String(20), nullable=False),
        sa.Column(
            "status",
            sa.String(20),
            nullable=False,
            server_default=sa.text("'NOT_STARTED'"),
        ),
        sa.Column("details", JSONB, nullable=True),
        sa.Column("instructions", sa.Text, nullable=True),
        sa.Column("current_question_id", sa.Text, nullable=True),
        *_timestamps(),
        sa.UniqueConstraint("care_plan_id", "category", name="uq_care_plan_category"),
        sa.CheckConstraint(
            "status IN ('NOT_STARTED', 'IN_PROGRESS', 'COMPLETED', 'NOT_APPLICABLE')",
            name="ck_item_status",
        ),
        sa.CheckConstraint(
            "current_question_id IS NULL OR status = 'IN_PROGRESS'",
            name="ck_question_pointer_in_progress",
        ),
    )
    op.create_index("ix_care_plan_items_care_plan_id", "care_plan_items", ["care_plan_id"])
    op.create_index("ix_care_plan_items_status", "care_plan_items", ["status"])


def downgrade() -> None:
    op.drop_index("ix_care_plan_items_status", table_name="care_plan_items")
    op.drop_index("ix_care_plan_items_care_plan_id", table_name="care_plan_items")
    op.drop_table("care_plan_items")
    op.drop_table("care_plans")
    op.drop_index("ix_reference_values_item_code", table_name="reference_values")
    op.drop_table("reference_values")
    op.drop_index("ix_vital_signs_latest", table_name="vital_signs")
    op.drop_table("vital_signs")
    op.drop_index("ix_lab_results_latest", table_name="lab_results")
    op.drop_table("lab_results")
    op.drop_table("admissions")
