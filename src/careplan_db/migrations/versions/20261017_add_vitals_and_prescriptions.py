"""Add SpO2 and body temperature to vital signs; add prescriptions.

The inflammation wizard reads SpO2 and body temperature; the pain wizard
lists the admission's prescriptions.  Like the other reference tables,
``prescriptions`` is read-only for this service.

Revision ID: 20261017_vitals_rx
Revises: 20261017_care_plan
Create Date: 2026-10-17
"""

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import TIMESTAMP

# revision identifiers, used by Alembic.
revision = "20261017_vitals_rx"
down_revision = "20261017_care_plan"
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.add_column("vital_signs", sa.Column("spo2", sa.Integer, nullable=True))
    op.add_column("vital_signs", sa.Column("body_temperature", sa.Numeric(4, 1), nullable=True))
    op.create_table(
        "prescriptions",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column(
            "admission_id",
            sa.Integer,
            sa.ForeignKey("admissions.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("drug_name", sa.Text, nullable=False),
        sa.Column("prescription_type", sa.String(20), nullable=True),
        sa.Column("prescribed_at", TIMESTAMP(timezone=True), nullable=False),
    )
    op.create_index(
        "ix_prescriptions_admission", "prescriptions", ["admission_id", "prescribed_at"],
    )


def downgrade() -> None:
    op.drop_index("ix_prescriptions_admission", table_name="prescriptions")
    op.drop_table("prescriptions")
    op.drop_column("vital_signs", "body_temperature")
    op.drop_column("vital_signs", "spo2")
