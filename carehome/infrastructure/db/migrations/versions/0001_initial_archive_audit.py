"""Initial audit log and discharge archive tables"""
from __future__ import annotations

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision = "0001_initial_archive_audit"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "audit_log",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("event_ts", sa.DateTime(), nullable=False, server_default=sa.text("(CURRENT_TIMESTAMP)")),
        sa.Column("staff_id", sa.String(), nullable=False),
        sa.Column("action", sa.String(), nullable=False),
        sa.Column("details", sa.Text(), nullable=True),
    )
    op.create_index("ix_audit_log_staff_id_event_ts", "audit_log", ["staff_id", "event_ts"], unique=False)

    op.create_table(
        "discharged_patients",
        sa.Column("patient_id", sa.String(), primary_key=True),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("email", sa.String(), nullable=True),
        sa.Column("phone", sa.String(), nullable=True),
        sa.Column("date_of_birth", sa.Date(), nullable=True),
        sa.Column("gender", sa.String(), nullable=False),
        sa.Column("age", sa.Integer(), nullable=True),
        sa.Column("medical_condition", sa.Text(), nullable=True),
        sa.Column("requires_isolation", sa.Boolean(), nullable=False, server_default=sa.text("0")),
        sa.Column("bed_id", sa.String(), nullable=True),
        sa.Column(
            "discharge_date", sa.DateTime(), nullable=False, server_default=sa.text("(CURRENT_TIMESTAMP)")
        ),
        sa.Column("discharge_reason", sa.Text(), nullable=True),
        sa.Column("discharge_notes", sa.Text(), nullable=True),
        sa.Column("discharged_by", sa.String(), nullable=False),
        sa.CheckConstraint("gender in ('M','F')", name="ck_discharged_patients_gender"),
    )

    op.create_table(
        "archived_prescriptions",
        sa.Column("prescription_id", sa.String(), primary_key=True),
        sa.Column(
            "patient_id",
            sa.String(),
            sa.ForeignKey("discharged_patients.patient_id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("doctor_id", sa.String(), nullable=False),
        sa.Column("prescription_date", sa.DateTime(), nullable=False),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column(
            "archived_date", sa.DateTime(), nullable=False, server_default=sa.text("(CURRENT_TIMESTAMP)")
        ),
    )

    op.create_table(
        "archived_medications",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column(
            "prescription_id",
            sa.String(),
            sa.ForeignKey("archived_prescriptions.prescription_id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("medication_name", sa.String(), nullable=False),
        sa.Column("dosage", sa.String(), nullable=False),
        sa.Column("frequency", sa.String(), nullable=False),
        sa.Column("administration_time", sa.String(), nullable=True),
        sa.Column("instructions", sa.Text(), nullable=True),
    )

    op.create_table(
        "archived_medication_records",
        sa.Column("record_id", sa.String(), primary_key=True),
        sa.Column(
            "patient_id",
            sa.String(),
            sa.ForeignKey("discharged_patients.patient_id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("nurse_id", sa.String(), nullable=False),
        sa.Column("medication_name", sa.String(), nullable=False),
        sa.Column("dosage_given", sa.String(), nullable=False),
        sa.Column("administration_time", sa.DateTime(), nullable=False),
        sa.Column("administered", sa.Boolean(), nullable=False),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column(
            "archived_date", sa.DateTime(), nullable=False, server_default=sa.text("(CURRENT_TIMESTAMP)")
        ),
    )

    op.create_index(
        "ix_archived_prescriptions_patient_id", "archived_prescriptions", ["patient_id"], unique=False
    )
    op.create_index(
        "ix_archived_medication_records_patient_id", "archived_medication_records", ["patient_id"], unique=False
    )


def downgrade() -> None:
    op.drop_index("ix_archived_medication_records_patient_id", table_name="archived_medication_records")
    op.drop_index("ix_archived_prescriptions_patient_id", table_name="archived_prescriptions")
    op.drop_table("archived_medication_records")
    op.drop_table("archived_medications")
    op.drop_table("archived_prescriptions")
    op.drop_table("discharged_patients")
    op.drop_index("ix_audit_log_staff_id_event_ts", table_name="audit_log")
    op.drop_table("audit_log")
