"""scheduling_schema

Revision ID: 001_scheduling
Revises:
Create Date: 2026-10-19

Creates doctors, doctor_contracts, doctor_schedule_templates and appointments.
Adds the appointments_no_overlap exclusion constraint (btree_gist) so two
scheduled or confirmed appointments of one doctor never intersect, even when
two writers bypass the application-level advisory lock.
"""

from typing import Sequence, Union

import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "001_scheduling"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

contract_type = postgresql.ENUM(
    "temporary", "permanent", "substitute", "on_call", name="contract_type", create_type=False
)
shift_label = postgresql.ENUM("morning", "afternoon", "full", name="shift_label", create_type=False)
appointment_status = postgresql.ENUM(
    "scheduled", "confirmed", "completed", "cancelled", name="appointment_status", create_type=False
)


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
    ]


def upgrade() -> None:
    """Create scheduling tables, enums and the no-overlap constraint."""

    # btree_gist lets integer equality share a GiST index with range overlap
    op.execute("CREATE EXTENSION IF NOT EXISTS btree_gist")

    contract_type.create(op.get_bind(), checkfirst=True)
    shift_label.create(op.get_bind(), checkfirst=True)
    appointment_status.create(op.get_bind(), checkfirst=True)

    # ==========================================================================
    # 1. Doctors
    # ==========================================================================
    op.create_table(
        "doctors",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("first_name", sa.String(100), nullable=False),
        sa.Column("last_name", sa.String(100), nullable=False),
        sa.Column("license_number", sa.String(50), nullable=False, comment="Matrícula profesional"),
        sa.Column("specialty_id", sa.Integer(), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        *_timestamps(),
        sa.UniqueConstraint("license_number", name="uq_doctors_license_number"),
    )
    op.create_index("ix_doctors_id", "doctors", ["id"])
    op.create_index("ix_doctors_specialty_id", "doctors", ["specialty_id"])

    # ==========================================================================
    # 2. Contracts ([start_date, end_date), NULL end = open-ended)
    # ==========================================================================
    op.create_table(
        "doctor_contracts",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("doctor_id", sa.Integer(), sa.ForeignKey("doctors.id"), nullable=False),
        sa.Column("start_date", sa.Date(), nullable=False),
        sa.Column("end_date", sa.Date(), nullable=True),
        sa.Column("contract_type", contract_type, nullable=False, server_default="permanent"),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("termination_reason", sa.Text(), nullable=True),
        *_timestamps(),
        sa.CheckConstraint("end_date IS NULL OR end_date >= start_date", name="ck_contract_dates"),
    )
    op.create_index("ix_doctor_contracts_id", "doctor_contracts", ["id"])
    op.create_index("ix_doctor_contracts_doctor_id", "doctor_contracts", ["doctor_id"])
    op.create_index("idx_doctor_contracts_doctor_active", "doctor_contracts", ["doctor_id", "is_active"])

    # ==========================================================================
    # 3. Weekly working-hours templates (1=Monday .. 6=Saturday)
    # ==========================================================================
    op.create_table(
        "doctor_schedule_templates",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("doctor_id", sa.Integer(), sa.ForeignKey("doctors.id"), nullable=False),
        sa.Column("day_of_week", sa.SmallInteger(), nullable=False),
        sa.Column("start_time", sa.Time(), nullable=False),
        sa.Column("end_time", sa.Time(), nullable=False),
        sa.Column("shift_label", shift_label, nullable=False, server_default="full"),
        sa.Column("slot_duration_minutes", sa.Integer(), nullable=False, server_default="30"),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        *_timestamps(),
        sa.CheckConstraint("day_of_week BETWEEN 1 AND 6", name="ck_template_day_of_week"),
        sa.CheckConstraint("start_time < end_time", name="ck_template_times"),
        sa.CheckConstraint("slot_duration_minutes BETWEEN 15 AND 120", name="ck_template_slot_duration"),
    )
    op.create_index("ix_doctor_schedule_templates_id", "doctor_schedule_templates", ["id"])
    op.create_index("ix_doctor_schedule_templates_doctor_id", "doctor_schedule_templates", ["doctor_id"])
    op.create_index("idx_schedule_templates_doctor_day", "doctor_schedule_templates", ["doctor_id", "day_of_week"])

    # ==========================================================================
    # 4. Appointments
    # ==========================================================================
    op.create_table(
        "appointments",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("doctor_id", sa.Integer(), sa.ForeignKey("doctors.id"), nullable=False),
        sa.Column("patient_id", sa.Integer(), nullable=False),
        sa.Column("appointment_date", sa.Date(), nullable=False),
        sa.Column("start_time", sa.Time(), nullable=False),
        sa.Column("end_time", sa.Time(), nullable=True),
        sa.Column("duration_minutes", sa.Integer(), nullable=True),
        sa.Column("status", appointment_status, nullable=False, server_default="scheduled"),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("confirmed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("confirmed_by", sa.Integer(), nullable=True),
        sa.Column("completed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("cancelled_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("cancelled_by", sa.Integer(), nullable=True),
        sa.Column("cancellation_reason", sa.Text(), nullable=True),
        *_timestamps(),
    )
    op.create_index("ix_appointments_id", "appointments", ["id"])
    op.create_index("ix_appointments_doctor_id", "appointments", ["doctor_id"])
    op.create_index("ix_appointments_patient_id", "appointments", ["patient_id"])
    op.create_index("ix_appointments_appointment_date", "appointments", ["appointment_date"])
    op.create_index("ix_appointments_status", "appointments", ["status"])
    op.create_index("idx_appointments_doctor_date", "appointments", ["doctor_id", "appointment_date"])
    op.create_index("idx_appointments_patient_date", "appointments", ["patient_id", "appointment_date"])

    # Raw intervals only; the buffer is enforced under the advisory lock
    op.execute(
        """
        ALTER TABLE appointments
        ADD CONSTRAINT appointments_no_overlap
        EXCLUDE USING gist (
            doctor_id WITH =,
            tsrange(
                appointment_date + start_time,
                appointment_date + COALESCE(
                    end_time,
                    start_time + COALESCE(duration_minutes, 30) * INTERVAL '1 minute'
                ),
                '[)'
            ) WITH &&
        )
        WHERE (status IN ('scheduled', 'confirmed'))
        """
    )


def downgrade() -> None:
    """Drop scheduling tables and enums."""
    op.execute("ALTER TABLE appointments DROP CONSTRAINT IF EXISTS appointments_no_overlap")
    op.drop_table("appointments")
    op.drop_table("doctor_schedule_templates")
    op.drop_table("doctor_contracts")
    op.drop_table("doctors")

    appointment_status.drop(op.get_bind(), checkfirst=True)
    shift_label.drop(op.get_bind(), checkfirst=True)
    contract_type.drop(op.get_bind(), checkfirst=True)
