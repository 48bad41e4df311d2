"""
Scheduling SQLAlchemy Models

Database models for scheduling domain persistence.
"""

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    Date,
    DateTime,
    Enum as SQLEnum,
    ForeignKey,
    Index,
    Integer,
    SmallInteger,
    String,
    Text,
    Time,
)
from sqlalchemy.orm import relationship

from app.domains.scheduling.domain.value_objects.appointment_status import (
    AppointmentStatus,
    ContractType,
    ShiftLabel,
)
from app.models.db.base import Base, TimestampMixin


def _enum_values(enum_cls) -> list[str]:
    return [member.value for member in enum_cls]


class DoctorModel(Base, TimestampMixin):
    """SQLAlchemy model for Doctor entity."""

    __tablename__ = "doctors"

    id = Column(Integer, primary_key=True, index=True)
    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=False)
    license_number = Column(String(50), nullable=False, unique=True)
    specialty_id = Column(Integer, nullable=True, index=True)
    is_active = Column(Boolean, default=True, nullable=False)

    contracts = relationship("DoctorContractModel", back_populates="doctor", lazy="selectin")
    schedule_templates = relationship("ScheduleTemplateModel", back_populates="doctor", lazy="selectin")


class DoctorContractModel(Base, TimestampMixin):
    """SQLAlchemy model for Contract entity. ``end_date`` is exclusive, NULL is open-ended."""

    __tablename__ = "doctor_contracts"

    id = Column(Integer, primary_key=True, index=True)
    doctor_id = Column(Integer, ForeignKey("doctors.id"), nullable=False, index=True)
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=True)
    contract_type = Column(
        SQLEnum(ContractType, name="contract_type", values_callable=_enum_values),
        default=ContractType.PERMANENT,
        nullable=False,
    )
    is_active = Column(Boolean, default=True, nullable=False)
    notes = Column(Text, nullable=True)
    termination_reason = Column(Text, nullable=True)

    doctor = relationship("DoctorModel", back_populates="contracts")

    __table_args__ = (
        CheckConstraint("end_date IS NULL OR end_date >= start_date", name="ck_contract_dates"),
        Index("idx_doctor_contracts_doctor_active", "doctor_id", "is_active"),
    )


class ScheduleTemplateModel(Base, TimestampMixin):
    """SQLAlchemy model for ScheduleTemplate entity."""

    __tablename__ = "doctor_schedule_templates"

    id = Column(Integer, primary_key=True, index=True)
    doctor_id = Column(Integer, ForeignKey("doctors.id"), nullable=False, index=True)
    day_of_week = Column(SmallInteger, nullable=False)
    start_time = Column(Time, nullable=False)
    end_time = Column(Time, nullable=False)
    shift_label = Column(
        SQLEnum(ShiftLabel, name="shift_label", values_callable=_enum_values),
        default=ShiftLabel.FULL,
        nullable=False,
    )
    slot_duration_minutes = Column(Integer, default=30, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)

    doctor = relationship("DoctorModel", back_populates="schedule_templates")

    __table_args__ = (
        CheckConstraint("day_of_week BETWEEN 1 AND 6", name="ck_template_day_of_week"),
        CheckConstraint("start_time < end_time", name="ck_template_times"),
        CheckConstraint("slot_duration_minutes BETWEEN 15 AND 120", name="ck_template_slot_duration"),
        Index("idx_schedule_templates_doctor_day", "doctor_id", "day_of_week"),
    )


class AppointmentModel(Base, TimestampMixin):
    """
    SQLAlchemy model for Appointment entity.

    The migration adds an exclusion constraint so two scheduled or confirmed
    rows of one doctor can never hold intersecting time ranges.
    """

    __tablename__ = "appointments"

    id = Column(Integer, primary_key=True, index=True)

    # References
    doctor_id = Column(Integer, ForeignKey("doctors.id"), nullable=False, index=True)
    patient_id = Column(Integer, nullable=False, index=True)

    # Scheduling
    appointment_date = Column(Date, nullable=False, index=True)
    start_time = Column(Time, nullable=False)
    end_time = Column(Time, nullable=True)
    duration_minutes = Column(Integer, nullable=True)

    # Status
    status = Column(
        SQLEnum(AppointmentStatus, name="appointment_status", values_callable=_enum_values),
        default=AppointmentStatus.SCHEDULED,
        nullable=False,
        index=True,
    )
    notes = Column(Text, nullable=True)

    # Lifecycle metadata
    confirmed_at = Column(DateTime(timezone=True), nullable=True)
    confirmed_by = Column(Integer, nullable=True)
    completed_at = Column(DateTime(timezone=True), nullable=True)
    cancelled_at = Column(DateTime(timezone=True), nullable=True)
    cancelled_by = Column(Integer, nullable=True)
    cancellation_reason = Column(Text, nullable=True)

    __table_args__ = (
        Index("idx_appointments_doctor_date", "doctor_id", "appointment_date"),
        Index("idx_appointments_patient_date", "patient_id", "appointment_date"),
    )
