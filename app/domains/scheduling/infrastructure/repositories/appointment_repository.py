"""
Appointment Repository Implementation

SQLAlchemy implementation of IBookingStore.
"""

import logging
from contextlib import asynccontextmanager
from datetime import date
from typing import Any, AsyncIterator

from sqlalchemy import and_, select, text
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.domain import AppointmentConflictException, InfrastructureException
from app.domains.scheduling.application.ports.booking_store import IBookingStore
from app.domains.scheduling.domain.entities.appointment import Appointment
from app.domains.scheduling.domain.value_objects.appointment_status import AppointmentStatus
from app.domains.scheduling.infrastructure.persistence.sqlalchemy.models import AppointmentModel
from app.domains.scheduling.infrastructure.repositories.base import SQLAlchemyRepository

logger = logging.getLogger(__name__)

# Name of the exclusion constraint created by migration 001
NO_OVERLAP_CONSTRAINT = "appointments_no_overlap"

_STATUS_FIELDS = (
    "confirmed_at",
    "confirmed_by",
    "completed_at",
    "cancelled_at",
    "cancelled_by",
    "cancellation_reason",
    "notes",
)


def advisory_lock_key(doctor_id: int, appointment_date: date) -> int:
    """Signed 64-bit key unique per doctor and date."""
    return (doctor_id << 32) | appointment_date.toordinal()


class SQLAlchemyAppointmentRepository(SQLAlchemyRepository, IBookingStore):
    """
    SQLAlchemy implementation of the booking store.

    ``lock_doctor_day`` takes a transaction-scoped advisory lock; ``save``
    commits, which releases it. Writes rejected by the no-overlap exclusion
    constraint raise AppointmentConflictException.
    """

    service_name = "booking_store"

    def __init__(self, session: AsyncSession):
        super().__init__(session)

    async def find_by_id(self, appointment_id: int) -> Appointment | None:
        """Find appointment by ID."""
        result = await self._execute(select(AppointmentModel).where(AppointmentModel.id == appointment_id))
        model = result.scalar_one_or_none()
        return self._to_entity(model) if model else None

    async def find_by_doctor_and_date(
        self,
        doctor_id: int,
        appointment_date: date,
        statuses: list[AppointmentStatus] | None = None,
    ) -> list[Appointment]:
        """Appointments of a doctor on one date."""
        query = (
            select(AppointmentModel)
            .where(
                and_(
                    AppointmentModel.doctor_id == doctor_id,
                    AppointmentModel.appointment_date == appointment_date,
                    AppointmentModel.status.in_(statuses or AppointmentStatus.active_values()),
                )
            )
            .order_by(AppointmentModel.start_time)
        )
        result = await self._execute(query)
        return [self._to_entity(m) for m in result.scalars().all()]

    async def find_by_patient_in_range(
        self,
        patient_id: int,
        start_date: date,
        end_date: date,
        statuses: list[AppointmentStatus] | None = None,
    ) -> list[Appointment]:
        """Appointments of a patient between two dates (inclusive)."""
        query = (
            select(AppointmentModel)
            .where(
                and_(
                    AppointmentModel.patient_id == patient_id,
                    AppointmentModel.appointment_date.between(start_date, end_date),
                    AppointmentModel.status.in_(statuses or AppointmentStatus.active_values()),
                )
            )
            .order_by(AppointmentModel.appointment_date, AppointmentModel.start_time)
        )
        result = await self._execute(query)
        return [self._to_entity(m) for m in result.scalars().all()]

    async def save(self, appointment: Appointment) -> Appointment:
        """Save or update appointment."""
        model: AppointmentModel | None = None
        if appointment.id:
            result = await self._execute(select(AppointmentModel).where(AppointmentModel.id == appointment.id))
            model = result.scalar_one_or_none()

        async with self._lock:
            if model is not None:
                self._update_model(model, appointment)
            else:
                model = self._to_model(appointment)
                self.session.add(model)
            try:
                await self.session.commit()
                await self.session.refresh(model)
            except IntegrityError as e:
                await self.session.rollback()
                if NO_OVERLAP_CONSTRAINT in str(e.orig):
                    time_slot = f"{appointment.appointment_date} {appointment.start_time}-{appointment.effective_end_time}"
                    raise AppointmentConflictException(
                        doctor_id=appointment.doctor_id,
                        time_slot=time_slot,
                    ) from e
                logger.error(f"Integrity error saving appointment: {e}")
                raise InfrastructureException(self.service_name, "Could not save appointment", original_error=e) from e
            except SQLAlchemyError as e:
                await self.session.rollback()
                logger.error(f"Error saving appointment: {e}")
                raise InfrastructureException(self.service_name, "Could not save appointment", original_error=e) from e

        return self._to_entity(model)

    async def update_status(
        self,
        appointment_id: int,
        status: AppointmentStatus,
        metadata: dict[str, Any] | None = None,
    ) -> Appointment | None:
        """Write the new state and its metadata."""
        result = await self._execute(select(AppointmentModel).where(AppointmentModel.id == appointment_id))
        model = result.scalar_one_or_none()
        if model is None:
            return None

        async with self._lock:
            model.status = status  # type: ignore[assignment]
            for key, value in (metadata or {}).items():
                if key in _STATUS_FIELDS and value is not None:
                    setattr(model, key, value)
            try:
                await self.session.commit()
                await self.session.refresh(model)
            except SQLAlchemyError as e:
                await self.session.rollback()
                logger.error(f"Error updating appointment {appointment_id} status: {e}")
                raise InfrastructureException(self.service_name, "Could not update appointment", original_error=e) from e

        return self._to_entity(model)

    @asynccontextmanager
    async def lock_doctor_day(self, doctor_id: int, appointment_date: date) -> AsyncIterator[None]:
        """Hold ``pg_advisory_xact_lock`` for the doctor/date until the transaction ends."""
        await self._execute(
            text("SELECT pg_advisory_xact_lock(:key)"),
            {"key": advisory_lock_key(doctor_id, appointment_date)},
        )
        yield

    # Mapping methods

    def _to_entity(self, model: AppointmentModel) -> Appointment:
        """Convert model to entity."""
        appointment = Appointment(
            id=model.id,  # type: ignore[arg-type]
            patient_id=model.patient_id,  # type: ignore[arg-type]
            doctor_id=model.doctor_id,  # type: ignore[arg-type]
            appointment_date=model.appointment_date,  # type: ignore[arg-type]
            start_time=model.start_time,  # type: ignore[arg-type]
            end_time=model.end_time,  # type: ignore[arg-type]
            duration_minutes=model.duration_minutes,  # type: ignore[arg-type]
            status=model.status or AppointmentStatus.SCHEDULED,  # type: ignore[arg-type]
            notes=model.notes,  # type: ignore[arg-type]
            confirmed_at=model.confirmed_at,  # type: ignore[arg-type]
            confirmed_by=model.confirmed_by,  # type: ignore[arg-type]
            completed_at=model.completed_at,  # type: ignore[arg-type]
            cancelled_at=model.cancelled_at,  # type: ignore[arg-type]
            cancelled_by=model.cancelled_by,  # type: ignore[arg-type]
            cancellation_reason=model.cancellation_reason,  # type: ignore[arg-type]
        )

        if model.created_at:
            appointment.created_at = model.created_at  # type: ignore[assignment]
        if model.updated_at:
            appointment.updated_at = model.updated_at  # type: ignore[assignment]

        return appointment

    def _to_model(self, appointment: Appointment) -> AppointmentModel:
        """Convert entity to model."""
        return AppointmentModel(
            doctor_id=appointment.doctor_id,
            patient_id=appointment.patient_id,
            appointment_date=appointment.appointment_date,
            start_time=appointment.start_time,
            end_time=appointment.effective_end_time,
            duration_minutes=appointment.duration_minutes,
            status=appointment.status,
            notes=appointment.notes,
            confirmed_at=appointment.confirmed_at,
            confirmed_by=appointment.confirmed_by,
            completed_at=appointment.completed_at,
            cancelled_at=appointment.cancelled_at,
            cancelled_by=appointment.cancelled_by,
            cancellation_reason=appointment.cancellation_reason,
        )

    def _update_model(self, model: AppointmentModel, appointment: Appointment) -> None:
        """Update model from entity."""
        model.appointment_date = appointment.appointment_date  # type: ignore[assignment]
        model.start_time = appointment.start_time  # type: ignore[assignment]
        model.end_time = appointment.effective_end_time  # type: ignore[assignment]
        model.duration_minutes = appointment.duration_minutes  # type: ignore[assignment]
        model.status = appointment.status  # type: ignore[assignment]
        model.notes = appointment.notes  # type: ignore[assignment]
        model.confirmed_at = appointment.confirmed_at  # type: ignore[assignment]
        model.confirmed_by = appointment.confirmed_by  # type: ignore[assignment]
        model.completed_at = appointment.completed_at  # type: ignore[assignment]
        model.cancelled_at = appointment.cancelled_at  # type: ignore[assignment]
        model.cancelled_by = appointment.cancelled_by  # type: ignore[assignment]
        model.cancellation_reason = appointment.cancellation_reason  # type: ignore[assignment]
