"""
Reschedule Appointment Use Case

Moves an existing appointment, validating the new time as if it were a new
booking while ignoring the appointment itself.
"""

import logging
from dataclasses import dataclass, field
from datetime import date, time

from app.core.domain import (
    AppointmentConflictException,
    DomainEventPublisher,
    EntityNotFoundException,
    InvalidOperationException,
)
from app.domains.scheduling.application.ports.audit_sink import IAuditSink
from app.domains.scheduling.application.ports.booking_store import IBookingStore
from app.domains.scheduling.application.services.appointment_validator import AppointmentValidator
from app.domains.scheduling.application.services.audit_recorder import record_audit
from app.domains.scheduling.domain.entities.appointment import Appointment
from app.domains.scheduling.domain.events import DoctorAvailabilityChanged
from app.domains.scheduling.domain.services.scheduling_policy import SchedulingPolicy
from app.domains.scheduling.domain.value_objects.time_interval import TimeInterval
from app.domains.scheduling.domain.value_objects.validation import AppointmentRequest, Violation

logger = logging.getLogger(__name__)


@dataclass
class RescheduleAppointmentRequest:
    """Request for moving an appointment. Without ``end_time`` the current length is kept."""

    appointment_id: int
    new_date: date
    start_time: time
    end_time: time | None = None
    rescheduled_by: int | None = None


@dataclass
class RescheduleAppointmentResponse:
    success: bool
    appointment: Appointment | None = None
    violations: list[Violation] = field(default_factory=list)
    error: str | None = None
    conflict: bool = False


class RescheduleAppointmentUseCase:
    """
    Use case for editing the date or time of an appointment.

    Completed and cancelled appointments cannot be edited.
    """

    def __init__(
        self,
        booking_store: IBookingStore,
        validator: AppointmentValidator,
        audit_sink: IAuditSink | None = None,
        policy: SchedulingPolicy | None = None,
    ):
        self.booking_store = booking_store
        self.validator = validator
        self.audit_sink = audit_sink
        self.policy = policy or SchedulingPolicy()

    async def execute(self, request: RescheduleAppointmentRequest) -> RescheduleAppointmentResponse:
        try:
            appointment = await self.booking_store.find_by_id(request.appointment_id)
            if appointment is None:
                raise EntityNotFoundException(entity_type="Appointment", entity_id=request.appointment_id)
            if appointment.status.is_terminal():
                raise InvalidOperationException(
                    operation="reschedule",
                    current_state=appointment.status.value,
                )

            previous = appointment.to_record()
            previous_date = appointment.appointment_date
            length = appointment.interval(self.policy.default_duration_minutes).duration_minutes
            end_time = request.end_time or TimeInterval.from_start(request.start_time, length).end_time

            async with self.booking_store.lock_doctor_day(appointment.doctor_id, request.new_date):
                result = await self.validator.validate(
                    AppointmentRequest(
                        doctor_id=appointment.doctor_id,
                        patient_id=appointment.patient_id,
                        date=request.new_date,
                        start_time=request.start_time,
                        end_time=end_time,
                    ),
                    exclude_appointment_id=appointment.id,
                )
                if not result.valid:
                    return RescheduleAppointmentResponse(
                        success=False,
                        appointment=appointment,
                        violations=list(result.violations),
                        error="New appointment time is not valid",
                    )

                appointment.reschedule(request.new_date, request.start_time, end_time)
                saved = await self.booking_store.save(appointment)

        except EntityNotFoundException as e:
            logger.warning(f"Entity not found: {e}")
            return RescheduleAppointmentResponse(success=False, error=str(e))
        except InvalidOperationException as e:
            logger.warning(f"Cannot reschedule appointment {request.appointment_id}: {e}")
            return RescheduleAppointmentResponse(success=False, error=str(e))
        except AppointmentConflictException as e:
            logger.warning(f"Appointment conflict on write: {e}")
            return RescheduleAppointmentResponse(success=False, error="Schedule conflict", conflict=True)

        await record_audit(
            self.audit_sink,
            "appointment.rescheduled",
            "appointment",
            saved.id,
            actor_id=request.rescheduled_by,
            details={"old": previous, "new": saved.to_record()},
        )
        for day in dict.fromkeys([previous_date, saved.appointment_date]):
            await DomainEventPublisher.publish(
                DoctorAvailabilityChanged(
                    doctor_id=saved.doctor_id,
                    appointment_date=day,
                    reason="appointment_rescheduled",
                )
            )

        logger.info(f"Appointment {saved.id} rescheduled to {saved.appointment_date} at {saved.start_time}")
        return RescheduleAppointmentResponse(success=True, appointment=saved)
