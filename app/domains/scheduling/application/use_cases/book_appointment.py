"""
Book Appointment Use Case

Validates and persists a new appointment under the doctor/day lock.
Follows Clean Architecture and SOLID principles.
"""

import logging
from dataclasses import dataclass, field
from datetime import date, time

from app.core.domain import AppointmentConflictException, DomainEventPublisher
from app.domains.scheduling.application.ports.audit_sink import IAuditSink
from app.domains.scheduling.application.ports.booking_store import IBookingStore
from app.domains.scheduling.application.services.appointment_validator import AppointmentValidator
from app.domains.scheduling.application.services.audit_recorder import record_audit
from app.domains.scheduling.application.services.slot_generator import SlotGenerator
from app.domains.scheduling.domain.entities.appointment import Appointment
from app.domains.scheduling.domain.events import DoctorAvailabilityChanged
from app.domains.scheduling.domain.services.scheduling_policy import SchedulingPolicy
from app.domains.scheduling.domain.value_objects.time_interval import TimeInterval, TimeSlot, to_minutes
from app.domains.scheduling.domain.value_objects.validation import (
    AppointmentRequest,
    ValidationResult,
    Violation,
)

logger = logging.getLogger(__name__)


@dataclass
class BookAppointmentRequest:
    """Request for booking an appointment."""

    doctor_id: int
    patient_id: int
    appointment_date: date
    start_time: time
    end_time: time | None = None
    notes: str | None = None
    booked_by: int | None = None


@dataclass
class BookAppointmentResponse:
    """Response from booking an appointment."""

    success: bool
    appointment: Appointment | None = None
    violations: list[Violation] = field(default_factory=list)
    alternatives: list[TimeSlot] = field(default_factory=list)
    error: str | None = None
    conflict: bool = False

    @property
    def messages(self) -> list[str]:
        return [v.message for v in self.violations]


class BookAppointmentUseCase:
    """
    Use case for booking appointments.

    Validation and the insert run while the store holds the doctor/day lock,
    so two concurrent requests for the same slot cannot both pass. A write
    rejected by the database constraint is reported with ``conflict=True``.
    """

    def __init__(
        self,
        booking_store: IBookingStore,
        validator: AppointmentValidator,
        slot_generator: SlotGenerator | None = None,
        audit_sink: IAuditSink | None = None,
        policy: SchedulingPolicy | None = None,
    ):
        """
        Initialize use case with dependencies.

        Args:
            booking_store: Appointment persistence
            validator: Rule aggregator
            slot_generator: Used to suggest alternatives on rejection
            audit_sink: Optional audit trail
            policy: Scheduling limits
        """
        self.booking_store = booking_store
        self.validator = validator
        self.slot_generator = slot_generator
        self.audit_sink = audit_sink
        self.policy = policy or SchedulingPolicy()

    async def execute(self, request: BookAppointmentRequest) -> BookAppointmentResponse:
        """
        Execute appointment booking use case.

        Args:
            request: Booking request parameters

        Returns:
            Booking response with appointment, or violations and alternatives
        """
        end_time = request.end_time or (
            TimeInterval.from_start(request.start_time, self.policy.default_duration_minutes).end_time
        )
        proposal = AppointmentRequest(
            doctor_id=request.doctor_id,
            patient_id=request.patient_id,
            date=request.appointment_date,
            start_time=request.start_time,
            end_time=end_time,
        )

        saved: Appointment | None = None
        result: ValidationResult
        try:
            async with self.booking_store.lock_doctor_day(request.doctor_id, request.appointment_date):
                result = await self.validator.validate(proposal)
                if result.valid:
                    appointment = Appointment.create(
                        doctor_id=request.doctor_id,
                        patient_id=request.patient_id,
                        appointment_date=request.appointment_date,
                        start_time=request.start_time,
                        end_time=end_time,
                        notes=request.notes,
                    )
                    saved = await self.booking_store.save(appointment)
        except AppointmentConflictException as e:
            logger.warning(f"Appointment conflict on write: {e}")
            return BookAppointmentResponse(
                success=False,
                error="Schedule conflict",
                conflict=True,
            )

        if saved is None:
            return BookAppointmentResponse(
                success=False,
                violations=list(result.violations),
                alternatives=await self._alternatives(proposal, result),
                error="Appointment request is not valid",
            )

        await record_audit(
            self.audit_sink,
            "appointment.booked",
            "appointment",
            saved.id,
            actor_id=request.booked_by,
            details={"new": saved.to_record()},
        )
        await DomainEventPublisher.publish(
            DoctorAvailabilityChanged(
                doctor_id=saved.doctor_id,
                appointment_date=saved.appointment_date,
                reason="appointment_booked",
            )
        )

        logger.info(
            f"Appointment booked: {saved.id} for patient {saved.patient_id} with doctor {saved.doctor_id} "
            f"on {saved.appointment_date} at {saved.start_time}"
        )
        return BookAppointmentResponse(success=True, appointment=saved)

    async def _alternatives(self, proposal: AppointmentRequest, result: ValidationResult) -> list[TimeSlot]:
        if self.slot_generator is None:
            return []
        # Another time on the same day does not fix date or patient-limit failures
        if any(v.code.is_date_rule() or v.code.is_frequency_rule() for v in result.violations):
            return []
        requested = to_minutes(proposal.end_time) - to_minutes(proposal.start_time)
        return await self.slot_generator.suggest_alternatives(
            proposal.doctor_id,
            proposal.date,
            proposal.start_time,
            duration_minutes=requested if requested > 0 else None,
        )
