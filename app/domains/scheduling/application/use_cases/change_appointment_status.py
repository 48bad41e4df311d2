"""
Change Appointment Status Use Case

Confirm, cancel or complete an appointment following the state machine
scheduled -> confirmed -> completed, with cancellation allowed from
scheduled and confirmed.
"""

import logging
from dataclasses import dataclass
from typing import Any, Callable

from app.core.domain import DomainEventPublisher, EntityNotFoundException, InvalidOperationException
from app.domains.scheduling.application.ports.audit_sink import IAuditSink
from app.domains.scheduling.application.ports.booking_store import IBookingStore
from app.domains.scheduling.application.services.audit_recorder import record_audit
from app.domains.scheduling.domain.entities.appointment import Appointment
from app.domains.scheduling.domain.events import DoctorAvailabilityChanged

logger = logging.getLogger(__name__)


@dataclass
class AppointmentStatusResponse:
    success: bool
    appointment: Appointment | None = None
    error: str | None = None


class ChangeAppointmentStatusUseCase:
    """
    Use case for appointment state transitions.

    Only the state and its metadata are written, through
    ``IBookingStore.update_status``.
    """

    def __init__(self, booking_store: IBookingStore, audit_sink: IAuditSink | None = None):
        self.booking_store = booking_store
        self.audit_sink = audit_sink

    async def confirm(self, appointment_id: int, actor_id: int | None = None) -> AppointmentStatusResponse:
        return await self._apply(
            appointment_id,
            "confirmed",
            lambda a: a.confirm(confirmed_by=actor_id),
            actor_id,
        )

    async def cancel(
        self,
        appointment_id: int,
        reason: str | None = None,
        actor_id: int | None = None,
    ) -> AppointmentStatusResponse:
        return await self._apply(
            appointment_id,
            "cancelled",
            lambda a: a.cancel(reason=reason, cancelled_by=actor_id),
            actor_id,
        )

    async def complete(
        self,
        appointment_id: int,
        notes: str | None = None,
        actor_id: int | None = None,
    ) -> AppointmentStatusResponse:
        return await self._apply(
            appointment_id,
            "completed",
            lambda a: a.complete(notes=notes),
            actor_id,
        )

    async def _apply(
        self,
        appointment_id: int,
        event: str,
        transition: Callable[[Appointment], None],
        actor_id: int | None,
    ) -> AppointmentStatusResponse:
        try:
            appointment = await self.booking_store.find_by_id(appointment_id)
            if appointment is None:
                raise EntityNotFoundException(entity_type="Appointment", entity_id=appointment_id)

            previous_status = appointment.status
            transition(appointment)
        except EntityNotFoundException as e:
            logger.warning(f"Entity not found: {e}")
            return AppointmentStatusResponse(success=False, error=str(e))
        except InvalidOperationException as e:
            logger.warning(f"Invalid transition for appointment {appointment_id}: {e}")
            return AppointmentStatusResponse(success=False, appointment=appointment, error=str(e))

        updated = await self.booking_store.update_status(
            appointment_id,
            appointment.status,
            self._metadata(appointment),
        )
        if updated is None:
            return AppointmentStatusResponse(success=False, error=f"Appointment with ID {appointment_id} not found")

        await record_audit(
            self.audit_sink,
            f"appointment.{event}",
            "appointment",
            appointment_id,
            actor_id=actor_id,
            details={"old_status": previous_status.value, "new_status": updated.status.value},
        )
        if not updated.is_active:
            # Cancelled or completed appointments free their time range
            await DomainEventPublisher.publish(
                DoctorAvailabilityChanged(
                    doctor_id=updated.doctor_id,
                    appointment_date=updated.appointment_date,
                    reason=f"appointment_{event}",
                )
            )

        logger.info(f"Appointment {appointment_id}: {previous_status.value} -> {updated.status.value}")
        return AppointmentStatusResponse(success=True, appointment=updated)

    @staticmethod
    def _metadata(appointment: Appointment) -> dict[str, Any]:
        return {
            "confirmed_at": appointment.confirmed_at,
            "confirmed_by": appointment.confirmed_by,
            "completed_at": appointment.completed_at,
            "cancelled_at": appointment.cancelled_at,
            "cancelled_by": appointment.cancelled_by,
            "cancellation_reason": appointment.cancellation_reason,
            "notes": appointment.notes,
        }
