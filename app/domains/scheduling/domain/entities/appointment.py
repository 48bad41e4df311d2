"""
Appointment Entity for Scheduling Domain

Represents a booked appointment ("turno") and its lifecycle.
"""

from dataclasses import dataclass
from datetime import UTC, date, datetime, time
from typing import Any

from app.core.domain import AggregateRoot, InvalidOperationException

from ..value_objects.appointment_status import AppointmentStatus
from ..value_objects.time_interval import TimeInterval, from_minutes, to_minutes

DEFAULT_DURATION_MINUTES = 30


@dataclass
class Appointment(AggregateRoot[int]):
    """
    Appointment aggregate root.

    The effective end time is ``end_time`` when set, otherwise
    ``start_time + duration_minutes``, otherwise ``start_time + 30 minutes``.

    Example:
        ```python
        appointment = Appointment(
            patient_id=123,
            doctor_id=456,
            appointment_date=date(2024, 6, 10),
            start_time=time(10, 0),
            end_time=time(10, 30),
        )
        appointment.confirm(confirmed_by=9)
        appointment.complete()
        ```
    """

    # References
    patient_id: int = 0
    doctor_id: int = 0

    # Scheduling
    appointment_date: date | None = None
    start_time: time | None = None
    end_time: time | None = None
    duration_minutes: int | None = None

    # Status
    status: AppointmentStatus = AppointmentStatus.SCHEDULED
    notes: str | None = None

    # Lifecycle metadata
    confirmed_at: datetime | None = None
    confirmed_by: int | None = None
    completed_at: datetime | None = None
    cancelled_at: datetime | None = None
    cancelled_by: int | None = None
    cancellation_reason: str | None = None

    @property
    def effective_end_time(self) -> time | None:
        if self.start_time is None:
            return None
        if self.end_time is not None:
            return self.end_time
        return from_minutes(self.interval().end)

    def interval(self, default_minutes: int = DEFAULT_DURATION_MINUTES) -> TimeInterval:
        """Occupied interval, falling back to ``default_minutes`` without end or duration."""
        if self.start_time is None:
            raise InvalidOperationException(operation="interval", current_state="unscheduled")
        start = to_minutes(self.start_time)
        if self.end_time is not None and to_minutes(self.end_time) > start:
            return TimeInterval(start=start, end=to_minutes(self.end_time))
        minutes = self.duration_minutes if self.duration_minutes and self.duration_minutes > 0 else default_minutes
        return TimeInterval(start=start, end=start + minutes)

    @property
    def is_active(self) -> bool:
        return self.status.is_active()

    # Status Transitions

    def _transition(self, operation: str, new_status: AppointmentStatus) -> None:
        if not self.status.can_transition_to(new_status):
            raise InvalidOperationException(
                operation=operation,
                current_state=self.status.value,
            )
        self.status = new_status
        self.touch()

    def confirm(self, confirmed_by: int | None = None) -> None:
        """Confirm the appointment."""
        self._transition("confirm", AppointmentStatus.CONFIRMED)
        self.confirmed_at = datetime.now(UTC)
        self.confirmed_by = confirmed_by

    def complete(self, notes: str | None = None) -> None:
        """Mark the appointment as attended."""
        self._transition("complete", AppointmentStatus.COMPLETED)
        self.completed_at = datetime.now(UTC)
        if notes:
            self.notes = notes

    def cancel(self, reason: str | None = None, cancelled_by: int | None = None) -> None:
        """Cancel the appointment."""
        if not self.status.can_be_cancelled():
            raise InvalidOperationException(
                operation="cancel",
                current_state=self.status.value,
                message="Cannot cancel appointment in current state",
            )
        self._transition("cancel", AppointmentStatus.CANCELLED)
        self.cancelled_at = datetime.now(UTC)
        self.cancellation_reason = reason
        self.cancelled_by = cancelled_by

    def reschedule(self, new_date: date, start_time: time, end_time: time | None = None) -> None:
        """Move the appointment; only scheduled or confirmed appointments can be edited."""
        if self.status.is_terminal():
            raise InvalidOperationException(
                operation="reschedule",
                current_state=self.status.value,
            )
        self.appointment_date = new_date
        self.start_time = start_time
        self.end_time = end_time
        self.touch()

    # Conflict Detection

    def conflicts_with(self, other: "Appointment", buffer_minutes: int = 0) -> bool:
        """Same doctor, same day, both active and buffered intervals intersect."""
        if self.doctor_id != other.doctor_id or self.appointment_date != other.appointment_date:
            return False
        if not (self.is_active and other.is_active):
            return False
        return self.interval().expanded(buffer_minutes).overlaps(other.interval())

    # Serialization

    def to_record(self) -> dict[str, Any]:
        """Persisted shape: ISO dates, ``HH:MM:SS`` times, state as enum string."""
        end = self.effective_end_time
        return {
            "id": self.id,
            "doctor_id": self.doctor_id,
            "patient_id": self.patient_id,
            "date": self.appointment_date.isoformat() if self.appointment_date else None,
            "start_time": self.start_time.strftime("%H:%M:%S") if self.start_time else None,
            "end_time": end.strftime("%H:%M:%S") if end else None,
            "state": self.status.value,
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat(),
            "cancellation_reason": self.cancellation_reason,
            "confirmed_by": self.confirmed_by,
            "cancelled_by": self.cancelled_by,
        }

    @classmethod
    def create(
        cls,
        doctor_id: int,
        patient_id: int,
        appointment_date: date,
        start_time: time,
        end_time: time | None = None,
        notes: str | None = None,
    ) -> "Appointment":
        """Factory method for a new scheduled appointment."""
        return cls(
            doctor_id=doctor_id,
            patient_id=patient_id,
            appointment_date=appointment_date,
            start_time=start_time,
            end_time=end_time,
            notes=notes,
        )
