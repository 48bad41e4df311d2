"""
Conflict Checker

Buffered overlap test of a candidate time range against a doctor's active
bookings on one date.
"""

from datetime import date, time
from typing import Iterable

from app.domains.scheduling.application.ports.booking_store import IBookingStore
from app.domains.scheduling.domain.entities.appointment import Appointment
from app.domains.scheduling.domain.services.conflict_detection import find_conflict
from app.domains.scheduling.domain.services.scheduling_policy import SchedulingPolicy
from app.domains.scheduling.domain.value_objects.time_interval import TimeInterval


class ConflictChecker:
    """
    Decides whether a doctor is free for a time range.

    The candidate is widened by the buffer on both sides and compared with
    every scheduled or confirmed appointment of that doctor and date using a
    half-open intersection. Appointments without an end time or duration
    count as 30 minutes long.
    """

    def __init__(self, booking_store: IBookingStore, policy: SchedulingPolicy | None = None):
        self._store = booking_store
        self._policy = policy or SchedulingPolicy()

    @property
    def default_buffer_minutes(self) -> int:
        return self._policy.buffer_minutes

    async def has_overlap(
        self,
        doctor_id: int,
        appointment_date: date,
        start_time: time,
        end_time: time,
        buffer_minutes: int | None = None,
        exclude_appointment_id: int | None = None,
    ) -> bool:
        """
        Check whether the doctor has a conflicting booking.

        Args:
            doctor_id: Doctor ID
            appointment_date: Day of the candidate
            start_time: Candidate start
            end_time: Candidate end, must be after ``start_time``
            buffer_minutes: Margin on both sides (policy default when None)
            exclude_appointment_id: Booking to ignore, e.g. the one being edited

        Returns:
            True if any active booking intersects the buffered candidate
        """
        conflict = await self.find_overlapping(
            doctor_id,
            appointment_date,
            start_time,
            end_time,
            buffer_minutes=buffer_minutes,
            exclude_appointment_id=exclude_appointment_id,
        )
        return conflict is not None

    async def find_overlapping(
        self,
        doctor_id: int,
        appointment_date: date,
        start_time: time,
        end_time: time,
        buffer_minutes: int | None = None,
        exclude_appointment_id: int | None = None,
    ) -> Appointment | None:
        """Like ``has_overlap`` but returns the first conflicting appointment."""
        candidate = TimeInterval.from_times(start_time, end_time)
        bookings = await self._store.find_by_doctor_and_date(doctor_id, appointment_date)
        return self.check(candidate, bookings, buffer_minutes, exclude_appointment_id)

    def check(
        self,
        candidate: TimeInterval,
        bookings: Iterable[Appointment],
        buffer_minutes: int | None = None,
        exclude_appointment_id: int | None = None,
    ) -> Appointment | None:
        """Same predicate over bookings that were already fetched."""
        buffer = self._policy.buffer_minutes if buffer_minutes is None else buffer_minutes
        return find_conflict(
            candidate,
            bookings,
            buffer_minutes=buffer,
            exclude_appointment_id=exclude_appointment_id,
            default_duration_minutes=self._policy.default_duration_minutes,
        )
