"""
Booking Store Port

Interface for appointment data access following Clean Architecture.
"""

from contextlib import AbstractAsyncContextManager
from datetime import date
from typing import Any, Protocol, runtime_checkable

from app.domains.scheduling.domain.entities.appointment import Appointment
from app.domains.scheduling.domain.value_objects.appointment_status import AppointmentStatus


@runtime_checkable
class IBookingStore(Protocol):
    """
    Appointment store interface.

    Implementations raise ``InfrastructureException`` when the backing store
    fails, and ``AppointmentConflictException`` when a write is rejected
    because another booking already holds the time range.

    Example:
        ```python
        async with store.lock_doctor_day(doctor_id, day):
            result = await validator.validate(request)
            if result.valid:
                await store.save(appointment)
        ```
    """

    async def find_by_id(self, appointment_id: int) -> Appointment | None:
        """
        Find appointment by ID.

        Args:
            appointment_id: Unique appointment identifier

        Returns:
            Appointment if found, None otherwise
        """
        ...

    async def find_by_doctor_and_date(
        self,
        doctor_id: int,
        appointment_date: date,
        statuses: list[AppointmentStatus] | None = None,
    ) -> list[Appointment]:
        """
        Appointments of a doctor on one date, ordered by start time.

        Args:
            doctor_id: Doctor ID
            appointment_date: Day to query
            statuses: Restrict to these states (defaults to scheduled and confirmed)
        """
        ...

    async def find_by_patient_in_range(
        self,
        patient_id: int,
        start_date: date,
        end_date: date,
        statuses: list[AppointmentStatus] | None = None,
    ) -> list[Appointment]:
        """
        Appointments of a patient between two dates, both inclusive.

        Args:
            patient_id: Patient ID
            start_date: First day
            end_date: Last day
            statuses: Restrict to these states (defaults to scheduled and confirmed)
        """
        ...

    async def save(self, appointment: Appointment) -> Appointment:
        """Insert or update an appointment and return it with its ID."""
        ...

    async def update_status(
        self,
        appointment_id: int,
        status: AppointmentStatus,
        metadata: dict[str, Any] | None = None,
    ) -> Appointment | None:
        """
        Change only the state and its metadata (reason, acting user).

        Returns:
            Updated appointment, or None if it does not exist
        """
        ...

    def lock_doctor_day(self, doctor_id: int, appointment_date: date) -> AbstractAsyncContextManager[None]:
        """
        Serialize check-then-write sequences for one doctor and date.

        The lock is held until the surrounding transaction ends.
        """
        ...
