"""
Scheduling Domain Events
"""

from dataclasses import dataclass
from datetime import date

from app.core.domain import DomainEvent


@dataclass(frozen=True, kw_only=True)
class DoctorAvailabilityChanged(DomainEvent):
    """
    A doctor's contracts, templates or bookings changed.

    ``appointment_date`` is None when the change is not tied to a single day
    (new contract, new template).
    """

    doctor_id: int
    appointment_date: date | None = None
    reason: str = ""
