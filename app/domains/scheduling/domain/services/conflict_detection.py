"""
Pure overlap detection between a candidate interval and existing bookings.
"""

from typing import Iterable

from ..entities.appointment import Appointment
from ..value_objects.time_interval import TimeInterval


def find_conflict(
    candidate: TimeInterval,
    appointments: Iterable[Appointment],
    buffer_minutes: int = 0,
    exclude_appointment_id: int | None = None,
    default_duration_minutes: int = 30,
) -> Appointment | None:
    """
    Return the first active appointment whose interval intersects the
    candidate widened by ``buffer_minutes`` on both sides.

    Cancelled and completed appointments never conflict. The appointment with
    ``exclude_appointment_id`` is ignored so an edit does not collide with
    itself.
    """
    widened = candidate.expanded(buffer_minutes)
    for appointment in appointments:
        if exclude_appointment_id is not None and appointment.id == exclude_appointment_id:
            continue
        if not appointment.is_active or appointment.start_time is None:
            continue
        if widened.overlaps(appointment.interval(default_duration_minutes)):
            return appointment
    return None
