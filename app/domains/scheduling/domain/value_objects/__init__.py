"""
Scheduling Value Objects
"""

from app.domains.scheduling.domain.value_objects.appointment_status import (
    AppointmentStatus,
    ContractType,
    ShiftLabel,
)
from app.domains.scheduling.domain.value_objects.time_interval import (
    MINUTES_PER_DAY,
    TimeInterval,
    TimeSlot,
    from_minutes,
    to_minutes,
)
from app.domains.scheduling.domain.value_objects.validation import (
    AppointmentRequest,
    ValidationResult,
    Violation,
    ViolationCode,
)

__all__ = [
    "AppointmentStatus",
    "ContractType",
    "ShiftLabel",
    "TimeInterval",
    "TimeSlot",
    "MINUTES_PER_DAY",
    "to_minutes",
    "from_minutes",
    "AppointmentRequest",
    "ValidationResult",
    "Violation",
    "ViolationCode",
]
