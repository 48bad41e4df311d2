"""
Scheduling Domain Layer

Core business rules for appointment slot allocation and conflict validation.

Components:
- Entities: Doctor (aggregate owning Contracts and ScheduleTemplates), Appointment
- Value Objects: AppointmentStatus, TimeInterval, TimeSlot, ValidationResult
- Domain Services: SchedulingPolicy, find_conflict
"""

from app.domains.scheduling.domain.entities import (
    Appointment,
    Contract,
    Doctor,
    ScheduleTemplate,
)
from app.domains.scheduling.domain.events import DoctorAvailabilityChanged
from app.domains.scheduling.domain.services import SchedulingPolicy, find_conflict
from app.domains.scheduling.domain.value_objects import (
    AppointmentRequest,
    AppointmentStatus,
    ContractType,
    ShiftLabel,
    TimeInterval,
    TimeSlot,
    ValidationResult,
    Violation,
    ViolationCode,
)

__all__ = [
    # Entities
    "Appointment",
    "Contract",
    "Doctor",
    "ScheduleTemplate",
    # Events
    "DoctorAvailabilityChanged",
    # Value Objects
    "AppointmentRequest",
    "AppointmentStatus",
    "ContractType",
    "ShiftLabel",
    "TimeInterval",
    "TimeSlot",
    "ValidationResult",
    "Violation",
    "ViolationCode",
    # Services
    "SchedulingPolicy",
    "find_conflict",
]
