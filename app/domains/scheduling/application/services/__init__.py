"""
Scheduling Application Services

Stateless services composed over the ports: working hours lookup,
conflict checking, slot generation and validation.
"""

from app.domains.scheduling.application.services.appointment_validator import AppointmentValidator
from app.domains.scheduling.application.services.conflict_checker import ConflictChecker
from app.domains.scheduling.application.services.slot_generator import SlotGenerator
from app.domains.scheduling.application.services.working_hours_catalog import WorkingHoursCatalog

__all__ = [
    "AppointmentValidator",
    "ConflictChecker",
    "SlotGenerator",
    "WorkingHoursCatalog",
]
