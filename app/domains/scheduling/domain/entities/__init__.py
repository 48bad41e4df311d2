"""
Scheduling Domain Entities
"""

from app.domains.scheduling.domain.entities.appointment import Appointment
from app.domains.scheduling.domain.entities.contract import Contract
from app.domains.scheduling.domain.entities.doctor import Doctor
from app.domains.scheduling.domain.entities.schedule_template import ScheduleTemplate

__all__ = [
    "Appointment",
    "Contract",
    "Doctor",
    "ScheduleTemplate",
]
