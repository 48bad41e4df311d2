"""
Scheduling Repositories

SQLAlchemy adapters for the scheduling ports.
"""

from app.domains.scheduling.infrastructure.repositories.appointment_repository import (
    SQLAlchemyAppointmentRepository,
    advisory_lock_key,
)
from app.domains.scheduling.infrastructure.repositories.base import SQLAlchemyRepository, session_lock
from app.domains.scheduling.infrastructure.repositories.doctor_catalog_repository import SQLAlchemyDoctorCatalog

__all__ = [
    "SQLAlchemyRepository",
    "SQLAlchemyAppointmentRepository",
    "SQLAlchemyDoctorCatalog",
    "advisory_lock_key",
    "session_lock",
]
