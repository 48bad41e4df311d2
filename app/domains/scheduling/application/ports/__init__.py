"""
Scheduling Ports

Interfaces (ports) for the scheduling domain following Clean Architecture.
"""

from app.domains.scheduling.application.ports.audit_sink import IAuditSink
from app.domains.scheduling.application.ports.booking_store import IBookingStore
from app.domains.scheduling.application.ports.doctor_catalog import IDoctorCatalog
from app.domains.scheduling.application.ports.patient_directory import IPatientDirectory

__all__ = [
    "IAuditSink",
    "IBookingStore",
    "IDoctorCatalog",
    "IPatientDirectory",
]
