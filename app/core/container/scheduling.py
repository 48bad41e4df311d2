"""
Scheduling Domain Container.

Single Responsibility: Wire all scheduling domain dependencies.
"""

import logging
from typing import TYPE_CHECKING

from app.domains.scheduling.application.ports import IPatientDirectory
from app.domains.scheduling.application.services import (
    AppointmentValidator,
    ConflictChecker,
    SlotGenerator,
    WorkingHoursCatalog,
)
from app.domains.scheduling.application.use_cases import (
    BookAppointmentUseCase,
    ChangeAppointmentStatusUseCase,
    GetAvailableSlotsUseCase,
    ManageDoctorScheduleUseCase,
    RescheduleAppointmentUseCase,
)
from app.domains.scheduling.infrastructure.audit import LoggingAuditSink
from app.domains.scheduling.infrastructure.cache import CachedDoctorCatalog
from app.domains.scheduling.infrastructure.repositories import (
    SQLAlchemyAppointmentRepository,
    SQLAlchemyDoctorCatalog,
)

if TYPE_CHECKING:
    from app.core.container.base import BaseContainer

logger = logging.getLogger(__name__)


class SchedulingContainer:
    """
    Scheduling domain container.

    Single Responsibility: Create scheduling repositories, services and use cases.
    Every ``create_*`` method taking ``db`` binds its objects to that session.
    """

    def __init__(self, base: "BaseContainer", patient_directory: IPatientDirectory | None = None):
        """
        Initialize scheduling container.

        Args:
            base: BaseContainer with shared singletons
            patient_directory: Optional patient existence check
        """
        self._base = base
        self._patient_directory = patient_directory
        self._audit_sink = LoggingAuditSink()

    # ==================== REPOSITORIES ====================

    def create_appointment_repository(self, db) -> SQLAlchemyAppointmentRepository:
        """Create Appointment Repository (booking store)."""
        return SQLAlchemyAppointmentRepository(session=db)

    def create_doctor_catalog(self, db) -> CachedDoctorCatalog:
        """Create cached Doctor Catalog."""
        return CachedDoctorCatalog(
            inner=SQLAlchemyDoctorCatalog(session=db),
            cache=self._base.get_catalog_cache(),
            ttl=self._base.settings.CATALOG_CACHE_TTL_SECONDS,
        )

    # ==================== SERVICES ====================

    def create_working_hours_catalog(self, db) -> WorkingHoursCatalog:
        return WorkingHoursCatalog(doctor_catalog=self.create_doctor_catalog(db))

    def create_conflict_checker(self, db) -> ConflictChecker:
        return ConflictChecker(
            booking_store=self.create_appointment_repository(db),
            policy=self._base.get_policy(),
        )

    def create_slot_generator(self, db) -> SlotGenerator:
        booking_store = self.create_appointment_repository(db)
        return SlotGenerator(
            catalog=self.create_working_hours_catalog(db),
            booking_store=booking_store,
            conflict_checker=ConflictChecker(booking_store, self._base.get_policy()),
            policy=self._base.get_policy(),
        )

    def create_appointment_validator(self, db) -> AppointmentValidator:
        booking_store = self.create_appointment_repository(db)
        return AppointmentValidator(
            catalog=self.create_working_hours_catalog(db),
            booking_store=booking_store,
            conflict_checker=ConflictChecker(booking_store, self._base.get_policy()),
            policy=self._base.get_policy(),
            patient_directory=self._patient_directory,
        )

    # ==================== USE CASES ====================

    def create_book_appointment_use_case(self, db) -> BookAppointmentUseCase:
        """Create BookAppointmentUseCase with dependencies."""
        return BookAppointmentUseCase(
            booking_store=self.create_appointment_repository(db),
            validator=self.create_appointment_validator(db),
            slot_generator=self.create_slot_generator(db),
            audit_sink=self._audit_sink,
            policy=self._base.get_policy(),
        )

    def create_reschedule_appointment_use_case(self, db) -> RescheduleAppointmentUseCase:
        """Create RescheduleAppointmentUseCase with dependencies."""
        return RescheduleAppointmentUseCase(
            booking_store=self.create_appointment_repository(db),
            validator=self.create_appointment_validator(db),
            audit_sink=self._audit_sink,
            policy=self._base.get_policy(),
        )

    def create_change_appointment_status_use_case(self, db) -> ChangeAppointmentStatusUseCase:
        """Create ChangeAppointmentStatusUseCase with dependencies."""
        return ChangeAppointmentStatusUseCase(
            booking_store=self.create_appointment_repository(db),
            audit_sink=self._audit_sink,
        )

    def create_get_available_slots_use_case(self, db) -> GetAvailableSlotsUseCase:
        """Create GetAvailableSlotsUseCase with dependencies."""
        return GetAvailableSlotsUseCase(slot_generator=self.create_slot_generator(db))

    def create_manage_doctor_schedule_use_case(self, db) -> ManageDoctorScheduleUseCase:
        """Create ManageDoctorScheduleUseCase with dependencies."""
        return ManageDoctorScheduleUseCase(
            doctor_catalog=self.create_doctor_catalog(db),
            audit_sink=self._audit_sink,
        )
