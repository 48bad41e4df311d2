"""
Working Hours Catalog

Answers "when may this doctor work" from contracts and weekly templates.
"""

import logging
from datetime import date

from app.domains.scheduling.application.ports.doctor_catalog import IDoctorCatalog
from app.domains.scheduling.domain.entities.schedule_template import SUNDAY, ScheduleTemplate

logger = logging.getLogger(__name__)


class WorkingHoursCatalog:
    """
    Read-only view over doctor reference data.

    Unknown or inactive doctors yield empty results instead of errors; store
    failures propagate unchanged.

    Example:
        ```python
        catalog = WorkingHoursCatalog(doctor_catalog)
        if await catalog.has_active_contract(7, date(2024, 6, 10)):
            templates = await catalog.templates_for(7, 1)
        ```
    """

    def __init__(self, doctor_catalog: IDoctorCatalog):
        self._doctors = doctor_catalog

    async def is_doctor_available(self, doctor_id: int) -> bool:
        """Doctor exists and is active."""
        doctor = await self._doctors.get_doctor(doctor_id)
        return doctor is not None and doctor.can_accept_appointments()

    async def templates_for(self, doctor_id: int, day_of_week: int) -> list[ScheduleTemplate]:
        """Active templates for ``day_of_week`` (1=Monday), ordered by start time."""
        if day_of_week == SUNDAY or not 1 <= day_of_week <= 6:
            return []
        if not await self.is_doctor_available(doctor_id):
            logger.debug(f"Doctor {doctor_id} unknown or inactive, no working hours")
            return []

        templates = await self._doctors.get_schedule_templates(doctor_id, day_of_week)
        matching = [t for t in templates if t.is_active and t.day_of_week == day_of_week]
        return sorted(matching, key=lambda t: t.interval.start)

    async def has_active_contract(self, doctor_id: int, on: date) -> bool:
        """True iff an active contract's ``[start_date, end_date)`` contains ``on``."""
        contracts = await self._doctors.get_active_contracts(doctor_id)
        return any(contract.covers(on) for contract in contracts)
