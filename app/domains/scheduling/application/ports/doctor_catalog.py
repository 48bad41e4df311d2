"""
Doctor Catalog Port

Read and write access to doctors, their contracts and working-hours templates.
"""

from typing import Protocol, runtime_checkable

from app.domains.scheduling.domain.entities.contract import Contract
from app.domains.scheduling.domain.entities.doctor import Doctor
from app.domains.scheduling.domain.entities.schedule_template import ScheduleTemplate


@runtime_checkable
class IDoctorCatalog(Protocol):
    """
    Doctor reference data.

    Lookups for unknown ids return ``None`` or empty lists; only store
    failures raise.
    """

    async def get_doctor(self, doctor_id: int) -> Doctor | None:
        """Doctor without contracts or templates loaded."""
        ...

    async def get_doctor_with_schedule(self, doctor_id: int) -> Doctor | None:
        """Doctor with every contract and template attached."""
        ...

    async def get_active_contracts(self, doctor_id: int) -> list[Contract]:
        """Contracts flagged active, ordered by start date."""
        ...

    async def get_schedule_templates(self, doctor_id: int, day_of_week: int) -> list[ScheduleTemplate]:
        """Active templates for one weekday (1=Monday), ordered by start time."""
        ...

    async def save_contract(self, contract: Contract) -> Contract:
        ...

    async def save_schedule_template(self, template: ScheduleTemplate) -> ScheduleTemplate:
        ...

    async def renew_contract(self, previous: Contract, renewal: Contract) -> Contract:
        """Persist the finalized ``previous`` contract and the new one atomically."""
        ...
