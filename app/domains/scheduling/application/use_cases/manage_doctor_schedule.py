"""
Manage Doctor Schedule Use Case

Adds, finalizes and renews contracts and adds weekly working-hours templates,
enforcing the doctor aggregate's non-overlap invariants before persisting.
"""

import logging
from dataclasses import dataclass
from datetime import date, time
from typing import Callable

from app.core.domain import (
    BusinessRuleViolationException,
    DomainEventPublisher,
    EntityNotFoundException,
    InvalidOperationException,
    ValidationException,
)
from app.domains.scheduling.application.ports.audit_sink import IAuditSink
from app.domains.scheduling.application.ports.doctor_catalog import IDoctorCatalog
from app.domains.scheduling.application.services.audit_recorder import record_audit
from app.domains.scheduling.domain.entities.contract import Contract
from app.domains.scheduling.domain.entities.doctor import Doctor
from app.domains.scheduling.domain.entities.schedule_template import DEFAULT_SLOT_MINUTES, ScheduleTemplate
from app.domains.scheduling.domain.value_objects.appointment_status import ContractType, ShiftLabel

logger = logging.getLogger(__name__)


@dataclass
class AddContractRequest:
    doctor_id: int
    start_date: date
    end_date: date | None = None
    contract_type: ContractType = ContractType.PERMANENT
    notes: str | None = None
    actor_id: int | None = None


@dataclass
class RenewContractRequest:
    doctor_id: int
    contract_id: int
    start_date: date
    end_date: date | None = None
    contract_type: ContractType = ContractType.PERMANENT
    notes: str | None = None
    actor_id: int | None = None


@dataclass
class AddScheduleTemplateRequest:
    doctor_id: int
    day_of_week: int
    start_time: time
    end_time: time
    shift_label: ShiftLabel = ShiftLabel.FULL
    slot_duration_minutes: int = DEFAULT_SLOT_MINUTES
    actor_id: int | None = None


@dataclass
class ScheduleChangeResponse:
    success: bool
    contract: Contract | None = None
    template: ScheduleTemplate | None = None
    error: str | None = None


class ManageDoctorScheduleUseCase:
    """
    Use case for doctor contracts and working hours.

    Every successful change publishes ``DoctorAvailabilityChanged`` so cached
    catalog entries for the doctor are dropped.
    """

    def __init__(
        self,
        doctor_catalog: IDoctorCatalog,
        audit_sink: IAuditSink | None = None,
        clock: Callable[[], date] = date.today,
    ):
        self.doctor_catalog = doctor_catalog
        self.audit_sink = audit_sink
        self._clock = clock

    async def add_contract(self, request: AddContractRequest) -> ScheduleChangeResponse:
        try:
            doctor = await self._load_doctor(request.doctor_id)
            contract = Contract(
                doctor_id=request.doctor_id,
                start_date=request.start_date,
                end_date=request.end_date,
                contract_type=request.contract_type,
                notes=request.notes,
            )
            doctor.add_contract(contract)
            saved = await self.doctor_catalog.save_contract(contract)
        except (EntityNotFoundException, ValidationException, BusinessRuleViolationException) as e:
            logger.warning(f"Contract rejected for doctor {request.doctor_id}: {e}")
            return ScheduleChangeResponse(success=False, error=str(e))

        await self._after_change(doctor, "contract.added", "contract", saved.id, request.actor_id, saved.to_dict())
        logger.info(f"Contract {saved.id} added for doctor {request.doctor_id} from {saved.start_date}")
        return ScheduleChangeResponse(success=True, contract=saved)

    async def finalize_contract(
        self,
        doctor_id: int,
        contract_id: int,
        end_date: date | None = None,
        reason: str | None = None,
        actor_id: int | None = None,
    ) -> ScheduleChangeResponse:
        try:
            doctor = await self._load_doctor(doctor_id)
            today = self._clock()
            contract = doctor.finalize_contract(contract_id, end_date or today, reason, today=today)
            saved = await self.doctor_catalog.save_contract(contract)
        except (EntityNotFoundException, ValidationException, InvalidOperationException) as e:
            logger.warning(f"Cannot finalize contract {contract_id} of doctor {doctor_id}: {e}")
            return ScheduleChangeResponse(success=False, error=str(e))

        await self._after_change(
            doctor,
            "contract.finalized",
            "contract",
            saved.id,
            actor_id,
            {**saved.to_dict(), "reason": reason},
        )
        return ScheduleChangeResponse(success=True, contract=saved)

    async def renew_contract(self, request: RenewContractRequest) -> ScheduleChangeResponse:
        """
        Replace a contract with a new one starting on ``request.start_date``.

        The old contract is finalized on that date with reason "Renewal"; both
        writes go to the catalog in one transaction.
        """
        try:
            doctor = await self._load_doctor(request.doctor_id)
            renewal = Contract(
                doctor_id=request.doctor_id,
                start_date=request.start_date,
                end_date=request.end_date,
                contract_type=request.contract_type,
                notes=request.notes,
            )
            previous = doctor.renew_contract(request.contract_id, renewal, today=self._clock())
            saved = await self.doctor_catalog.renew_contract(previous, renewal)
        except (
            EntityNotFoundException,
            ValidationException,
            InvalidOperationException,
            BusinessRuleViolationException,
        ) as e:
            logger.warning(f"Cannot renew contract {request.contract_id} of doctor {request.doctor_id}: {e}")
            return ScheduleChangeResponse(success=False, error=str(e))

        await self._after_change(
            doctor,
            "contract.renewed",
            "contract",
            saved.id,
            request.actor_id,
            {**saved.to_dict(), "previous_contract_id": previous.id},
        )
        logger.info(f"Contract {previous.id} of doctor {request.doctor_id} renewed as {saved.id}")
        return ScheduleChangeResponse(success=True, contract=saved)

    async def add_schedule_template(self, request: AddScheduleTemplateRequest) -> ScheduleChangeResponse:
        try:
            doctor = await self._load_doctor(request.doctor_id)
            template = ScheduleTemplate(
                doctor_id=request.doctor_id,
                day_of_week=request.day_of_week,
                start_time=request.start_time,
                end_time=request.end_time,
                shift_label=request.shift_label,
                slot_duration_minutes=request.slot_duration_minutes,
            )
            doctor.add_schedule_template(template)
            saved = await self.doctor_catalog.save_schedule_template(template)
        except (EntityNotFoundException, ValidationException, BusinessRuleViolationException) as e:
            logger.warning(f"Working hours rejected for doctor {request.doctor_id}: {e}")
            return ScheduleChangeResponse(success=False, error=str(e))

        await self._after_change(
            doctor,
            "schedule_template.added",
            "schedule_template",
            saved.id,
            request.actor_id,
            saved.to_dict(),
        )
        return ScheduleChangeResponse(success=True, template=saved)

    async def _load_doctor(self, doctor_id: int) -> Doctor:
        doctor = await self.doctor_catalog.get_doctor_with_schedule(doctor_id)
        if doctor is None:
            raise EntityNotFoundException(entity_type="Doctor", entity_id=doctor_id)
        return doctor

    async def _after_change(
        self,
        doctor: Doctor,
        event: str,
        entity: str,
        entity_id: int | None,
        actor_id: int | None,
        details: dict,
    ) -> None:
        await record_audit(self.audit_sink, event, entity, entity_id, actor_id=actor_id, details=details)
        await DomainEventPublisher.publish_all(doctor.get_domain_events())
        doctor.clear_domain_events()
