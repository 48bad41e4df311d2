"""
Doctor Catalog Repository Implementation

SQLAlchemy implementation of IDoctorCatalog.
"""

import logging

from sqlalchemy import and_, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.domain import EntityNotFoundException, InfrastructureException
from app.domains.scheduling.application.ports.doctor_catalog import IDoctorCatalog
from app.domains.scheduling.domain.entities.contract import Contract
from app.domains.scheduling.domain.entities.doctor import Doctor
from app.domains.scheduling.domain.entities.schedule_template import ScheduleTemplate
from app.domains.scheduling.domain.value_objects.appointment_status import ContractType, ShiftLabel
from app.domains.scheduling.infrastructure.persistence.sqlalchemy.models import (
    DoctorContractModel,
    DoctorModel,
    ScheduleTemplateModel,
)
from app.domains.scheduling.infrastructure.repositories.base import SQLAlchemyRepository

logger = logging.getLogger(__name__)


class SQLAlchemyDoctorCatalog(SQLAlchemyRepository, IDoctorCatalog):
    """
    SQLAlchemy implementation of the doctor catalog.

    Contracts and templates are loaded with ``selectin`` so
    ``get_doctor_with_schedule`` costs a fixed number of queries.
    """

    service_name = "doctor_catalog"

    def __init__(self, session: AsyncSession):
        super().__init__(session)

    async def get_doctor(self, doctor_id: int) -> Doctor | None:
        result = await self._execute(select(DoctorModel).where(DoctorModel.id == doctor_id))
        model = result.scalar_one_or_none()
        return self._doctor_to_entity(model) if model else None

    async def get_doctor_with_schedule(self, doctor_id: int) -> Doctor | None:
        result = await self._execute(select(DoctorModel).where(DoctorModel.id == doctor_id))
        model = result.scalar_one_or_none()
        if model is None:
            return None
        return self._doctor_to_entity(model, with_schedule=True)

    async def get_active_contracts(self, doctor_id: int) -> list[Contract]:
        query = (
            select(DoctorContractModel)
            .where(
                and_(
                    DoctorContractModel.doctor_id == doctor_id,
                    DoctorContractModel.is_active.is_(True),
                )
            )
            .order_by(DoctorContractModel.start_date)
        )
        result = await self._execute(query)
        return [self._contract_to_entity(m) for m in result.scalars().all()]

    async def get_schedule_templates(self, doctor_id: int, day_of_week: int) -> list[ScheduleTemplate]:
        query = (
            select(ScheduleTemplateModel)
            .where(
                and_(
                    ScheduleTemplateModel.doctor_id == doctor_id,
                    ScheduleTemplateModel.day_of_week == day_of_week,
                    ScheduleTemplateModel.is_active.is_(True),
                )
            )
            .order_by(ScheduleTemplateModel.start_time)
        )
        result = await self._execute(query)
        return [self._template_to_entity(m) for m in result.scalars().all()]

    async def save_contract(self, contract: Contract) -> Contract:
        """Insert or update a contract."""
        existing = await self._find_contract_model(contract.id)

        async with self._lock:
            model = self._apply_contract(contract, existing)
            await self._commit_contract(contract.doctor_id, model)

        return self._contract_to_entity(model)

    async def renew_contract(self, previous: Contract, renewal: Contract) -> Contract:
        """Write the closed ``previous`` contract and insert ``renewal`` in one transaction."""
        existing = await self._find_contract_model(previous.id)
        if existing is None:
            raise EntityNotFoundException("Contract", previous.id)

        async with self._lock:
            self._apply_contract(previous, existing)
            model = self._apply_contract(renewal, None)
            await self._commit_contract(renewal.doctor_id, model)

        logger.info(f"Contract {previous.id} of doctor {previous.doctor_id} renewed as {model.id}")
        return self._contract_to_entity(model)

    async def _find_contract_model(self, contract_id: int | None) -> DoctorContractModel | None:
        if not contract_id:
            return None
        result = await self._execute(select(DoctorContractModel).where(DoctorContractModel.id == contract_id))
        return result.scalar_one_or_none()

    def _apply_contract(self, contract: Contract, model: DoctorContractModel | None) -> DoctorContractModel:
        if model is None:
            model = DoctorContractModel(doctor_id=contract.doctor_id)
            self.session.add(model)
        model.start_date = contract.start_date  # type: ignore[assignment]
        model.end_date = contract.end_date  # type: ignore[assignment]
        model.contract_type = contract.contract_type  # type: ignore[assignment]
        model.is_active = contract.is_active  # type: ignore[assignment]
        model.notes = contract.notes  # type: ignore[assignment]
        model.termination_reason = contract.termination_reason  # type: ignore[assignment]
        return model

    async def _commit_contract(self, doctor_id: int, model: DoctorContractModel) -> None:
        try:
            await self.session.commit()
            await self.session.refresh(model)
        except SQLAlchemyError as e:
            await self.session.rollback()
            logger.error(f"Error saving contract for doctor {doctor_id}: {e}")
            raise InfrastructureException(self.service_name, "Could not save contract", original_error=e) from e

    async def save_schedule_template(self, template: ScheduleTemplate) -> ScheduleTemplate:
        """Insert or update a working-hours template."""
        model: ScheduleTemplateModel | None = None
        if template.id:
            result = await self._execute(select(ScheduleTemplateModel).where(ScheduleTemplateModel.id == template.id))
            model = result.scalar_one_or_none()

        async with self._lock:
            if model is not None:
                model.day_of_week = template.day_of_week  # type: ignore[assignment]
                model.start_time = template.start_time  # type: ignore[assignment]
                model.end_time = template.end_time  # type: ignore[assignment]
                model.shift_label = template.shift_label  # type: ignore[assignment]
                model.slot_duration_minutes = template.slot_duration_minutes  # type: ignore[assignment]
                model.is_active = template.is_active  # type: ignore[assignment]
            else:
                model = ScheduleTemplateModel(
                    doctor_id=template.doctor_id,
                    day_of_week=template.day_of_week,
                    start_time=template.start_time,
                    end_time=template.end_time,
                    shift_label=template.shift_label,
                    slot_duration_minutes=template.slot_duration_minutes,
                    is_active=template.is_active,
                )
                self.session.add(model)
            try:
                await self.session.commit()
                await self.session.refresh(model)
            except SQLAlchemyError as e:
                await self.session.rollback()
                logger.error(f"Error saving schedule template for doctor {template.doctor_id}: {e}")
                raise InfrastructureException(self.service_name, "Could not save schedule template", original_error=e) from e

        return self._template_to_entity(model)

    # Mapping methods

    def _doctor_to_entity(self, model: DoctorModel, with_schedule: bool = False) -> Doctor:
        doctor = Doctor(
            id=model.id,  # type: ignore[arg-type]
            first_name=model.first_name,  # type: ignore[arg-type]
            last_name=model.last_name,  # type: ignore[arg-type]
            license_number=model.license_number,  # type: ignore[arg-type]
            specialty_id=model.specialty_id,  # type: ignore[arg-type]
            is_active=bool(model.is_active),
        )
        if with_schedule:
            doctor.contracts = [self._contract_to_entity(c) for c in model.contracts]
            doctor.schedule_templates = [self._template_to_entity(t) for t in model.schedule_templates]

        if model.created_at:
            doctor.created_at = model.created_at  # type: ignore[assignment]
        if model.updated_at:
            doctor.updated_at = model.updated_at  # type: ignore[assignment]

        return doctor

    def _contract_to_entity(self, model: DoctorContractModel) -> Contract:
        return Contract(
            id=model.id,  # type: ignore[arg-type]
            doctor_id=model.doctor_id,  # type: ignore[arg-type]
            start_date=model.start_date,  # type: ignore[arg-type]
            end_date=model.end_date,  # type: ignore[arg-type]
            contract_type=model.contract_type or ContractType.PERMANENT,  # type: ignore[arg-type]
            is_active=bool(model.is_active),
            notes=model.notes,  # type: ignore[arg-type]
            termination_reason=model.termination_reason,  # type: ignore[arg-type]
        )

    def _template_to_entity(self, model: ScheduleTemplateModel) -> ScheduleTemplate:
        return ScheduleTemplate(
            id=model.id,  # type: ignore[arg-type]
            doctor_id=model.doctor_id,  # type: ignore[arg-type]
            day_of_week=model.day_of_week,  # type: ignore[arg-type]
            start_time=model.start_time,  # type: ignore[arg-type]
            end_time=model.end_time,  # type: ignore[arg-type]
            shift_label=model.shift_label or ShiftLabel.FULL,  # type: ignore[arg-type]
            slot_duration_minutes=model.slot_duration_minutes or 30,  # type: ignore[arg-type]
            is_active=bool(model.is_active),
        )
