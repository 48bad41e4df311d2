"""
Doctor Aggregate for Scheduling Domain

A doctor owns contracts and weekly working-hours templates. The aggregate
guards the invariants that active contracts never overlap and that
templates on the same weekday never overlap.
"""

from dataclasses import dataclass, field
from datetime import date

from app.core.domain import (
    AggregateRoot,
    BusinessRuleViolationException,
    EntityNotFoundException,
    ValidationException,
)

from ..events import DoctorAvailabilityChanged
from .contract import Contract
from .schedule_template import ScheduleTemplate

RENEWAL_REASON = "Renewal"


@dataclass
class Doctor(AggregateRoot[int]):
    """
    Doctor aggregate root.

    Example:
        ```python
        doctor = Doctor(id=7, first_name="Ana", last_name="Gómez", license_number="MP-1234")
        doctor.add_contract(Contract(doctor_id=7, start_date=date(2024, 1, 1)))
        doctor.add_schedule_template(
            ScheduleTemplate(doctor_id=7, day_of_week=1, start_time=time(8), end_time=time(12))
        )
        ```
    """

    first_name: str = ""
    last_name: str = ""
    license_number: str = ""  # Matrícula
    specialty_id: int | None = None
    is_active: bool = True

    contracts: list[Contract] = field(default_factory=list)
    schedule_templates: list[ScheduleTemplate] = field(default_factory=list)

    @property
    def full_name(self) -> str:
        return f"Dr. {self.first_name} {self.last_name}".strip()

    def can_accept_appointments(self) -> bool:
        return self.is_active

    def deactivate(self) -> None:
        """Soft-deactivate; doctors are never deleted."""
        if self.is_active:
            self.is_active = False
            self.touch()
            self._availability_changed("deactivated")

    def activate(self) -> None:
        if not self.is_active:
            self.is_active = True
            self.touch()
            self._availability_changed("activated")

    # Contracts

    def active_contracts(self) -> list[Contract]:
        return [c for c in self.contracts if c.is_active]

    def has_active_contract_on(self, on: date) -> bool:
        return any(c.covers(on) for c in self.contracts)

    def add_contract(self, contract: Contract) -> None:
        """Attach a contract, rejecting overlap with another active contract."""
        if contract.is_active:
            self._check_contract_overlap(contract)
        contract.doctor_id = self.id or contract.doctor_id
        self.contracts.append(contract)
        self.touch()
        self._availability_changed("contract_added")

    def finalize_contract(
        self,
        contract_id: int,
        end_date: date,
        reason: str | None = None,
        today: date | None = None,
    ) -> Contract:
        contract = self._find_contract(contract_id)
        contract.finalize(end_date, reason, today=today)
        self.touch()
        self._availability_changed("contract_finalized")
        return contract

    def renew_contract(self, contract_id: int, renewal: Contract, today: date | None = None) -> Contract:
        """
        Close ``contract_id`` on the renewal's start date and attach ``renewal``.

        Returns the closed contract. Nothing changes when the renewal is rejected.
        """
        previous = self._find_contract(contract_id)
        if previous.start_date is not None and renewal.start_date < previous.start_date:
            raise ValidationException("Renewal cannot start before the contract it replaces", field="start_date")
        self._check_contract_overlap(renewal, ignore=previous)

        previous.finalize(renewal.start_date, RENEWAL_REASON, today=today)
        renewal.doctor_id = self.id or renewal.doctor_id
        self.contracts.append(renewal)
        self.touch()
        self._availability_changed("contract_renewed")
        return previous

    def _find_contract(self, contract_id: int) -> Contract:
        contract = next((c for c in self.contracts if c.id == contract_id), None)
        if contract is None:
            raise EntityNotFoundException("Contract", contract_id)
        return contract

    def _check_contract_overlap(self, contract: Contract, ignore: Contract | None = None) -> None:
        for existing in self.active_contracts():
            if existing is contract or existing is ignore:
                continue
            if existing.overlaps(contract):
                raise BusinessRuleViolationException(
                    rule="contract_overlap",
                    message="Doctor already has an active contract overlapping that period",
                    details={"doctor_id": self.id, "conflicting_contract_id": existing.id},
                )

    # Working hours

    def templates_for(self, day_of_week: int) -> list[ScheduleTemplate]:
        templates = [t for t in self.schedule_templates if t.is_active and t.day_of_week == day_of_week]
        return sorted(templates, key=lambda t: t.interval.start)

    def add_schedule_template(self, template: ScheduleTemplate) -> None:
        """Attach a template, rejecting overlap with another one on the same weekday."""
        if template.is_active:
            for existing in self.templates_for(template.day_of_week):
                if existing.overlaps(template):
                    raise BusinessRuleViolationException(
                        rule="template_overlap",
                        message=(
                            f"Working hours {template.interval} overlap existing block "
                            f"{existing.interval} on day {template.day_of_week}"
                        ),
                        details={"doctor_id": self.id, "conflicting_template_id": existing.id},
                    )
        template.doctor_id = self.id or template.doctor_id
        self.schedule_templates.append(template)
        self.touch()
        self._availability_changed("template_added")

    def _availability_changed(self, reason: str) -> None:
        if self.id is not None:
            self._record_event(DoctorAvailabilityChanged(doctor_id=self.id, reason=reason))
