"""
Contract Entity for Scheduling Domain

A doctor may only be booked on dates covered by an active contract.
"""

from dataclasses import dataclass
from datetime import date
from typing import Any

from app.core.domain import Entity, InvalidOperationException, ValidationException

from ..value_objects.appointment_status import ContractType


@dataclass
class Contract(Entity[int]):
    """
    Employment contract of a doctor.

    The validity window is ``[start_date, end_date)``; ``end_date=None`` means
    open-ended.
    """

    doctor_id: int = 0
    start_date: date | None = None
    end_date: date | None = None
    contract_type: ContractType = ContractType.PERMANENT
    is_active: bool = True
    notes: str | None = None
    termination_reason: str | None = None

    def __post_init__(self):
        if self.start_date is None:
            raise ValidationException("Contract start date is required", field="start_date")
        if self.end_date is not None and self.end_date < self.start_date:
            raise ValidationException("Contract end date cannot be before start date", field="end_date")

    def covers(self, on: date) -> bool:
        """True if the contract is active and ``on`` falls in its window."""
        if not self.is_active or self.start_date is None:
            return False
        if on < self.start_date:
            return False
        return self.end_date is None or on < self.end_date

    def overlaps(self, other: "Contract") -> bool:
        """Half-open date overlap, a missing end date counts as unbounded."""
        if self.start_date is None or other.start_date is None:
            return False
        starts_before_other_ends = other.end_date is None or self.start_date < other.end_date
        other_starts_before_end = self.end_date is None or other.start_date < self.end_date
        return starts_before_other_ends and other_starts_before_end

    def has_expired(self, today: date) -> bool:
        """The window closed on or before ``today``."""
        return self.end_date is not None and self.end_date <= today

    def finalize(self, end_date: date, reason: str | None = None, today: date | None = None) -> None:
        """
        Close the contract on ``end_date`` and deactivate it.

        With ``today`` given, a contract whose window already closed is
        rejected.
        """
        if not self.is_active:
            raise InvalidOperationException(operation="finalize", current_state="inactive")
        if today is not None and self.has_expired(today):
            raise InvalidOperationException(
                operation="finalize",
                current_state="expired",
                message=f"Contract already expired on {self.end_date}",
            )
        if self.start_date is not None and end_date < self.start_date:
            raise ValidationException("Contract cannot end before it starts", field="end_date")

        self.end_date = end_date
        self.is_active = False
        self.termination_reason = reason
        self.touch()

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "doctor_id": self.doctor_id,
            "start_date": self.start_date.isoformat() if self.start_date else None,
            "end_date": self.end_date.isoformat() if self.end_date else None,
            "contract_type": self.contract_type.value,
            "is_active": self.is_active,
        }
