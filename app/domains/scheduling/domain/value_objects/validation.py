"""
Validation request and result value objects.

Business rule failures are returned as ``Violation`` entries, never raised.
"""

from dataclasses import dataclass, field
from datetime import date, time
from typing import Any

from app.core.domain import StatusEnum


class ViolationCode(StatusEnum):
    """Machine-readable reason a proposed appointment is rejected."""

    DATE_IN_PAST = "date_in_past"
    DATE_TOO_FAR = "date_too_far"
    SUNDAY = "sunday"
    INVALID_DURATION = "invalid_duration"
    DOCTOR_NOT_AVAILABLE = "doctor_not_available"
    NO_ACTIVE_CONTRACT = "no_active_contract"
    OUTSIDE_SCHEDULE = "outside_schedule"
    OVERLAP = "overlap"
    PATIENT_NOT_FOUND = "patient_not_found"
    PATIENT_DAILY_LIMIT = "patient_daily_limit"
    PATIENT_MONTHLY_LIMIT = "patient_monthly_limit"

    def is_date_rule(self) -> bool:
        return self in (ViolationCode.DATE_IN_PAST, ViolationCode.DATE_TOO_FAR, ViolationCode.SUNDAY)

    def is_frequency_rule(self) -> bool:
        return self in (ViolationCode.PATIENT_DAILY_LIMIT, ViolationCode.PATIENT_MONTHLY_LIMIT)


@dataclass(frozen=True)
class Violation:
    code: ViolationCode
    message: str

    def to_dict(self) -> dict[str, str]:
        return {"code": self.code.value, "message": self.message}


@dataclass(frozen=True)
class AppointmentRequest:
    """A proposed appointment: who, with whom, when."""

    doctor_id: int
    patient_id: int
    date: date
    start_time: time
    end_time: time


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of validating an ``AppointmentRequest``; valid iff no violations."""

    violations: tuple[Violation, ...] = field(default_factory=tuple)

    @property
    def valid(self) -> bool:
        return not self.violations

    @property
    def messages(self) -> list[str]:
        return [v.message for v in self.violations]

    @property
    def codes(self) -> list[ViolationCode]:
        return [v.code for v in self.violations]

    def has(self, code: ViolationCode) -> bool:
        return code in self.codes

    def to_dict(self) -> dict[str, Any]:
        return {
            "valid": self.valid,
            "violations": [v.to_dict() for v in self.violations],
        }

    @classmethod
    def ok(cls) -> "ValidationResult":
        return cls()
