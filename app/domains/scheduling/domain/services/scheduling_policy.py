"""
Scheduling policy: the tunable constants of slot allocation and validation.
"""

import calendar
from dataclasses import dataclass
from datetime import date
from typing import Any


@dataclass(frozen=True)
class SchedulingPolicy:
    """
    Immutable set of scheduling limits.

    Every booking path (create, reschedule) validates against the same policy
    instance, built once from settings.
    """

    buffer_minutes: int = 5
    min_duration_minutes: int = 15
    max_duration_minutes: int = 180
    default_duration_minutes: int = 30
    max_daily_per_patient: int = 3
    max_monthly_per_patient: int = 10
    enforce_patient_limits: bool = True
    booking_horizon_months: int = 6
    alternatives_window_minutes: int = 120
    max_alternatives: int = 5

    @classmethod
    def from_settings(cls, settings: Any) -> "SchedulingPolicy":
        return cls(
            buffer_minutes=settings.APPOINTMENT_BUFFER_MINUTES,
            min_duration_minutes=settings.APPOINTMENT_MIN_DURATION_MINUTES,
            max_duration_minutes=settings.APPOINTMENT_MAX_DURATION_MINUTES,
            default_duration_minutes=settings.DEFAULT_APPOINTMENT_DURATION_MINUTES,
            max_daily_per_patient=settings.MAX_DAILY_APPOINTMENTS_PER_PATIENT,
            max_monthly_per_patient=settings.MAX_MONTHLY_APPOINTMENTS_PER_PATIENT,
            enforce_patient_limits=settings.ENFORCE_PATIENT_LIMITS,
            booking_horizon_months=settings.BOOKING_HORIZON_MONTHS,
            alternatives_window_minutes=settings.ALTERNATIVE_SLOTS_WINDOW_MINUTES,
            max_alternatives=settings.MAX_ALTERNATIVE_SLOTS,
        )

    def horizon_end(self, today: date) -> date:
        """Last bookable date: ``today`` plus the horizon in calendar months."""
        return add_months(today, self.booking_horizon_months)


def add_months(value: date, months: int) -> date:
    """Add calendar months, clamping the day to the target month's length."""
    month_index = value.month - 1 + months
    year = value.year + month_index // 12
    month = month_index % 12 + 1
    day = min(value.day, calendar.monthrange(year, month)[1])
    return date(year, month, day)


def month_bounds(value: date) -> tuple[date, date]:
    """First and last day of ``value``'s calendar month."""
    last_day = calendar.monthrange(value.year, value.month)[1]
    return value.replace(day=1), value.replace(day=last_day)
