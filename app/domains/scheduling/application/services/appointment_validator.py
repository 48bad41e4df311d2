"""
Appointment Validator

Runs every scheduling rule against a proposed appointment and reports all
failures at once.
"""

import asyncio
import logging
from datetime import date
from typing import Callable

from app.domains.scheduling.application.ports.booking_store import IBookingStore
from app.domains.scheduling.application.ports.patient_directory import IPatientDirectory
from app.domains.scheduling.application.services.conflict_checker import ConflictChecker
from app.domains.scheduling.application.services.working_hours_catalog import WorkingHoursCatalog
from app.domains.scheduling.domain.entities.schedule_template import SUNDAY
from app.domains.scheduling.domain.services.scheduling_policy import SchedulingPolicy, month_bounds
from app.domains.scheduling.domain.value_objects.time_interval import TimeInterval, to_minutes
from app.domains.scheduling.domain.value_objects.validation import (
    AppointmentRequest,
    ValidationResult,
    Violation,
    ViolationCode,
)

logger = logging.getLogger(__name__)


class AppointmentValidator:
    """
    Aggregates the scheduling rules into a ``ValidationResult``.

    Checks, in reporting order:
    1. Date sanity: not in the past, within the booking horizon, not Sunday
    2. Duration within the policy bounds
    3. Doctor available and covered by an active contract on the date
    4. Interval fully inside one of the weekday's templates
    5. No buffered overlap with the doctor's active bookings
    6. Patient daily and monthly limits

    Checks 3 to 6 read from the stores concurrently. Rule failures become
    violations; store failures propagate as exceptions.

    Example:
        ```python
        result = await validator.validate(
            AppointmentRequest(doctor_id=7, patient_id=42, date=date(2024, 6, 10),
                               start_time=time(10, 0), end_time=time(10, 30)),
        )
        if not result.valid:
            print(result.messages)
        ```
    """

    def __init__(
        self,
        catalog: WorkingHoursCatalog,
        booking_store: IBookingStore,
        conflict_checker: ConflictChecker,
        policy: SchedulingPolicy | None = None,
        patient_directory: IPatientDirectory | None = None,
        clock: Callable[[], date] = date.today,
    ):
        self._catalog = catalog
        self._store = booking_store
        self._checker = conflict_checker
        self._policy = policy or SchedulingPolicy()
        self._patients = patient_directory
        self._clock = clock

    async def validate(
        self,
        request: AppointmentRequest,
        exclude_appointment_id: int | None = None,
    ) -> ValidationResult:
        """
        Validate a proposed appointment.

        Args:
            request: Doctor, patient, date and time range
            exclude_appointment_id: Appointment being edited; ignored by the
                overlap check and by the patient counts

        Returns:
            ValidationResult, valid iff no rule failed
        """
        violations: list[Violation] = []
        violations.extend(self._check_date(request.date))

        interval, duration_violations = self._check_duration(request)
        violations.extend(duration_violations)

        checks = [
            self._check_doctor_and_contract(request),
            self._check_schedule(request, interval),
            self._check_overlap(request, interval, exclude_appointment_id),
            self._check_patient(request, exclude_appointment_id),
        ]
        for found in await asyncio.gather(*checks):
            violations.extend(found)

        result = ValidationResult(violations=tuple(violations))
        if not result.valid:
            logger.info(
                f"Appointment request rejected for doctor {request.doctor_id} "
                f"on {request.date}: {[v.code.value for v in violations]}"
            )
        return result

    # Synchronous rules

    def _check_date(self, day: date) -> list[Violation]:
        today = self._clock()
        found: list[Violation] = []
        if day < today:
            found.append(Violation(ViolationCode.DATE_IN_PAST, "Appointment date cannot be before today"))
        if day > self._policy.horizon_end(today):
            found.append(
                Violation(
                    ViolationCode.DATE_TOO_FAR,
                    f"Appointments cannot be booked more than {self._policy.booking_horizon_months} months ahead",
                )
            )
        if day.isoweekday() == SUNDAY:
            found.append(Violation(ViolationCode.SUNDAY, "No appointments are scheduled on Sundays"))
        return found

    def _check_duration(self, request: AppointmentRequest) -> tuple[TimeInterval | None, list[Violation]]:
        start = to_minutes(request.start_time)
        end = to_minutes(request.end_time)
        if end <= start:
            return None, [Violation(ViolationCode.INVALID_DURATION, "End time must be after start time")]

        interval = TimeInterval(start=start, end=end)
        low, high = self._policy.min_duration_minutes, self._policy.max_duration_minutes
        if not low <= interval.duration_minutes <= high:
            return interval, [
                Violation(
                    ViolationCode.INVALID_DURATION,
                    f"Duration must be between {low} and {high} minutes",
                )
            ]
        return interval, []

    # Store-backed rules

    async def _check_doctor_and_contract(self, request: AppointmentRequest) -> list[Violation]:
        if not await self._catalog.is_doctor_available(request.doctor_id):
            return [Violation(ViolationCode.DOCTOR_NOT_AVAILABLE, "Doctor is not available for appointments")]
        if not await self._catalog.has_active_contract(request.doctor_id, request.date):
            return [Violation(ViolationCode.NO_ACTIVE_CONTRACT, "Doctor has no active contract for that date")]
        return []

    async def _check_schedule(self, request: AppointmentRequest, interval: TimeInterval | None) -> list[Violation]:
        if interval is None:
            return []
        templates = await self._catalog.templates_for(request.doctor_id, request.date.isoweekday())
        if any(template.contains(interval) for template in templates):
            return []
        return [
            Violation(
                ViolationCode.OUTSIDE_SCHEDULE,
                "Requested time is not within the doctor's working hours",
            )
        ]

    async def _check_overlap(
        self,
        request: AppointmentRequest,
        interval: TimeInterval | None,
        exclude_appointment_id: int | None,
    ) -> list[Violation]:
        if interval is None:
            return []
        bookings = await self._store.find_by_doctor_and_date(request.doctor_id, request.date)
        conflict = self._checker.check(interval, bookings, exclude_appointment_id=exclude_appointment_id)
        if conflict is None:
            return []
        return [
            Violation(
                ViolationCode.OVERLAP,
                "Doctor already has an appointment at that time "
                f"(including {self._checker.default_buffer_minutes}-minute buffer)",
            )
        ]

    async def _check_patient(self, request: AppointmentRequest, exclude_appointment_id: int | None) -> list[Violation]:
        found: list[Violation] = []
        if self._patients is not None and not await self._patients.exists(request.patient_id):
            found.append(Violation(ViolationCode.PATIENT_NOT_FOUND, "Patient does not exist"))
            return found
        if not self._policy.enforce_patient_limits:
            return found

        first_day, last_day = month_bounds(request.date)
        booked = await self._store.find_by_patient_in_range(request.patient_id, first_day, last_day)
        booked = [
            a for a in booked
            if a.is_active and (exclude_appointment_id is None or a.id != exclude_appointment_id)
        ]

        same_day = sum(1 for a in booked if a.appointment_date == request.date)
        if same_day >= self._policy.max_daily_per_patient:
            found.append(
                Violation(
                    ViolationCode.PATIENT_DAILY_LIMIT,
                    f"Patient already has {self._policy.max_daily_per_patient} appointments on this day",
                )
            )
        if len(booked) >= self._policy.max_monthly_per_patient:
            found.append(
                Violation(
                    ViolationCode.PATIENT_MONTHLY_LIMIT,
                    f"Patient already has {self._policy.max_monthly_per_patient} appointments this month",
                )
            )
        return found
