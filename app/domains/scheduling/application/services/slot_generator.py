"""
Slot Generator

Bookable slots for a doctor on a date: template steps minus occupied time.
"""

import logging
from collections import defaultdict
from datetime import date, time

from app.domains.scheduling.application.ports.booking_store import IBookingStore
from app.domains.scheduling.application.services.conflict_checker import ConflictChecker
from app.domains.scheduling.application.services.working_hours_catalog import WorkingHoursCatalog
from app.domains.scheduling.domain.entities.schedule_template import SUNDAY
from app.domains.scheduling.domain.services.scheduling_policy import SchedulingPolicy
from app.domains.scheduling.domain.value_objects.appointment_status import ShiftLabel
from app.domains.scheduling.domain.value_objects.time_interval import TimeSlot, to_minutes

logger = logging.getLogger(__name__)


class SlotGenerator:
    """
    Generates available appointment slots.

    Each active template for the weekday is stepped by its own
    ``slot_duration_minutes``; a step is kept when it fits inside the template
    and the conflict checker finds no buffered overlap with an active booking.
    Bookings are fetched once per call. Output is in chronological order and
    depends only on the stored state.

    Example:
        ```python
        generator = SlotGenerator(catalog, booking_store, conflict_checker, policy)
        slots = await generator.available_slots(doctor_id=7, appointment_date=date(2024, 6, 10))
        by_shift = SlotGenerator.group_by_shift(slots)
        ```
    """

    def __init__(
        self,
        catalog: WorkingHoursCatalog,
        booking_store: IBookingStore,
        conflict_checker: ConflictChecker,
        policy: SchedulingPolicy | None = None,
    ):
        self._catalog = catalog
        self._store = booking_store
        self._checker = conflict_checker
        self._policy = policy or SchedulingPolicy()

    async def available_slots(
        self,
        doctor_id: int,
        appointment_date: date,
        duration_minutes: int | None = None,
    ) -> list[TimeSlot]:
        """
        List free slots.

        Slots start on each template step and last ``duration_minutes`` when
        given, one step otherwise. Returns an empty list on Sundays, when no
        contract covers the date, or when the doctor has no working hours that
        weekday.
        """
        day_of_week = appointment_date.isoweekday()
        if day_of_week == SUNDAY:
            return []
        if not await self._catalog.has_active_contract(doctor_id, appointment_date):
            return []

        templates = await self._catalog.templates_for(doctor_id, day_of_week)
        if not templates:
            return []

        bookings = await self._store.find_by_doctor_and_date(doctor_id, appointment_date)

        slots: list[TimeSlot] = []
        for template in templates:
            for candidate in template.candidate_slots(duration_minutes):
                if self._checker.check(candidate, bookings) is None:
                    slots.append(
                        TimeSlot(
                            start=candidate.start_time,
                            end=candidate.end_time,
                            shift_label=template.shift_label,
                        )
                    )

        slots.sort(key=lambda s: (s.start, s.end))
        logger.debug(f"Doctor {doctor_id} on {appointment_date}: {len(slots)} free slots")
        return slots

    async def suggest_alternatives(
        self,
        doctor_id: int,
        appointment_date: date,
        requested_start: time,
        duration_minutes: int | None = None,
        window_minutes: int | None = None,
        limit: int | None = None,
    ) -> list[TimeSlot]:
        """
        Free slots of the requested length within ``window_minutes`` of
        ``requested_start``, nearest first.
        """
        window = self._policy.alternatives_window_minutes if window_minutes is None else window_minutes
        max_results = self._policy.max_alternatives if limit is None else limit
        target = to_minutes(requested_start)

        slots = await self.available_slots(doctor_id, appointment_date, duration_minutes)
        nearby = [s for s in slots if abs(to_minutes(s.start) - target) <= window]
        nearby.sort(key=lambda s: (abs(to_minutes(s.start) - target), s.start))
        return nearby[:max_results]

    @staticmethod
    def group_by_shift(slots: list[TimeSlot]) -> dict[ShiftLabel, list[TimeSlot]]:
        """Group slots by shift label, keeping chronological order in each group."""
        grouped: dict[ShiftLabel, list[TimeSlot]] = defaultdict(list)
        for slot in slots:
            grouped[slot.shift_label].append(slot)
        return dict(grouped)
