"""
Schedule Template Entity

Recurring weekly working hours of a doctor for one day of the week.
"""

from dataclasses import dataclass
from datetime import time
from typing import Any, Iterator

from app.core.domain import Entity, ValidationException

from ..value_objects.appointment_status import ShiftLabel
from ..value_objects.time_interval import TimeInterval

SUNDAY = 7
MIN_SLOT_MINUTES = 15
MAX_SLOT_MINUTES = 120
DEFAULT_SLOT_MINUTES = 30


@dataclass
class ScheduleTemplate(Entity[int]):
    """
    Weekly working-hours block.

    ``day_of_week`` follows ``date.isoweekday()``: 1=Monday .. 6=Saturday.
    Sunday templates are rejected.

    Example:
        ```python
        template = ScheduleTemplate(
            doctor_id=7,
            day_of_week=1,
            start_time=time(8, 0),
            end_time=time(12, 0),
            shift_label=ShiftLabel.MORNING,
        )
        [str(i) for i in template.candidate_slots()]  # 08:00 - 08:30 ... 11:30 - 12:00
        ```
    """

    doctor_id: int = 0
    day_of_week: int = 1
    start_time: time | None = None
    end_time: time | None = None
    shift_label: ShiftLabel = ShiftLabel.FULL
    slot_duration_minutes: int = DEFAULT_SLOT_MINUTES
    is_active: bool = True

    def __post_init__(self):
        if self.day_of_week == SUNDAY:
            raise ValidationException("Sunday is not a working day", field="day_of_week")
        if not 1 <= self.day_of_week <= 6:
            raise ValidationException(
                f"day_of_week must be between 1 and 6, got {self.day_of_week}",
                field="day_of_week",
            )
        if self.start_time is None or self.end_time is None:
            raise ValidationException("Template start and end times are required", field="start_time")
        if self.start_time >= self.end_time:
            raise ValidationException("Template start time must be before end time", field="end_time")
        if not MIN_SLOT_MINUTES <= self.slot_duration_minutes <= MAX_SLOT_MINUTES:
            raise ValidationException(
                f"Slot duration must be between {MIN_SLOT_MINUTES} and {MAX_SLOT_MINUTES} minutes",
                field="slot_duration_minutes",
            )

    @property
    def interval(self) -> TimeInterval:
        return TimeInterval.from_times(self.start_time, self.end_time)

    def contains(self, interval: TimeInterval) -> bool:
        """Fully contains ``interval``."""
        return self.interval.contains(interval)

    def overlaps(self, other: "ScheduleTemplate") -> bool:
        return self.day_of_week == other.day_of_week and self.interval.overlaps(other.interval)

    def candidate_slots(self, duration_minutes: int | None = None) -> Iterator[TimeInterval]:
        """
        Slots that fit entirely, starting every ``slot_duration_minutes``.

        Each slot lasts ``duration_minutes`` when given, one step otherwise.
        """
        block = self.interval
        step = self.slot_duration_minutes
        length = duration_minutes or step
        start = block.start
        while start + length <= block.end:
            yield TimeInterval(start=start, end=start + length)
            start += step

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "doctor_id": self.doctor_id,
            "day_of_week": self.day_of_week,
            "start_time": self.start_time.strftime("%H:%M") if self.start_time else None,
            "end_time": self.end_time.strftime("%H:%M") if self.end_time else None,
            "shift": self.shift_label.value,
            "slot_duration_minutes": self.slot_duration_minutes,
            "is_active": self.is_active,
        }
