"""
Time interval value objects.

All overlap decisions in scheduling go through ``TimeInterval.overlaps``,
which treats intervals as half-open ``[start, end)`` in minutes since
midnight. Buffered intervals may extend below 0 or past 24:00.
"""

from dataclasses import dataclass
from datetime import time
from typing import Any

from app.core.domain import ValidationException, ValueObject

from .appointment_status import ShiftLabel

MINUTES_PER_DAY = 24 * 60


def to_minutes(value: time) -> int:
    """Minutes since midnight, seconds are truncated."""
    return value.hour * 60 + value.minute


def from_minutes(minutes: int) -> time:
    """Inverse of ``to_minutes``; values past the end of day clamp to 23:59:59."""
    if minutes < 0:
        raise ValueError(f"Negative minute offset: {minutes}")
    if minutes >= MINUTES_PER_DAY:
        return time(23, 59, 59)
    return time(minutes // 60, minutes % 60)


@dataclass(frozen=True)
class TimeInterval(ValueObject):
    """
    Half-open interval of minutes within a day.

    Example:
        ```python
        a = TimeInterval.from_times(time(10, 0), time(10, 30))
        b = TimeInterval.from_times(time(10, 30), time(11, 0))
        a.overlaps(b)               # False, touching edges
        a.expanded(5).overlaps(b)   # True
        ```
    """

    start: int
    end: int

    def _validate(self) -> None:
        if self.end <= self.start:
            raise ValidationException(
                f"Interval end ({self.end}) must be after start ({self.start})",
                field="end_time",
            )

    @classmethod
    def from_times(cls, start: time, end: time) -> "TimeInterval":
        return cls(start=to_minutes(start), end=to_minutes(end))

    @classmethod
    def from_start(cls, start: time, duration_minutes: int) -> "TimeInterval":
        begin = to_minutes(start)
        return cls(start=begin, end=begin + duration_minutes)

    @property
    def duration_minutes(self) -> int:
        return self.end - self.start

    @property
    def start_time(self) -> time:
        return from_minutes(self.start)

    @property
    def end_time(self) -> time:
        return from_minutes(self.end)

    def overlaps(self, other: "TimeInterval") -> bool:
        """Half-open intersection: ``a < d and c < b``."""
        return self.start < other.end and other.start < self.end

    def contains(self, other: "TimeInterval") -> bool:
        return self.start <= other.start and other.end <= self.end

    def expanded(self, minutes: int) -> "TimeInterval":
        """Widen the interval by ``minutes`` on both sides."""
        if minutes == 0:
            return self
        return TimeInterval(start=self.start - minutes, end=self.end + minutes)

    def __str__(self) -> str:
        return f"{self.start_time.strftime('%H:%M')} - {self.end_time.strftime('%H:%M')}"


@dataclass(frozen=True)
class TimeSlot(ValueObject):
    """A bookable slot produced by the slot generator."""

    start: time
    end: time
    shift_label: ShiftLabel = ShiftLabel.FULL

    def _validate(self) -> None:
        if self.start >= self.end:
            raise ValidationException("Slot start must be before end", field="start")

    @property
    def interval(self) -> TimeInterval:
        return TimeInterval.from_times(self.start, self.end)

    @property
    def duration_minutes(self) -> int:
        return self.interval.duration_minutes

    def to_dict(self) -> dict[str, Any]:
        return {
            "start": self.start.strftime("%H:%M"),
            "end": self.end.strftime("%H:%M"),
            "shift": self.shift_label.value,
            "duration_minutes": self.duration_minutes,
        }

    def __str__(self) -> str:
        return f"{self.start.strftime('%H:%M')} - {self.end.strftime('%H:%M')}"
