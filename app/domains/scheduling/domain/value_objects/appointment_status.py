"""
Scheduling Domain Value Objects

Status enums for appointments, contracts and working-hours shifts.
"""

from app.core.domain import StatusEnum


class AppointmentStatus(StatusEnum):
    """
    Appointment lifecycle states.

    Valid transitions:
    - SCHEDULED -> CONFIRMED, CANCELLED
    - CONFIRMED -> COMPLETED, CANCELLED
    - COMPLETED -> (terminal)
    - CANCELLED -> (terminal)
    """

    SCHEDULED = "scheduled"
    CONFIRMED = "confirmed"
    COMPLETED = "completed"
    CANCELLED = "cancelled"

    def can_transition_to(self, new_status: "AppointmentStatus") -> bool:
        """Check if transition to new status is valid."""
        return new_status.value in _TRANSITIONS.get(self.value, ())

    def is_terminal(self) -> bool:
        """Check if this is a terminal state."""
        return not _TRANSITIONS.get(self.value)

    def is_active(self) -> bool:
        """Active appointments occupy the doctor's time."""
        return self.value in ("scheduled", "confirmed")

    def can_be_cancelled(self) -> bool:
        return self.can_transition_to(AppointmentStatus.CANCELLED)

    @classmethod
    def active_values(cls) -> list["AppointmentStatus"]:
        return [cls.SCHEDULED, cls.CONFIRMED]


_TRANSITIONS: dict[str, tuple[str, ...]] = {
    "scheduled": ("confirmed", "cancelled"),
    "confirmed": ("completed", "cancelled"),
    "completed": (),
    "cancelled": (),
}


class ContractType(StatusEnum):
    """Employment contract modality."""

    TEMPORARY = "temporary"
    PERMANENT = "permanent"
    SUBSTITUTE = "substitute"
    ON_CALL = "on_call"


class ShiftLabel(StatusEnum):
    """Shift a working-hours template belongs to."""

    MORNING = "morning"
    AFTERNOON = "afternoon"
    FULL = "full"
