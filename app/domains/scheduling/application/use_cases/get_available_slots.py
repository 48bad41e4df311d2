"""
Get Available Slots Use Case
"""

import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Any

from app.domains.scheduling.application.services.slot_generator import SlotGenerator
from app.domains.scheduling.domain.value_objects.time_interval import TimeSlot

logger = logging.getLogger(__name__)


@dataclass
class AvailableSlotsResponse:
    doctor_id: int
    appointment_date: date
    slots: list[TimeSlot] = field(default_factory=list)
    by_shift: dict[str, list[TimeSlot]] | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "doctor_id": self.doctor_id,
            "date": self.appointment_date.isoformat(),
            "slots": [s.to_dict() for s in self.slots],
        }
        if self.by_shift is not None:
            data["by_shift"] = {shift: [s.to_dict() for s in slots] for shift, slots in self.by_shift.items()}
        return data


class GetAvailableSlotsUseCase:
    """Lists a doctor's free slots for a date, optionally grouped by shift."""

    def __init__(self, slot_generator: SlotGenerator):
        self.slot_generator = slot_generator

    async def execute(
        self,
        doctor_id: int,
        appointment_date: date,
        group_by_shift: bool = False,
    ) -> AvailableSlotsResponse:
        slots = await self.slot_generator.available_slots(doctor_id, appointment_date)
        logger.debug(f"Returning {len(slots)} slots for doctor {doctor_id} on {appointment_date}")
        response = AvailableSlotsResponse(doctor_id=doctor_id, appointment_date=appointment_date, slots=slots)
        if group_by_shift:
            response.by_shift = {
                shift.value: grouped for shift, grouped in SlotGenerator.group_by_shift(slots).items()
            }
        return response
