"""
Unit tests for SlotGenerator.

Covers template stepping, removal of buffered occupied time, empty results
for non-working days and nearest-first alternatives.
"""

from datetime import date, time

import pytest

from app.domains.scheduling.application.services import SlotGenerator
from app.domains.scheduling.domain.services.scheduling_policy import SchedulingPolicy
from app.domains.scheduling.domain.value_objects import AppointmentRequest, ShiftLabel

from tests.utils import (
    DOCTOR_ID,
    MONDAY,
    SUNDAY_DATE,
    AppointmentBuilder,
    DoctorBuilder,
    assert_slots_sorted_and_disjoint,
    create_scheduling_services,
    slot_starts,
)


@pytest.mark.unit
@pytest.mark.asyncio
async def test_free_day_yields_every_template_step(services):
    """Test that an empty Monday yields eight 30-minute slots from 08:00 to 11:30."""
    # Act
    slots = await services["generator"].available_slots(DOCTOR_ID, MONDAY)

    # Assert
    assert slot_starts(slots) == ["08:00", "08:30", "09:00", "09:30", "10:00", "10:30", "11:00", "11:30"]
    assert all(s.duration_minutes == 30 for s in slots)
    assert all(s.shift_label == ShiftLabel.MORNING for s in slots)
    assert_slots_sorted_and_disjoint(slots)


@pytest.mark.unit
@pytest.mark.asyncio
async def test_booking_removes_buffered_neighbours(standard_doctor):
    """Test that a 10:00-10:30 booking also blocks 09:30 and 10:30 under the 5-minute buffer."""
    # Arrange
    services = create_scheduling_services(
        [standard_doctor],
        appointments=[AppointmentBuilder().at(time(10, 0), time(10, 30)).build()],
    )

    # Act
    slots = await services["generator"].available_slots(DOCTOR_ID, MONDAY)

    # Assert
    assert slot_starts(slots) == ["08:00", "08:30", "09:00", "11:00", "11:30"]


@pytest.mark.unit
@pytest.mark.asyncio
async def test_booking_removes_only_its_slot_without_buffer(standard_doctor):
    """Test that with buffer zero only the booked slot disappears."""
    services = create_scheduling_services(
        [standard_doctor],
        appointments=[AppointmentBuilder().at(time(10, 0), time(10, 30)).build()],
        policy=SchedulingPolicy(buffer_minutes=0),
    )

    slots = await services["generator"].available_slots(DOCTOR_ID, MONDAY)

    assert "10:00" not in slot_starts(slots)
    assert len(slots) == 7


@pytest.mark.unit
@pytest.mark.asyncio
async def test_cancelled_booking_frees_the_slot(standard_doctor):
    """Test that cancelled appointments do not occupy time."""
    services = create_scheduling_services(
        [standard_doctor],
        appointments=[AppointmentBuilder().at(time(10, 0), time(10, 30)).cancelled().build()],
    )

    slots = await services["generator"].available_slots(DOCTOR_ID, MONDAY)

    assert len(slots) == 8


@pytest.mark.unit
@pytest.mark.asyncio
async def test_sunday_has_no_slots(services):
    """Test that Sundays never produce slots."""
    assert await services["generator"].available_slots(DOCTOR_ID, SUNDAY_DATE) == []


@pytest.mark.unit
@pytest.mark.asyncio
async def test_day_without_template_has_no_slots(services):
    """Test that a weekday without working hours yields nothing."""
    tuesday = date(2024, 6, 11)
    assert await services["generator"].available_slots(DOCTOR_ID, tuesday) == []


@pytest.mark.unit
@pytest.mark.asyncio
async def test_no_contract_no_slots():
    """Test that a doctor without a contract covering the date has no slots."""
    # Arrange
    doctor = (
        DoctorBuilder()
        .with_contract(start_date=date(2024, 1, 1), end_date=date(2024, 6, 10))
        .with_template()
        .build()
    )
    services = create_scheduling_services([doctor])

    # Act
    on_end_date = await services["generator"].available_slots(DOCTOR_ID, MONDAY)
    week_before = await services["generator"].available_slots(DOCTOR_ID, date(2024, 6, 3))

    # Assert
    assert on_end_date == []
    assert len(week_before) == 8


@pytest.mark.unit
@pytest.mark.asyncio
async def test_inactive_doctor_has_no_slots():
    """Test that deactivated doctors expose no availability."""
    services = create_scheduling_services([DoctorBuilder().standard().inactive().build()])

    assert await services["generator"].available_slots(DOCTOR_ID, MONDAY) == []


@pytest.mark.unit
@pytest.mark.asyncio
async def test_unknown_doctor_has_no_slots(services):
    """Test that an unknown doctor yields an empty list rather than an error."""
    assert await services["generator"].available_slots(999, MONDAY) == []


@pytest.mark.unit
@pytest.mark.asyncio
async def test_each_template_uses_its_own_step():
    """Test that morning and afternoon templates are stepped independently and merged in order."""
    # Arrange
    doctor = (
        DoctorBuilder()
        .with_contract()
        .with_template(start_time=time(14, 0), end_time=time(15, 0), slot_duration_minutes=20,
                       shift_label=ShiftLabel.AFTERNOON)
        .with_template(start_time=time(8, 0), end_time=time(9, 0), slot_duration_minutes=30)
        .build()
    )
    services = create_scheduling_services([doctor])

    # Act
    slots = await services["generator"].available_slots(DOCTOR_ID, MONDAY)

    # Assert
    assert slot_starts(slots) == ["08:00", "08:30", "14:00", "14:20", "14:40"]
    assert_slots_sorted_and_disjoint(slots)

    grouped = SlotGenerator.group_by_shift(slots)
    assert slot_starts(grouped[ShiftLabel.MORNING]) == ["08:00", "08:30"]
    assert slot_starts(grouped[ShiftLabel.AFTERNOON]) == ["14:00", "14:20", "14:40"]


@pytest.mark.unit
@pytest.mark.asyncio
async def test_output_is_deterministic(standard_doctor):
    """Test that repeated calls over the same state return identical slots."""
    services = create_scheduling_services(
        [standard_doctor],
        appointments=[AppointmentBuilder().at(time(9, 0), time(9, 30)).build()],
    )
    generator = services["generator"]

    first = await generator.available_slots(DOCTOR_ID, MONDAY)
    second = await generator.available_slots(DOCTOR_ID, MONDAY)

    assert first == second


@pytest.mark.unit
@pytest.mark.asyncio
async def test_alternatives_are_nearest_first(standard_doctor):
    """Test that alternatives are ordered by distance to the requested start."""
    # Arrange
    services = create_scheduling_services(
        [standard_doctor],
        appointments=[AppointmentBuilder().at(time(10, 0), time(10, 30)).build()],
    )

    # Act
    alternatives = await services["generator"].suggest_alternatives(DOCTOR_ID, MONDAY, time(10, 0))

    # Assert
    assert slot_starts(alternatives) == ["09:00", "11:00", "08:30", "11:30", "08:00"]


@pytest.mark.unit
@pytest.mark.asyncio
async def test_alternatives_respect_window_and_limit(standard_doctor):
    """Test that alternatives stay inside the window and are capped."""
    services = create_scheduling_services(
        [standard_doctor],
        appointments=[AppointmentBuilder().at(time(10, 0), time(10, 30)).build()],
    )
    generator = services["generator"]

    limited = await generator.suggest_alternatives(DOCTOR_ID, MONDAY, time(10, 0), limit=2)
    narrow = await generator.suggest_alternatives(DOCTOR_ID, MONDAY, time(10, 0), window_minutes=60)

    assert slot_starts(limited) == ["09:00", "11:00"]
    assert slot_starts(narrow) == ["09:00", "11:00"]


@pytest.mark.unit
@pytest.mark.asyncio
async def test_every_generated_slot_validates(standard_doctor):
    """Test that each generated slot passes the appointment validator."""
    # Arrange
    services = create_scheduling_services(
        [standard_doctor],
        appointments=[AppointmentBuilder().for_patient(77).at(time(10, 0), time(10, 30)).build()],
    )

    # Act
    slots = await services["generator"].available_slots(DOCTOR_ID, MONDAY)
    results = [
        await services["validator"].validate(
            AppointmentRequest(doctor_id=DOCTOR_ID, patient_id=42, date=MONDAY, start_time=s.start, end_time=s.end)
        )
        for s in slots
    ]

    # Assert
    assert slots
    assert all(r.valid for r in results), [r.messages for r in results]


@pytest.mark.unit
@pytest.mark.asyncio
async def test_longer_slots_step_by_template_step(standard_doctor):
    """Test that a requested length keeps the template step and the template end."""
    # Arrange
    services = create_scheduling_services(
        [standard_doctor],
        appointments=[AppointmentBuilder().at(time(10, 0), time(10, 30)).build()],
    )

    # Act
    slots = await services["generator"].available_slots(DOCTOR_ID, MONDAY, duration_minutes=60)

    # Assert
    assert slot_starts(slots) == ["08:00", "08:30", "11:00"]
    assert all(s.duration_minutes == 60 for s in slots)


@pytest.mark.unit
@pytest.mark.asyncio
async def test_alternatives_hold_the_requested_length(standard_doctor):
    """Test that every alternative for a one-hour request validates as one hour."""
    # Arrange
    services = create_scheduling_services(
        [standard_doctor],
        appointments=[AppointmentBuilder().for_patient(77).at(time(10, 0), time(10, 30)).build()],
    )

    # Act
    alternatives = await services["generator"].suggest_alternatives(
        DOCTOR_ID, MONDAY, time(10, 0), duration_minutes=60
    )
    failures = []
    for slot in alternatives:
        result = await services["validator"].validate(
            AppointmentRequest(
                doctor_id=DOCTOR_ID,
                patient_id=42,
                date=MONDAY,
                start_time=slot.start,
                end_time=slot.end,
            )
        )
        if not result.valid:
            failures.append((slot.start, [v.code for v in result.violations]))

    # Assert
    assert slot_starts(alternatives) == ["11:00", "08:30", "08:00"]
    assert failures == []
