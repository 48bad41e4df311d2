"""
Unit tests for AppointmentValidator.

Each rule is exercised in isolation against the standard doctor
(Monday 08:00-12:00, open contract from 2024-01-01) with the clock fixed at
2024-06-01.
"""

from datetime import date, time, timedelta

import pytest

from app.core.domain import InfrastructureException
from app.domains.scheduling.domain.services.scheduling_policy import SchedulingPolicy
from app.domains.scheduling.domain.value_objects import AppointmentRequest, ViolationCode

from tests.utils import (
    DOCTOR_ID,
    MONDAY,
    PATIENT_ID,
    SUNDAY_DATE,
    AppointmentBuilder,
    DoctorBuilder,
    FakePatientDirectory,
    assert_valid,
    assert_violations,
    create_scheduling_services,
)


def _request(
    on: date = MONDAY,
    start: time = time(10, 0),
    end: time = time(10, 30),
    doctor_id: int = DOCTOR_ID,
    patient_id: int = PATIENT_ID,
) -> AppointmentRequest:
    return AppointmentRequest(doctor_id=doctor_id, patient_id=patient_id, date=on, start_time=start, end_time=end)


def _other_doctor_booking(on: date, start: time):
    return AppointmentBuilder().for_doctor(8).on(on).at(start, time(start.hour, 30)).build()


# ============================================================================
# Happy path
# ============================================================================


@pytest.mark.unit
@pytest.mark.asyncio
async def test_valid_request(services):
    """Test that a free slot inside working hours is accepted."""
    result = await services["validator"].validate(_request())

    assert_valid(result)


@pytest.mark.unit
@pytest.mark.asyncio
async def test_validation_is_deterministic(services):
    """Test that validating twice over the same state gives the same result."""
    request = _request(start=time(11, 45), end=time(12, 15))

    first = await services["validator"].validate(request)
    second = await services["validator"].validate(request)

    assert first == second


# ============================================================================
# Date rules
# ============================================================================


@pytest.mark.unit
@pytest.mark.asyncio
async def test_sunday_rejected(services):
    """Test that Sunday requests are rejected and fall outside every template."""
    result = await services["validator"].validate(_request(on=SUNDAY_DATE))

    assert_violations(result, ViolationCode.SUNDAY, ViolationCode.OUTSIDE_SCHEDULE)
    assert result.messages[0] == "No appointments are scheduled on Sundays"


@pytest.mark.unit
@pytest.mark.asyncio
async def test_past_date_rejected(services):
    """Test that dates before today are rejected."""
    result = await services["validator"].validate(_request(on=date(2024, 5, 27)))

    assert_violations(result, ViolationCode.DATE_IN_PAST)


@pytest.mark.unit
@pytest.mark.asyncio
async def test_today_is_bookable(standard_doctor):
    """Test that the current date itself is not considered past."""
    services = create_scheduling_services([standard_doctor], today=MONDAY)

    result = await services["validator"].validate(_request())

    assert_valid(result)


@pytest.mark.unit
@pytest.mark.asyncio
async def test_beyond_horizon_rejected(services):
    """Test that dates after today plus six months are rejected."""
    result = await services["validator"].validate(_request(on=date(2024, 12, 2)))

    assert_violations(result, ViolationCode.DATE_TOO_FAR)


@pytest.mark.unit
@pytest.mark.asyncio
async def test_horizon_last_day_is_bookable(standard_doctor):
    """Test that the horizon end date itself is accepted."""
    services = create_scheduling_services([standard_doctor], today=date(2024, 6, 2))

    result = await services["validator"].validate(_request(on=date(2024, 12, 2)))

    assert_valid(result)


@pytest.mark.unit
@pytest.mark.asyncio
async def test_all_failures_reported_in_order(services):
    """Test that a past Sunday reports every failing rule, date rules first."""
    result = await services["validator"].validate(_request(on=date(2024, 5, 26)))

    assert_violations(
        result,
        ViolationCode.DATE_IN_PAST,
        ViolationCode.SUNDAY,
        ViolationCode.OUTSIDE_SCHEDULE,
    )


# ============================================================================
# Duration and working hours
# ============================================================================


@pytest.mark.unit
@pytest.mark.asyncio
@pytest.mark.parametrize(
    "start,end",
    [
        (time(10, 0), time(10, 10)),
        (time(8, 0), time(11, 30)),
    ],
)
async def test_duration_out_of_bounds(services, start, end):
    """Test that durations below 15 or above 180 minutes are rejected."""
    result = await services["validator"].validate(_request(start=start, end=end))

    assert_violations(result, ViolationCode.INVALID_DURATION)


@pytest.mark.unit
@pytest.mark.asyncio
async def test_inverted_range_reports_only_duration(services):
    """Test that an end before the start skips the schedule and overlap checks."""
    result = await services["validator"].validate(_request(start=time(10, 30), end=time(10, 0)))

    assert_violations(result, ViolationCode.INVALID_DURATION)
    assert result.messages == ["End time must be after start time"]


@pytest.mark.unit
@pytest.mark.asyncio
async def test_outside_working_hours(services):
    """Test that a range crossing the end of the template is rejected."""
    result = await services["validator"].validate(_request(start=time(11, 45), end=time(12, 15)))

    assert_violations(result, ViolationCode.OUTSIDE_SCHEDULE)


@pytest.mark.unit
@pytest.mark.asyncio
async def test_template_edges_are_inside(services):
    """Test that ranges touching the template bounds are accepted."""
    validator = services["validator"]

    assert_valid(await validator.validate(_request(start=time(8, 0), end=time(8, 30))))
    assert_valid(await validator.validate(_request(start=time(11, 30), end=time(12, 0))))


# ============================================================================
# Doctor and contract
# ============================================================================


@pytest.mark.unit
@pytest.mark.asyncio
async def test_no_active_contract():
    """Test that the contract end date is exclusive."""
    doctor = DoctorBuilder().with_contract(end_date=MONDAY).with_template().build()
    services = create_scheduling_services([doctor])

    result = await services["validator"].validate(_request())

    assert_violations(result, ViolationCode.NO_ACTIVE_CONTRACT)


@pytest.mark.unit
@pytest.mark.asyncio
async def test_unknown_doctor(services):
    """Test that an unknown doctor is reported as not available."""
    result = await services["validator"].validate(_request(doctor_id=999))

    assert_violations(result, ViolationCode.DOCTOR_NOT_AVAILABLE, ViolationCode.OUTSIDE_SCHEDULE)


@pytest.mark.unit
@pytest.mark.asyncio
async def test_inactive_doctor():
    """Test that a deactivated doctor cannot be booked."""
    services = create_scheduling_services([DoctorBuilder().standard().inactive().build()])

    result = await services["validator"].validate(_request())

    assert result.has(ViolationCode.DOCTOR_NOT_AVAILABLE)


# ============================================================================
# Overlap
# ============================================================================


@pytest.mark.unit
@pytest.mark.asyncio
async def test_overlap_with_buffer(standard_doctor):
    """Test that a request starting when another booking ends is rejected under the buffer."""
    services = create_scheduling_services(
        [standard_doctor],
        appointments=[AppointmentBuilder().for_patient(77).at(time(10, 0), time(10, 30)).build()],
    )

    result = await services["validator"].validate(_request(start=time(10, 30), end=time(11, 0)))

    assert_violations(result, ViolationCode.OVERLAP)
    assert "5-minute buffer" in result.messages[0]


@pytest.mark.unit
@pytest.mark.asyncio
async def test_excluded_appointment_is_ignored_everywhere(standard_doctor):
    """Test that the edited appointment neither overlaps nor counts towards patient limits."""
    # Arrange
    appointments = [
        AppointmentBuilder().with_id(5).at(time(10, 0), time(10, 30)).build(),
        _other_doctor_booking(MONDAY, time(14, 0)),
        _other_doctor_booking(MONDAY, time(15, 0)),
    ]
    services = create_scheduling_services([standard_doctor], appointments=appointments)
    validator = services["validator"]

    # Act
    without_exclusion = await validator.validate(_request())
    with_exclusion = await validator.validate(_request(), exclude_appointment_id=5)

    # Assert
    assert_violations(without_exclusion, ViolationCode.OVERLAP, ViolationCode.PATIENT_DAILY_LIMIT)
    assert_valid(with_exclusion)


# ============================================================================
# Patient rules
# ============================================================================


@pytest.mark.unit
@pytest.mark.asyncio
async def test_daily_limit(standard_doctor):
    """Test that a fourth appointment on the same day is rejected."""
    appointments = [_other_doctor_booking(MONDAY, time(h, 0)) for h in (14, 15, 16)]
    services = create_scheduling_services([standard_doctor], appointments=appointments)

    result = await services["validator"].validate(_request())

    assert_violations(result, ViolationCode.PATIENT_DAILY_LIMIT)
    assert result.messages == ["Patient already has 3 appointments on this day"]


@pytest.mark.unit
@pytest.mark.asyncio
async def test_daily_limit_ignores_cancelled(standard_doctor):
    """Test that cancelled appointments do not count towards the daily limit."""
    appointments = [_other_doctor_booking(MONDAY, time(h, 0)) for h in (14, 15, 16)]
    appointments[0].cancel()
    services = create_scheduling_services([standard_doctor], appointments=appointments)

    result = await services["validator"].validate(_request())

    assert_valid(result)


@pytest.mark.unit
@pytest.mark.asyncio
async def test_monthly_limit(standard_doctor):
    """Test that an eleventh appointment in the month is rejected."""
    appointments = [_other_doctor_booking(date(2024, 6, 11) + timedelta(days=i), time(9, 0)) for i in range(10)]
    services = create_scheduling_services([standard_doctor], appointments=appointments)

    result = await services["validator"].validate(_request())

    assert_violations(result, ViolationCode.PATIENT_MONTHLY_LIMIT)


@pytest.mark.unit
@pytest.mark.asyncio
async def test_monthly_limit_counts_calendar_month_only(standard_doctor):
    """Test that bookings in the previous month are not counted."""
    appointments = [_other_doctor_booking(date(2024, 5, 1) + timedelta(days=i), time(9, 0)) for i in range(10)]
    services = create_scheduling_services([standard_doctor], appointments=appointments)

    result = await services["validator"].validate(_request())

    assert_valid(result)


@pytest.mark.unit
@pytest.mark.asyncio
async def test_limits_can_be_disabled(standard_doctor):
    """Test that the policy switch turns patient limits off."""
    appointments = [_other_doctor_booking(MONDAY, time(h, 0)) for h in (14, 15, 16)]
    services = create_scheduling_services(
        [standard_doctor],
        appointments=appointments,
        policy=SchedulingPolicy(enforce_patient_limits=False),
    )

    result = await services["validator"].validate(_request())

    assert_valid(result)


@pytest.mark.unit
@pytest.mark.asyncio
async def test_unknown_patient(standard_doctor):
    """Test that the patient directory is consulted when configured."""
    services = create_scheduling_services(
        [standard_doctor],
        patient_directory=FakePatientDirectory(known={PATIENT_ID}),
    )
    validator = services["validator"]

    assert_valid(await validator.validate(_request()))
    assert_violations(await validator.validate(_request(patient_id=43)), ViolationCode.PATIENT_NOT_FOUND)


# ============================================================================
# Failures
# ============================================================================


@pytest.mark.unit
@pytest.mark.asyncio
async def test_store_failure_propagates(services):
    """Test that a store error is raised instead of being reported as a violation."""
    services["store"].fail_with = InfrastructureException(service="booking_store", message="connection lost")

    with pytest.raises(InfrastructureException):
        await services["validator"].validate(_request())
