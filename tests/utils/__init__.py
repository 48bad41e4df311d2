"""Test utilities and helpers."""

from tests.utils.assertions import (
    assert_slots_sorted_and_disjoint,
    assert_valid,
    assert_violations,
    slot_starts,
)
from tests.utils.builders import (
    DOCTOR_ID,
    MONDAY,
    PATIENT_ID,
    SUNDAY_DATE,
    TODAY,
    AppointmentBuilder,
    DoctorBuilder,
)
from tests.utils.factories import (
    FakeBookingStore,
    FakeDoctorCatalog,
    FakePatientDirectory,
    RecordingAuditSink,
    create_scheduling_services,
)

__all__ = [
    # Builders
    "AppointmentBuilder",
    "DoctorBuilder",
    "DOCTOR_ID",
    "MONDAY",
    "PATIENT_ID",
    "SUNDAY_DATE",
    "TODAY",
    # Fakes
    "FakeBookingStore",
    "FakeDoctorCatalog",
    "FakePatientDirectory",
    "RecordingAuditSink",
    "create_scheduling_services",
    # Assertions
    "assert_valid",
    "assert_violations",
    "assert_slots_sorted_and_disjoint",
    "slot_starts",
]
