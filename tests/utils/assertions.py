"""
Custom assertions and verification helpers for tests.

Provides reusable assertion functions for scheduling results.
"""

from app.domains.scheduling.domain.value_objects.time_interval import TimeSlot
from app.domains.scheduling.domain.value_objects.validation import ValidationResult, ViolationCode


def assert_valid(result: ValidationResult) -> None:
    """
    Assert that a validation result has no violations.

    Raises:
        AssertionError: Listing the messages when invalid
    """
    assert result.valid, f"Expected valid result, got violations: {result.messages}"


def assert_violations(result: ValidationResult, *codes: ViolationCode) -> None:
    """
    Assert that a validation result reports exactly ``codes``, in order.

    Args:
        result: Validation result
        *codes: Expected violation codes
    """
    assert not result.valid, "Expected violations, got a valid result"
    assert result.codes == list(codes), f"Expected {list(codes)}, got {result.codes}"


def assert_slots_sorted_and_disjoint(slots: list[TimeSlot]) -> None:
    """Assert slots are in chronological order and never intersect each other."""
    for previous, current in zip(slots, slots[1:]):
        assert previous.start < current.start, f"{previous} is not before {current}"
        assert not previous.interval.overlaps(current.interval), f"{previous} overlaps {current}"


def slot_starts(slots: list[TimeSlot]) -> list[str]:
    """Slot start times as ``HH:MM`` strings."""
    return [s.start.strftime("%H:%M") for s in slots]
