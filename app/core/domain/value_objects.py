"""
Base Value Object Classes for Domain-Driven Design

Value Objects are immutable domain primitives that have no identity.
They are compared by their values, not by reference.
"""

from abc import ABC
from dataclasses import dataclass
from enum import Enum


@dataclass(frozen=True)
class ValueObject(ABC):
    """
    Base class for all value objects.

    Value objects are:
    - Immutable (frozen=True)
    - Compared by value (dataclass equality)
    - Have no identity

    Example:
        ```python
        @dataclass(frozen=True)
        class TimeInterval(ValueObject):
            start: int
            end: int

            def _validate(self) -> None:
                if self.end <= self.start:
                    raise ValidationException("End must be after start")
        ```
    """

    def __post_init__(self):
        """Override to add validation logic."""
        self._validate()

    def _validate(self) -> None:
        """Validate the value object. Override in subclasses."""
        pass


class StatusEnum(str, Enum):
    """
    Base class for status enums.

    Members compare equal to their string values, which is what the
    database columns store.
    """
