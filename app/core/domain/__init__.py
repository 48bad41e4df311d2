"""
Domain Layer - Core DDD building blocks

This module provides base classes for Domain-Driven Design:
- Entities: Objects with identity and lifecycle
- Value Objects: Immutable objects compared by value
- Events: Domain events for communication
- Exceptions: Domain-specific error handling
"""

from app.core.domain.entities import AggregateRoot, Entity
from app.core.domain.events import DomainEvent, DomainEventPublisher
from app.core.domain.exceptions import (
    AppointmentConflictException,
    BusinessRuleViolationException,
    DomainException,
    EntityNotFoundException,
    InfrastructureException,
    InvalidOperationException,
    ValidationException,
)
from app.core.domain.value_objects import StatusEnum, ValueObject

__all__ = [
    # Entities
    "Entity",
    "AggregateRoot",
    # Value Objects
    "ValueObject",
    "StatusEnum",
    # Events
    "DomainEvent",
    "DomainEventPublisher",
    # Exceptions
    "DomainException",
    "ValidationException",
    "EntityNotFoundException",
    "BusinessRuleViolationException",
    "InvalidOperationException",
    "InfrastructureException",
    "AppointmentConflictException",
]
