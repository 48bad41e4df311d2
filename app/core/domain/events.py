"""
Base Domain Event Classes for Domain-Driven Design

Domain Events represent significant business occurrences. In scheduling they
tell read-side caches that a doctor's availability changed.
"""

import logging
from abc import ABC
from dataclasses import dataclass, field
from datetime import UTC, date, datetime, time
from typing import Any, Callable, Coroutine
from uuid import UUID, uuid4

logger = logging.getLogger(__name__)


@dataclass(frozen=True, kw_only=True)
class DomainEvent(ABC):
    """
    Base class for all domain events.

    Domain events are immutable records of something that happened
    in the domain. They capture the fact that something occurred.

    Example:
        ```python
        @dataclass(frozen=True, kw_only=True)
        class AppointmentBooked(DomainEvent):
            appointment_id: int
            doctor_id: int
        ```
    """

    event_id: UUID = field(default_factory=uuid4)
    occurred_at: datetime = field(default_factory=lambda: datetime.now(UTC))
    version: int = field(default=1)

    @property
    def event_type(self) -> str:
        """Get the event type name (class name)."""
        return self.__class__.__name__

    def to_dict(self) -> dict[str, Any]:
        """Convert event to dictionary for serialization."""
        result = {
            "event_id": str(self.event_id),
            "event_type": self.event_type,
            "occurred_at": self.occurred_at.isoformat(),
            "version": self.version,
        }
        for key, value in self.__dict__.items():
            if key not in result:
                if isinstance(value, (datetime, date, time)):
                    result[key] = value.isoformat()
                elif isinstance(value, UUID):
                    result[key] = str(value)
                else:
                    result[key] = value
        return result


# Type aliases for event handlers
EventHandler = Callable[[DomainEvent], Coroutine[Any, Any, None]]


class DomainEventPublisher:
    """
    Simple in-memory domain event publisher.

    Handlers are process-wide; tests should call clear_handlers().
    """

    _handlers: dict[str, list[EventHandler]] = {}

    @classmethod
    def subscribe(cls, event_type: type[DomainEvent], handler: EventHandler) -> None:
        """
        Subscribe to an event type.

        Args:
            event_type: Type of event to subscribe to
            handler: Async handler function
        """
        event_name = event_type.__name__
        if event_name not in cls._handlers:
            cls._handlers[event_name] = []
        cls._handlers[event_name].append(handler)

    @classmethod
    async def publish(cls, event: DomainEvent) -> None:
        """
        Publish a domain event to all subscribers.

        Args:
            event: Event to publish
        """
        event_name = event.event_type
        handlers = cls._handlers.get(event_name, [])

        for handler in handlers:
            try:
                await handler(event)
            except Exception as e:
                # One failing handler must not stop the others
                logger.error(f"Error in event handler for {event_name}: {e}")

    @classmethod
    async def publish_all(cls, events: list[DomainEvent]) -> None:
        """
        Publish multiple events.

        Args:
            events: List of events to publish
        """
        for event in events:
            await cls.publish(event)

    @classmethod
    def clear_handlers(cls) -> None:
        """Clear all event handlers (useful for testing)."""
        cls._handlers.clear()
