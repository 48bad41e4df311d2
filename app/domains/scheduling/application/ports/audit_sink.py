"""
Audit Sink Port
"""

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class IAuditSink(Protocol):
    """
    Receives an audit record for every appointment write.

    Callers treat it as fire-and-forget: a failing sink is logged and never
    rolls back the booking.
    """

    async def record(
        self,
        event: str,
        entity: str,
        entity_id: int | None,
        actor_id: int | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Record an audit event.

        Args:
            event: What happened ("appointment.booked", "appointment.cancelled", ...)
            entity: Entity type name
            entity_id: Entity identifier
            actor_id: User that performed the action, if known
            details: Old/new values and request context
        """
        ...
