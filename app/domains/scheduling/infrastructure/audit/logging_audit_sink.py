"""
Logging Audit Sink

Writes scheduling audit records to the ``audit.scheduling`` logger as
structured records. Persistent audit storage lives outside this service.
"""

from typing import Any

from app.core.shared.logger import ContextLogger, get_audit_logger
from app.domains.scheduling.application.ports.audit_sink import IAuditSink


class LoggingAuditSink(IAuditSink):
    """IAuditSink that emits one INFO record per event."""

    def __init__(self, audit_logger: ContextLogger | None = None):
        self._logger = audit_logger or get_audit_logger()

    async def record(
        self,
        event: str,
        entity: str,
        entity_id: int | None,
        actor_id: int | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        self._logger.info(
            f"{event} {entity}#{entity_id}",
            event=event,
            entity=entity,
            entity_id=entity_id,
            actor_id=actor_id,
            details=details or {},
        )
