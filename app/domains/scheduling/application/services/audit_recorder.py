"""
Audit recording helper shared by the scheduling use cases.
"""

import logging
from typing import Any

from app.domains.scheduling.application.ports.audit_sink import IAuditSink

logger = logging.getLogger(__name__)


async def record_audit(
    sink: IAuditSink | None,
    event: str,
    entity: str,
    entity_id: int | None,
    actor_id: int | None = None,
    details: dict[str, Any] | None = None,
) -> None:
    """Send an audit record; a failing sink is logged and never propagates."""
    if sink is None:
        return
    try:
        await sink.record(event, entity, entity_id, actor_id=actor_id, details=details)
    except Exception as e:
        logger.warning(f"Audit record '{event}' for {entity} {entity_id} failed: {e}")
