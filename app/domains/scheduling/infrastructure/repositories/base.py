"""
Shared plumbing for the scheduling SQLAlchemy repositories.
"""

import asyncio
import logging
from typing import Any

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.domain import InfrastructureException

logger = logging.getLogger(__name__)

_SESSION_LOCK_KEY = "scheduling_session_lock"


def session_lock(session: AsyncSession) -> asyncio.Lock:
    """
    One lock per session, shared by every repository bound to it.

    An AsyncSession does not allow concurrent operations, while the validator
    issues its lookups with ``asyncio.gather``.
    """
    lock = session.info.get(_SESSION_LOCK_KEY)
    if lock is None:
        lock = asyncio.Lock()
        session.info[_SESSION_LOCK_KEY] = lock
    return lock


class SQLAlchemyRepository:
    """Base class: serialized execution and error translation."""

    service_name = "database"

    def __init__(self, session: AsyncSession):
        """
        Initialize repository.

        Args:
            session: SQLAlchemy async session
        """
        self.session = session
        self._lock = session_lock(session)

    async def _execute(self, statement: Any, params: dict[str, Any] | None = None):
        """Run a statement; driver and connection errors become InfrastructureException."""
        async with self._lock:
            try:
                return await self.session.execute(statement, params or {})
            except SQLAlchemyError as e:
                logger.error(f"{self.service_name} query failed: {e}")
                raise InfrastructureException(self.service_name, "Database query failed", original_error=e) from e
