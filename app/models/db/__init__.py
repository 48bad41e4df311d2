"""
Database models package

Domain tables live with their bounded context under
``app/domains/<context>/infrastructure/persistence``.
"""

from .base import Base, TimestampMixin

__all__ = [
    # Base
    "Base",
    "TimestampMixin",
]
