"""
Scheduling Domain Services

Stateless rules shared by the application services.
"""

from app.domains.scheduling.domain.services.conflict_detection import find_conflict
from app.domains.scheduling.domain.services.scheduling_policy import (
    SchedulingPolicy,
    add_months,
    month_bounds,
)

__all__ = [
    "SchedulingPolicy",
    "add_months",
    "month_bounds",
    "find_conflict",
]
