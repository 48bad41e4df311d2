"""
Cached Doctor Catalog

Read-through cache over IDoctorCatalog. Entries are keyed by doctor and
dropped on any write or DoctorAvailabilityChanged event for that doctor, so
staleness is bounded by ``ttl`` only for changes made by other processes.

Every invalidation also bumps a per-doctor generation. A load that started
before an invalidation does not write its result back.
"""

import logging
import weakref
from collections import Counter
from typing import Any

from app.core.domain import DomainEventPublisher
from app.core.shared.cache import MemoryCache
from app.domains.scheduling.application.ports.doctor_catalog import IDoctorCatalog
from app.domains.scheduling.domain.entities.contract import Contract
from app.domains.scheduling.domain.entities.doctor import Doctor
from app.domains.scheduling.domain.entities.schedule_template import ScheduleTemplate
from app.domains.scheduling.domain.events import DoctorAvailabilityChanged

logger = logging.getLogger(__name__)

_MISSING = object()

# Generations live beside the cache they guard, shared by every catalog on it
_generations: "weakref.WeakKeyDictionary[MemoryCache, Counter[int]]" = weakref.WeakKeyDictionary()


def doctor_cache_prefix(doctor_id: int) -> str:
    return f"doctor:{doctor_id}:"


def doctor_generations(cache: MemoryCache) -> Counter[int]:
    generations = _generations.get(cache)
    if generations is None:
        generations = Counter()
        _generations[cache] = generations
    return generations


async def invalidate_doctor(cache: MemoryCache, doctor_id: int) -> int:
    """Bump the doctor's generation and drop its cached entries."""
    doctor_generations(cache)[doctor_id] += 1
    return await cache.async_delete_prefix(doctor_cache_prefix(doctor_id))


class CatalogCacheInvalidator:
    """Drops cached catalog entries when a doctor's availability changes."""

    def __init__(self, cache: MemoryCache):
        self._cache = cache

    def subscribe(self) -> None:
        DomainEventPublisher.subscribe(DoctorAvailabilityChanged, self.handle_availability_changed)  # type: ignore[arg-type]

    async def handle_availability_changed(self, event: DoctorAvailabilityChanged) -> None:
        removed = await invalidate_doctor(self._cache, event.doctor_id)
        logger.debug(f"Invalidated {removed} catalog entries for doctor {event.doctor_id} ({event.reason})")


class CachedDoctorCatalog(IDoctorCatalog):
    """
    IDoctorCatalog decorator backed by MemoryCache.

    Unknown doctors are not cached. Writes go to the wrapped catalog first
    and invalidate the doctor's entries afterwards.

    Example:
        ```python
        catalog = CachedDoctorCatalog(SQLAlchemyDoctorCatalog(session), cache, ttl=900)
        templates = await catalog.get_schedule_templates(7, 1)  # store
        templates = await catalog.get_schedule_templates(7, 1)  # cache
        ```
    """

    def __init__(self, inner: IDoctorCatalog, cache: MemoryCache, ttl: float | None = None):
        self._inner = inner
        self._cache = cache
        self._ttl = ttl

    async def _cached(self, doctor_id: int, key: str, loader) -> Any:
        value = await self._cache.async_get(key, _MISSING)
        if value is not _MISSING:
            return value

        generations = doctor_generations(self._cache)
        generation = generations[doctor_id]
        value = await loader()
        if value is not None and generations[doctor_id] == generation:
            await self._cache.async_set(key, value, ttl=self._ttl)
        return value

    async def get_doctor(self, doctor_id: int) -> Doctor | None:
        return await self._cached(
            doctor_id,
            f"{doctor_cache_prefix(doctor_id)}profile",
            lambda: self._inner.get_doctor(doctor_id),
        )

    async def get_doctor_with_schedule(self, doctor_id: int) -> Doctor | None:
        # Returned aggregates get mutated by callers
        return await self._inner.get_doctor_with_schedule(doctor_id)

    async def get_active_contracts(self, doctor_id: int) -> list[Contract]:
        contracts = await self._cached(
            doctor_id,
            f"{doctor_cache_prefix(doctor_id)}contracts",
            lambda: self._inner.get_active_contracts(doctor_id),
        )
        return list(contracts)

    async def get_schedule_templates(self, doctor_id: int, day_of_week: int) -> list[ScheduleTemplate]:
        templates = await self._cached(
            doctor_id,
            f"{doctor_cache_prefix(doctor_id)}templates:{day_of_week}",
            lambda: self._inner.get_schedule_templates(doctor_id, day_of_week),
        )
        return list(templates)

    async def save_contract(self, contract: Contract) -> Contract:
        saved = await self._inner.save_contract(contract)
        await self.invalidate(saved.doctor_id)
        return saved

    async def renew_contract(self, previous: Contract, renewal: Contract) -> Contract:
        saved = await self._inner.renew_contract(previous, renewal)
        await self.invalidate(saved.doctor_id)
        return saved

    async def save_schedule_template(self, template: ScheduleTemplate) -> ScheduleTemplate:
        saved = await self._inner.save_schedule_template(template)
        await self.invalidate(saved.doctor_id)
        return saved

    async def invalidate(self, doctor_id: int) -> int:
        return await invalidate_doctor(self._cache, doctor_id)
