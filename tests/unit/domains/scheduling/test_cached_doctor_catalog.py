"""
Unit tests for CachedDoctorCatalog and CatalogCacheInvalidator.
"""

from datetime import date

import pytest

from app.core.domain import DomainEventPublisher
from app.core.shared.cache import MemoryCache
from app.domains.scheduling.domain.entities.contract import Contract
from app.domains.scheduling.domain.events import DoctorAvailabilityChanged
from app.domains.scheduling.infrastructure.cache import CachedDoctorCatalog, CatalogCacheInvalidator

from tests.utils import DOCTOR_ID, DoctorBuilder, FakeDoctorCatalog


class FakeClock:
    def __init__(self):
        self.now = 0.0

    def __call__(self) -> float:
        return self.now


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def inner() -> FakeDoctorCatalog:
    return FakeDoctorCatalog([DoctorBuilder().standard().build()])


@pytest.fixture
def cache(clock) -> MemoryCache:
    return MemoryCache(max_size=100, default_ttl=900, clock=clock)


@pytest.fixture
def catalog(inner, cache) -> CachedDoctorCatalog:
    return CachedDoctorCatalog(inner, cache)


@pytest.mark.unit
@pytest.mark.asyncio
async def test_reads_are_served_from_cache(catalog, inner):
    """Test that repeated reads hit the wrapped catalog once."""
    # Act
    first = await catalog.get_schedule_templates(DOCTOR_ID, 1)
    second = await catalog.get_schedule_templates(DOCTOR_ID, 1)
    await catalog.get_active_contracts(DOCTOR_ID)
    await catalog.get_active_contracts(DOCTOR_ID)
    await catalog.get_doctor(DOCTOR_ID)
    await catalog.get_doctor(DOCTOR_ID)

    # Assert
    assert len(first) == len(second) == 1
    assert inner.calls["get_schedule_templates"] == 1
    assert inner.calls["get_active_contracts"] == 1
    assert inner.calls["get_doctor"] == 1


@pytest.mark.unit
@pytest.mark.asyncio
async def test_templates_are_cached_per_weekday(catalog, inner):
    """Test that each weekday has its own entry."""
    await catalog.get_schedule_templates(DOCTOR_ID, 1)
    await catalog.get_schedule_templates(DOCTOR_ID, 2)

    assert inner.calls["get_schedule_templates"] == 2


@pytest.mark.unit
@pytest.mark.asyncio
async def test_returned_lists_are_copies(catalog):
    """Test that mutating a returned list does not change the cached entry."""
    contracts = await catalog.get_active_contracts(DOCTOR_ID)
    contracts.clear()

    assert len(await catalog.get_active_contracts(DOCTOR_ID)) == 1


@pytest.mark.unit
@pytest.mark.asyncio
async def test_unknown_doctor_not_cached(catalog, inner):
    """Test that a missing doctor is looked up again every time."""
    assert await catalog.get_doctor(999) is None
    assert await catalog.get_doctor(999) is None

    assert inner.calls["get_doctor"] == 2


@pytest.mark.unit
@pytest.mark.asyncio
async def test_doctor_with_schedule_bypasses_cache(catalog, inner):
    """Test that aggregates loaded for modification always come from the store."""
    await catalog.get_doctor_with_schedule(DOCTOR_ID)
    await catalog.get_doctor_with_schedule(DOCTOR_ID)

    assert inner.calls["get_doctor_with_schedule"] == 2


@pytest.mark.unit
@pytest.mark.asyncio
async def test_entries_expire_after_ttl(catalog, inner, clock):
    """Test that entries are reloaded once the TTL has passed."""
    await catalog.get_active_contracts(DOCTOR_ID)

    clock.now = 899.0
    await catalog.get_active_contracts(DOCTOR_ID)
    clock.now = 900.0
    await catalog.get_active_contracts(DOCTOR_ID)

    assert inner.calls["get_active_contracts"] == 2


@pytest.mark.unit
@pytest.mark.asyncio
async def test_save_invalidates_doctor_entries(catalog, inner, cache):
    """Test that writing a contract drops the doctor's cached entries only."""
    # Arrange
    await catalog.get_active_contracts(DOCTOR_ID)
    await catalog.get_schedule_templates(DOCTOR_ID, 1)
    await cache.async_set("doctor:8:contracts", [])

    # Act
    await catalog.save_contract(
        Contract(doctor_id=DOCTOR_ID, start_date=date(2030, 1, 1), end_date=date(2030, 6, 1))
    )
    contracts = await catalog.get_active_contracts(DOCTOR_ID)

    # Assert
    assert len(contracts) == 2
    assert inner.calls["get_active_contracts"] == 2
    assert await cache.async_get("doctor:8:contracts") == []


@pytest.mark.unit
@pytest.mark.asyncio
async def test_prefix_does_not_match_other_doctor_ids(catalog, cache):
    """Test that invalidating doctor 7 leaves doctor 70 alone."""
    await cache.async_set("doctor:70:contracts", ["kept"])
    await catalog.get_active_contracts(DOCTOR_ID)

    removed = await catalog.invalidate(DOCTOR_ID)

    assert removed == 1
    assert await cache.async_get("doctor:70:contracts") == ["kept"]


@pytest.mark.unit
@pytest.mark.asyncio
async def test_invalidator_reacts_to_availability_events(catalog, inner, cache):
    """Test that a published DoctorAvailabilityChanged clears the doctor's entries."""
    # Arrange
    CatalogCacheInvalidator(cache).subscribe()
    await catalog.get_schedule_templates(DOCTOR_ID, 1)

    # Act
    await DomainEventPublisher.publish(DoctorAvailabilityChanged(doctor_id=DOCTOR_ID, reason="template_added"))
    await catalog.get_schedule_templates(DOCTOR_ID, 1)

    # Assert
    assert inner.calls["get_schedule_templates"] == 2
    assert cache.stats.invalidations == 1


@pytest.mark.unit
@pytest.mark.asyncio
async def test_load_interrupted_by_invalidation_is_not_stored(catalog, inner, cache):
    """Test that a read racing a write does not put the pre-write value back in the cache."""
    # Arrange
    load = inner.get_active_contracts

    async def load_then_invalidate(doctor_id):
        contracts = await load(doctor_id)
        await CatalogCacheInvalidator(cache).handle_availability_changed(
            DoctorAvailabilityChanged(doctor_id=doctor_id, reason="contract_added")
        )
        return contracts

    inner.get_active_contracts = load_then_invalidate

    # Act
    await catalog.get_active_contracts(DOCTOR_ID)
    inner.get_active_contracts = load
    await catalog.get_active_contracts(DOCTOR_ID)
    await catalog.get_active_contracts(DOCTOR_ID)

    # Assert
    assert inner.calls["get_active_contracts"] == 2
    assert await cache.async_get("doctor:7:contracts") is not None


@pytest.mark.unit
@pytest.mark.asyncio
async def test_generations_are_shared_across_catalogs_on_one_cache(inner, cache):
    """Test that an invalidation through one catalog blocks a concurrent load in another."""
    first = CachedDoctorCatalog(inner, cache)
    second = CachedDoctorCatalog(inner, cache)
    load = inner.get_doctor

    async def load_while_other_writes(doctor_id):
        doctor = await load(doctor_id)
        await second.invalidate(doctor_id)
        return doctor

    inner.get_doctor = load_while_other_writes
    await first.get_doctor(DOCTOR_ID)

    assert await cache.async_get("doctor:7:profile") is None


@pytest.mark.unit
@pytest.mark.asyncio
async def test_renew_contract_invalidates_doctor_entries(catalog, inner):
    """Test that a renewal drops the cached contracts."""
    await catalog.get_active_contracts(DOCTOR_ID)
    doctor = inner.doctors[DOCTOR_ID]
    previous = doctor.contracts[0]
    previous.finalize(date(2024, 7, 1), reason="Renewal")

    await catalog.renew_contract(previous, Contract(doctor_id=DOCTOR_ID, start_date=date(2024, 7, 1)))
    contracts = await catalog.get_active_contracts(DOCTOR_ID)

    assert inner.calls["renew_contract"] == 1
    assert inner.calls["get_active_contracts"] == 2
    assert [c.start_date for c in contracts] == [date(2024, 7, 1)]
