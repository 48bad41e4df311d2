"""Unit tests for the dependency container wiring."""

import pytest

from app.core.container import (
    BaseContainer,
    DependencyContainer,
    SchedulingContainer,
    get_container,
    reset_container,
)
from app.core.domain import DomainEventPublisher
from app.domains.scheduling.application.use_cases import (
    BookAppointmentUseCase,
    ChangeAppointmentStatusUseCase,
    GetAvailableSlotsUseCase,
    ManageDoctorScheduleUseCase,
    RescheduleAppointmentUseCase,
)
from app.domains.scheduling.domain.events import DoctorAvailabilityChanged
from app.domains.scheduling.domain.services.scheduling_policy import SchedulingPolicy
from app.domains.scheduling.infrastructure.cache import CachedDoctorCatalog
from app.domains.scheduling.infrastructure.repositories import SQLAlchemyAppointmentRepository

from tests.utils import FakePatientDirectory


@pytest.fixture
def container(test_settings):
    return DependencyContainer(settings=test_settings)


@pytest.fixture(autouse=True)
def fresh_global_container():
    reset_container()
    yield
    reset_container()


class TestBaseContainer:
    """Tests for BaseContainer singletons."""

    def test_policy_is_singleton_from_settings(self, test_settings) -> None:
        """Should build the policy once from settings."""
        base = BaseContainer(test_settings)
        assert base.get_policy() is base.get_policy()
        assert base.get_policy() == SchedulingPolicy.from_settings(test_settings)

    def test_catalog_cache_uses_settings(self, test_settings) -> None:
        """Should size the cache from settings."""
        base = BaseContainer(test_settings)
        cache = base.get_catalog_cache()
        assert cache is base.get_catalog_cache()
        assert cache.default_ttl == test_settings.CATALOG_CACHE_TTL_SECONDS
        assert cache.max_size == test_settings.CATALOG_CACHE_MAX_SIZE

    def test_get_config(self, test_settings) -> None:
        """Should expose environment and policy values."""
        config = BaseContainer(test_settings).get_config()
        assert config["environment"] == "test"
        assert config["policy"]["buffer_minutes"] == 5
        assert config["domains"] == ["scheduling"]


@pytest.mark.unit
def test_use_cases_are_wired(container, mock_async_session):
    """Test that every use case can be built for a session."""
    assert isinstance(container.create_book_appointment_use_case(mock_async_session), BookAppointmentUseCase)
    assert isinstance(
        container.create_reschedule_appointment_use_case(mock_async_session), RescheduleAppointmentUseCase
    )
    assert isinstance(
        container.create_change_appointment_status_use_case(mock_async_session), ChangeAppointmentStatusUseCase
    )
    assert isinstance(container.create_get_available_slots_use_case(mock_async_session), GetAvailableSlotsUseCase)
    assert isinstance(
        container.create_manage_doctor_schedule_use_case(mock_async_session), ManageDoctorScheduleUseCase
    )


@pytest.mark.unit
def test_repositories_share_session_lock(container, mock_async_session):
    """Test that repositories bound to one session serialize on the same lock."""
    first = container.create_appointment_repository(mock_async_session)
    second = container.create_appointment_repository(mock_async_session)

    assert isinstance(first, SQLAlchemyAppointmentRepository)
    assert first._lock is second._lock


@pytest.mark.unit
def test_doctor_catalogs_share_cache(container, mock_async_session):
    """Test that catalogs for different sessions share the process-wide cache."""
    catalog = container.create_doctor_catalog(mock_async_session)
    other = container.create_doctor_catalog(mock_async_session)

    assert isinstance(catalog, CachedDoctorCatalog)
    assert catalog._cache is other._cache


@pytest.mark.unit
@pytest.mark.asyncio
async def test_cache_invalidator_subscribed(container, mock_async_session):
    """Test that availability events clear the shared catalog cache."""
    container.create_doctor_catalog(mock_async_session)
    cache = container.scheduling._base.get_catalog_cache()
    await cache.async_set("doctor:7:contracts", ["c"])

    await DomainEventPublisher.publish(DoctorAvailabilityChanged(doctor_id=7, reason="contract_added"))

    assert await cache.async_get("doctor:7:contracts") is None


@pytest.mark.unit
def test_patient_directory_reaches_validator(test_settings, mock_async_session):
    """Test that the optional patient directory is handed to the validator."""
    directory = FakePatientDirectory(known={42})
    container = DependencyContainer(settings=test_settings, patient_directory=directory)

    validator = container.scheduling.create_appointment_validator(mock_async_session)

    assert validator._patients is directory


@pytest.mark.unit
def test_global_container_singleton(test_settings):
    """Test get_container returns one instance until reset."""
    first = get_container(test_settings)
    assert get_container() is first
    assert isinstance(first.scheduling, SchedulingContainer)

    reset_container()
    assert get_container(test_settings) is not first
