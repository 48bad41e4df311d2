"""
Shared pytest fixtures for all tests.

This module provides common fixtures for the scheduling fakes, settings,
sample doctors and the domain event publisher.
"""

import os
from unittest.mock import AsyncMock, MagicMock

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from app.config.settings import Settings
from app.core.domain import DomainEventPublisher
from app.domains.scheduling.domain.services.scheduling_policy import SchedulingPolicy

from tests.utils import (
    DoctorBuilder,
    FakeBookingStore,
    FakeDoctorCatalog,
    RecordingAuditSink,
    create_scheduling_services,
)

# Ensure test environment
os.environ["ENVIRONMENT"] = "test"


# ============================================================================
# EVENT PUBLISHER
# ============================================================================


@pytest.fixture(autouse=True)
def clean_event_handlers():
    """DomainEventPublisher keeps handlers at class level; reset around every test."""
    DomainEventPublisher.clear_handlers()
    yield
    DomainEventPublisher.clear_handlers()


# ============================================================================
# SETTINGS / POLICY
# ============================================================================


@pytest.fixture
def test_settings() -> Settings:
    """Settings built without reading a .env file."""
    return Settings(
        _env_file=None,
        DB_NAME="scheduling_test",
        ENVIRONMENT="test",
        DEBUG=False,
        LOG_LEVEL="INFO",
        LOG_JSON=False,
    )


@pytest.fixture
def policy() -> SchedulingPolicy:
    return SchedulingPolicy()


# ============================================================================
# DATABASE FIXTURES
# ============================================================================


@pytest.fixture
def mock_async_session():
    """Create a mock async database session."""
    session = AsyncMock(spec=AsyncSession)
    session.info = {}
    session.execute = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.refresh = AsyncMock()
    session.add = MagicMock()
    return session


# ============================================================================
# SCHEDULING FIXTURES
# ============================================================================


@pytest.fixture
def standard_doctor():
    """Doctor 7: Monday 08:00-12:00, 30-minute slots, open contract from 2024-01-01."""
    return DoctorBuilder().standard().build()


@pytest.fixture
def services(standard_doctor):
    """Real services wired to in-memory fakes, clock fixed at 2024-06-01."""
    return create_scheduling_services([standard_doctor])


@pytest.fixture
def booking_store(services) -> FakeBookingStore:
    return services["store"]


@pytest.fixture
def doctor_catalog(services) -> FakeDoctorCatalog:
    return services["catalog"]


@pytest.fixture
def audit_sink() -> RecordingAuditSink:
    return RecordingAuditSink()
