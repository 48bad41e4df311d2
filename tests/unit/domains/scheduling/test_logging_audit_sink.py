"""Unit tests for LoggingAuditSink."""

import logging

import pytest

from app.domains.scheduling.infrastructure.audit import LoggingAuditSink


@pytest.mark.unit
@pytest.mark.asyncio
async def test_record_emits_structured_audit_log(caplog):
    """Test that each audit record becomes one INFO entry on the audit logger."""
    # Arrange
    sink = LoggingAuditSink()

    # Act
    with caplog.at_level(logging.INFO, logger="audit.scheduling"):
        await sink.record(
            "appointment.booked",
            "appointment",
            5,
            actor_id=3,
            details={"new": {"date": "2024-06-10"}},
        )

    # Assert
    record = caplog.records[-1]
    assert record.name == "audit.scheduling"
    assert record.levelno == logging.INFO
    assert record.getMessage() == "appointment.booked appointment#5"
    assert record.extra_data == {
        "component": "audit",
        "event": "appointment.booked",
        "entity": "appointment",
        "entity_id": 5,
        "actor_id": 3,
        "details": {"new": {"date": "2024-06-10"}},
    }


@pytest.mark.unit
@pytest.mark.asyncio
async def test_record_without_details(caplog):
    """Test that missing details are logged as an empty mapping."""
    sink = LoggingAuditSink()

    with caplog.at_level(logging.INFO, logger="audit.scheduling"):
        await sink.record("contract.added", "contract", 11)

    assert caplog.records[-1].extra_data["details"] == {}
    assert caplog.records[-1].extra_data["actor_id"] is None
