"""
Tests for audit events and the audit logger.
"""

import pytest
import structlog
from structlog.testing import capture_logs
from uuid import uuid4

from pocketbook.audit import AuditLogger, configure_logging
from pocketbook.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)


class TestAuditModels:
    """Tests for audit event models."""

    def test_audit_event_creation(self):
        """Test AuditEvent creation."""
        event = AuditEvent(
            event_type=AuditEventType.MONTH_INITIALIZED,
            description="Month initialized",
        )
        assert event.event_id is not None
        assert event.timestamp is not None
        assert event.severity == AuditSeverity.INFO

    def test_audit_event_to_log_dict(self):
        """Test conversion to log dictionary."""
        entity_id = uuid4()
        event = AuditEvent(
            event_type=AuditEventType.PAYMENT_STATUS_UPDATED,
            entity_type="expense",
            entity_id=entity_id,
            month=3,
            year=2025,
            description="Expense marked as paid",
        )
        log_dict = event.to_log_dict()
        assert log_dict["event_type"] == "payment_status_updated"
        assert log_dict["entity_id"] == str(entity_id)
        assert log_dict["month"] == 3

    def test_audit_event_rejects_invalid_month(self):
        """Test that month-scoped events need a valid month."""
        with pytest.raises(ValueError):
            AuditEvent(
                event_type=AuditEventType.MONTH_INITIALIZED,
                month=13,
                description="bad",
            )

    def test_builder_month_regenerated(self):
        """Test the month_regenerated builder."""
        event = AuditEventBuilder.month_regenerated(
            month=3,
            year=2025,
            preserve_user_data=False,
            payment_records_removed=4,
            income_records_removed=1,
        )
        assert event.event_type == AuditEventType.MONTH_REGENERATED
        assert event.is_user_action is True
        assert event.details["payment_records_removed"] == 4
        assert "03/2025" in event.description

    def test_builder_system_error(self):
        """Test the system_error builder."""
        event = AuditEventBuilder.system_error("month_initialization_failed", "disk full")
        assert event.severity == AuditSeverity.ERROR
        assert event.error_message == "disk full"
        assert event.details == {}


class TestAuditLogger:
    """Tests for AuditLogger routing."""

    async def test_severity_routes_level(self):
        """Test that severity picks the log level."""
        with capture_logs() as logs:
            audit_logger = AuditLogger()
            await audit_logger.log_month_initialized(3, 2025, 1, 2, 3, 2, 3)
            await audit_logger.log_data_cleared()
            await audit_logger.log_error("boom", "something failed")

        assert [entry["log_level"] for entry in logs] == ["info", "warning", "error"]
        assert all(entry["event"] == "audit_event" for entry in logs)

    async def test_balance_carried_over(self):
        """Test the balance carry-over event."""
        with capture_logs() as logs:
            await AuditLogger().log_balance_carried_over(3, 2025, "1500.25")

        assert logs[0]["event_type"] == "balance_carried_over"
        assert logs[0]["details"] == {"balance": "1500.25"}

    async def test_failed_write_does_not_raise(self):
        """Test that a broken logger never raises into the caller."""

        class BrokenLogger:
            def info(self, *args, **kwargs):
                raise OSError("stdout closed")

        audit_logger = AuditLogger(logger=BrokenLogger())
        event = AuditEventBuilder.categories_seeded(8)

        assert await audit_logger.log(event) is False


class TestConfigureLogging:
    """Tests for structlog configuration."""

    def test_configure_logging(self):
        """Test that configure_logging sets up the stdlib-backed pipeline."""
        try:
            configure_logging("DEBUG")
            assert structlog.is_configured()
            assert structlog.get_config()["wrapper_class"] is structlog.stdlib.BoundLogger
        finally:
            structlog.reset_defaults()
