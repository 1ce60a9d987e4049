"""Tests for the structured audit logger."""

from expense_tracker.audit import AuditLogger
from expense_tracker.models.audit import AuditEventBuilder


class BrokenLogger:
    def info(self, event, **kwargs):
        raise ValueError("handler closed")


class TestAuditLogger:
    """Tests for AuditLogger."""

    def test_info_event(self, audit_logger, recording_logger):
        audit_logger.log_expense_added("abc", "Coffee", "3.50", "food")

        [(level, event, fields)] = recording_logger.calls
        assert level == "info"
        assert event == "audit_event"
        assert fields["event_type"] == "expense_added"
        assert fields["entity_id"] == "abc"

    def test_level_follows_severity(self, audit_logger, recording_logger):
        audit_logger.log_export_skipped()
        audit_logger.log_save_failed("expenses", "disk full")

        assert [call[0] for call in recording_logger.calls] == ["warning", "error"]

    def test_log_returns_true(self, audit_logger):
        assert audit_logger.log(AuditEventBuilder.budget_set("5000", "2000")) is True

    def test_logging_failure_is_contained(self):
        """Test that a failing log sink never breaks the caller."""
        audit_logger = AuditLogger(logger=BrokenLogger())
        assert audit_logger.log(AuditEventBuilder.budget_set("5000", "2000")) is False

    def test_validation_failure_details(self, audit_logger, recording_logger):
        issues = [{"field": "amount", "type": "missing", "message": "Amount is required"}]
        audit_logger.log_validation_failed("add", issues)

        _, _, fields = recording_logger.calls[0]
        assert fields["details"] == {"action": "add", "issues": issues}
