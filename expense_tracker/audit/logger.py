"""
Audit Logger

DESIGN DECISION: Every significant action in the system is logged.
This provides:
1. Traceability of every ledger mutation
2. Debugging capability when persistence fails
3. A history of budget alerts raised

The audit logger:
- Writes structured JSON lines through structlog
- Gracefully handles failures (logging never breaks a ledger operation)
"""

import logging
import sys
from typing import Optional

import structlog

from expense_tracker.models.audit import AuditEvent, AuditEventBuilder


# Configure structlog for local logging
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.JSONRenderer()
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)


def configure_logging(level: str = "INFO") -> None:
    """
    Route structlog output to stderr at the given level.

    structlog renders the JSON; the stdlib handler only prints it.
    """
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=getattr(logging, level.upper(), logging.INFO),
    )


class AuditLogger:
    """Central audit logging service."""

    def __init__(self, logger: Optional[structlog.stdlib.BoundLogger] = None):
        self._logger = logger or structlog.get_logger("expense_tracker.audit")

    def log(self, event: AuditEvent) -> bool:
        """
        Log an audit event at a level matching its severity.

        Returns False if the log write itself failed.
        """
        log_dict = event.to_log_dict()

        try:
            if event.severity.value == "error":
                self._logger.error("audit_event", **log_dict)
            elif event.severity.value == "warning":
                self._logger.warning("audit_event", **log_dict)
            elif event.severity.value == "debug":
                self._logger.debug("audit_event", **log_dict)
            else:
                self._logger.info("audit_event", **log_dict)
        except (OSError, ValueError, TypeError):
            return False

        return True

    def log_expense_added(self, expense_id: str, name: str, amount: str, category: str) -> None:
        self.log(AuditEventBuilder.expense_added(expense_id, name, amount, category))

    def log_expense_edited(self, old_id: str, new_id: str, name: str) -> None:
        self.log(AuditEventBuilder.expense_edited(old_id, new_id, name))

    def log_expense_deleted(self, expense_id: str, name: str) -> None:
        self.log(AuditEventBuilder.expense_deleted(expense_id, name))

    def log_delete_declined(self, expense_id: str) -> None:
        self.log(AuditEventBuilder.delete_declined(expense_id))

    def log_validation_failed(self, action: str, issues: list[dict]) -> None:
        self.log(AuditEventBuilder.validation_failed(action, issues))

    def log_budget_set(self, old_limit: str, new_limit: str) -> None:
        self.log(AuditEventBuilder.budget_set(old_limit, new_limit))

    def log_budget_evaluated(
        self,
        status: str,
        percentage_used: str,
        total_spent: str,
        monthly_limit: str,
    ) -> None:
        self.log(AuditEventBuilder.budget_evaluated(
            status=status,
            percentage_used=percentage_used,
            total_spent=total_spent,
            monthly_limit=monthly_limit,
        ))

    def log_export_completed(self, filename: str, row_count: int) -> None:
        self.log(AuditEventBuilder.export_completed(filename, row_count))

    def log_export_skipped(self) -> None:
        self.log(AuditEventBuilder.export_skipped())

    def log_ledger_loaded(self, expense_count: int, skipped: int, monthly_limit: str) -> None:
        self.log(AuditEventBuilder.ledger_loaded(expense_count, skipped, monthly_limit))

    def log_ledger_load_failed(self, key: str, error_message: str) -> None:
        self.log(AuditEventBuilder.ledger_load_failed(key, error_message))

    def log_save_failed(self, key: str, error_message: str) -> None:
        self.log(AuditEventBuilder.save_failed(key, error_message))
