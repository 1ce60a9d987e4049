"""
Audit Models for Expense Tracker

Every significant action in the system is logged for audit purposes.
This provides:
1. Traceability of every ledger mutation
2. Debugging information when persistence fails
3. A record of every budget evaluation and the alert it produced

DESIGN DECISION: Audit events are append-only structured log lines.
They are never read back by the application.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


class AuditEventType(str, Enum):
    """Types of events we audit."""
    # Ledger mutations
    EXPENSE_ADDED = "expense_added"
    EXPENSE_EDITED = "expense_edited"
    EXPENSE_DELETED = "expense_deleted"
    DELETE_DECLINED = "delete_declined"
    VALIDATION_FAILED = "validation_failed"

    # Budget
    BUDGET_SET = "budget_set"
    BUDGET_EVALUATED = "budget_evaluated"

    # Export
    EXPORT_COMPLETED = "export_completed"
    EXPORT_SKIPPED = "export_skipped"

    # Persistence
    LEDGER_LOADED = "ledger_loaded"
    LEDGER_LOAD_FAILED = "ledger_load_failed"
    SAVE_FAILED = "save_failed"


class AuditSeverity(str, Enum):
    """Severity level for audit events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class AuditEvent(BaseModel):
    """
    A single audit event.

    Every significant action creates one of these.
    """

    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="When the event occurred (UTC)"
    )

    event_type: AuditEventType
    severity: AuditSeverity = AuditSeverity.INFO

    # Context - which expense (if any) is this about?
    entity_type: Optional[str] = Field(
        default=None,
        description="Type of entity (e.g., 'expense', 'budget', 'export')"
    )
    entity_id: Optional[str] = None

    description: str = Field(
        ...,
        max_length=500,
        description="Human-readable description of what happened"
    )
    details: dict[str, Any] = Field(default_factory=dict)
    error_message: Optional[str] = None

    is_user_action: bool = Field(
        default=False,
        description="Was this triggered by a user action?"
    )

    def to_log_dict(self) -> dict:
        """
        Convert to a dictionary suitable for structured logging.
        """
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "entity_type": self.entity_type,
            "entity_id": self.entity_id,
            "description": self.description,
            "details": self.details,
            "error_message": self.error_message,
            "is_user_action": self.is_user_action,
        }


class AuditEventBuilder:
    """
    Helper class to build audit events with common patterns.

    Usage:
        event = AuditEventBuilder.expense_added(expense_id, name, amount)
        event = AuditEventBuilder.budget_evaluated(status, percentage)
    """

    @staticmethod
    def expense_added(expense_id: str, name: str, amount: str, category: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.EXPENSE_ADDED,
            entity_type="expense",
            entity_id=expense_id,
            description=f"Expense added: {name} - {amount}",
            details={
                "name": name,
                "amount": amount,
                "category": category,
            },
            is_user_action=True,
        )

    @staticmethod
    def expense_edited(old_id: str, new_id: str, name: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.EXPENSE_EDITED,
            entity_type="expense",
            entity_id=new_id,
            description=f"Expense edited: {name}",
            details={
                "replaced_id": old_id,
            },
            is_user_action=True,
        )

    @staticmethod
    def expense_deleted(expense_id: str, name: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.EXPENSE_DELETED,
            entity_type="expense",
            entity_id=expense_id,
            description=f"Expense deleted: {name}",
            is_user_action=True,
        )

    @staticmethod
    def delete_declined(expense_id: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.DELETE_DECLINED,
            entity_type="expense",
            entity_id=expense_id,
            description="User declined to delete expense",
            is_user_action=True,
        )

    @staticmethod
    def validation_failed(action: str, issues: list[dict]) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.VALIDATION_FAILED,
            severity=AuditSeverity.WARNING,
            entity_type="expense",
            description=f"Input rejected on {action} with {len(issues)} issues",
            details={
                "action": action,
                "issues": issues,
            },
            is_user_action=True,
        )

    @staticmethod
    def budget_set(old_limit: str, new_limit: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.BUDGET_SET,
            entity_type="budget",
            description=f"Monthly budget set to {new_limit}",
            details={
                "old_limit": old_limit,
                "new_limit": new_limit,
            },
            is_user_action=True,
        )

    @staticmethod
    def budget_evaluated(status: str, percentage_used: str, total_spent: str, monthly_limit: str) -> AuditEvent:
        severity = AuditSeverity.INFO if status == "normal" else AuditSeverity.WARNING
        return AuditEvent(
            event_type=AuditEventType.BUDGET_EVALUATED,
            severity=severity,
            entity_type="budget",
            description=f"Budget status {status} at {percentage_used}%",
            details={
                "status": status,
                "percentage_used": percentage_used,
                "total_spent": total_spent,
                "monthly_limit": monthly_limit,
            },
        )

    @staticmethod
    def export_completed(filename: str, row_count: int) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.EXPORT_COMPLETED,
            entity_type="export",
            description=f"Exported {row_count} expenses to {filename}",
            details={
                "filename": filename,
                "row_count": row_count,
            },
            is_user_action=True,
        )

    @staticmethod
    def export_skipped() -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.EXPORT_SKIPPED,
            severity=AuditSeverity.WARNING,
            entity_type="export",
            description="Export requested with no expenses",
            is_user_action=True,
        )

    @staticmethod
    def ledger_loaded(expense_count: int, skipped: int, monthly_limit: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.LEDGER_LOADED,
            severity=AuditSeverity.WARNING if skipped else AuditSeverity.INFO,
            entity_type="ledger",
            description=f"Ledger loaded with {expense_count} expenses",
            details={
                "expense_count": expense_count,
                "skipped_records": skipped,
                "monthly_limit": monthly_limit,
            },
        )

    @staticmethod
    def ledger_load_failed(key: str, error_message: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.LEDGER_LOAD_FAILED,
            severity=AuditSeverity.ERROR,
            entity_type="ledger",
            description=f"Could not read '{key}', starting from defaults",
            error_message=error_message,
            details={
                "key": key,
            },
        )

    @staticmethod
    def save_failed(key: str, error_message: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SAVE_FAILED,
            severity=AuditSeverity.ERROR,
            entity_type="ledger",
            description=f"Failed to persist '{key}'",
            error_message=error_message,
            details={
                "key": key,
            },
        )
