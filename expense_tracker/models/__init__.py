"""
Data Models Package

This package contains all Pydantic models used in the Expense Tracker.
All data flowing through the system must conform to these schemas.
"""

from expense_tracker.models.expense import (
    SUGGESTED_CATEGORIES,
    BudgetConfig,
    ExpenseInput,
    ExpenseRecord,
    ValidationIssue,
    ValidationResult,
    new_expense_id,
)
from expense_tracker.models.budget import (
    BudgetAlert,
    BudgetStatus,
    BudgetSummary,
    Notification,
    NotificationSeverity,
)
from expense_tracker.models.reports import (
    CategoryBreakdown,
    CsvExport,
    MonthlyTotal,
)
from expense_tracker.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)

__all__ = [
    # Expense models
    "SUGGESTED_CATEGORIES",
    "BudgetConfig",
    "ExpenseInput",
    "ExpenseRecord",
    "ValidationIssue",
    "ValidationResult",
    "new_expense_id",
    # Budget models
    "BudgetAlert",
    "BudgetStatus",
    "BudgetSummary",
    "Notification",
    "NotificationSeverity",
    # Report models
    "CategoryBreakdown",
    "CsvExport",
    "MonthlyTotal",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
]
