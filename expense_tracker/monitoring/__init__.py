"""Budget monitoring and notifications."""

from expense_tracker.monitoring.budget_monitor import (
    CRITICAL_THRESHOLD,
    EXCEEDED_THRESHOLD,
    WARNING_THRESHOLD,
    BudgetMonitor,
    classify,
    format_money,
    format_percent,
)
from expense_tracker.monitoring.notifications import NotificationCenter

__all__ = [
    "CRITICAL_THRESHOLD",
    "EXCEEDED_THRESHOLD",
    "WARNING_THRESHOLD",
    "BudgetMonitor",
    "NotificationCenter",
    "classify",
    "format_money",
    "format_percent",
]
