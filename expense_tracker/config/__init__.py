"""Configuration package."""

from expense_tracker.config.settings import (
    AppSettings,
    BudgetSettings,
    NotificationSettings,
    Settings,
    StorageSettings,
    get_settings,
    validate_all_settings,
)

__all__ = [
    "AppSettings",
    "BudgetSettings",
    "NotificationSettings",
    "Settings",
    "StorageSettings",
    "get_settings",
    "validate_all_settings",
]
