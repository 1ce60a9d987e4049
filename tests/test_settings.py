"""Tests for environment-driven settings."""

from decimal import Decimal
from pathlib import Path

import pytest

from expense_tracker.config import (
    AppSettings,
    BudgetSettings,
    NotificationSettings,
    StorageSettings,
    validate_all_settings,
)


class TestDefaults:
    """Tests for values used when nothing is configured."""

    def test_budget_defaults(self, monkeypatch):
        monkeypatch.delenv("BUDGET_DEFAULT_MONTHLY_LIMIT", raising=False)
        monkeypatch.delenv("BUDGET_CURRENCY_SYMBOL", raising=False)
        settings = BudgetSettings()
        assert settings.default_monthly_limit == Decimal("5000")
        assert settings.currency_symbol == "₹"

    def test_notification_defaults(self, monkeypatch):
        monkeypatch.delenv("NOTIFICATION_DEFAULT_TIMEOUT_SECONDS", raising=False)
        monkeypatch.delenv("NOTIFICATION_ALERT_TIMEOUT_SECONDS", raising=False)
        settings = NotificationSettings()
        assert settings.default_timeout_seconds == 5.0
        assert settings.alert_timeout_seconds == 8.0


class TestEnvironmentOverrides:
    """Tests for prefixed environment variables."""

    def test_budget_from_env(self, monkeypatch):
        monkeypatch.setenv("BUDGET_DEFAULT_MONTHLY_LIMIT", "2500")
        assert BudgetSettings().default_monthly_limit == Decimal("2500")

    def test_storage_path_from_env(self, monkeypatch, tmp_path):
        monkeypatch.setenv("EXPENSE_STORE_DATA_FILE", str(tmp_path / "store.json"))
        assert StorageSettings().data_file == Path(tmp_path / "store.json")

    def test_non_positive_budget_rejected(self, monkeypatch):
        monkeypatch.setenv("BUDGET_DEFAULT_MONTHLY_LIMIT", "0")
        with pytest.raises(ValueError):
            BudgetSettings()

    def test_bad_log_level_rejected(self, monkeypatch):
        monkeypatch.setenv("LOG_LEVEL", "LOUD")
        with pytest.raises(ValueError):
            AppSettings()

    def test_validate_all_settings_reports_failure(self, monkeypatch):
        monkeypatch.setenv("BUDGET_DEFAULT_MONTHLY_LIMIT", "-1")
        status = validate_all_settings()
        assert status["budget"] is False
        assert "budget_error" in status
        assert status["storage"] is True
