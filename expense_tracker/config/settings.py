"""
Configuration Management for Expense Tracker

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: All configuration is centralized here.
Defaults reproduce the behaviour users already know (5000 monthly budget,
5 second / 8 second notification timeouts), so a fresh install needs no .env.
"""

from decimal import Decimal
from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class StorageSettings(BaseSettings):
    """Durable key-value store configuration."""

    model_config = SettingsConfigDict(
        env_prefix="EXPENSE_STORE_",
        extra="ignore"
    )

    data_file: Path = Field(
        default=Path("data/expense_store.json"),
        description="JSON file backing the key-value store"
    )


class BudgetSettings(BaseSettings):
    """Budget defaults."""

    model_config = SettingsConfigDict(
        env_prefix="BUDGET_",
        extra="ignore"
    )

    default_monthly_limit: Decimal = Field(
        default=Decimal("5000"),
        gt=0,
        max_digits=12,
        decimal_places=2,
        allow_inf_nan=False,
        description="Monthly limit used until the user sets one"
    )
    currency_symbol: str = Field(
        default="₹",
        max_length=5,
        description="Symbol prefixed to money in messages"
    )


class NotificationSettings(BaseSettings):
    """Notification auto-dismiss timing."""

    model_config = SettingsConfigDict(
        env_prefix="NOTIFICATION_",
        extra="ignore"
    )

    default_timeout_seconds: float = Field(
        default=5.0,
        gt=0,
        description="Auto-dismiss delay for info and warning notifications"
    )
    alert_timeout_seconds: float = Field(
        default=8.0,
        gt=0,
        description="Auto-dismiss delay for critical and danger notifications"
    )


class AppSettings(BaseSettings):
    """
    Main application settings.

    Loads configuration from environment variables and .env file.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    # Environment
    app_environment: str = Field(
        default="development",
        description="Application environment"
    )
    debug_mode: bool = Field(
        default=False,
        description="Enable debug mode"
    )
    log_level: str = Field(
        default="INFO",
        pattern="^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$",
        description="Minimum level for structured logs"
    )

    # Dashboard
    trend_months: int = Field(
        default=6,
        ge=1,
        le=36,
        description="Number of months shown in the spending trend"
    )
    export_filename_prefix: str = Field(
        default="expenses",
        min_length=1,
        description="Prefix of exported CSV file names"
    )


class Settings(BaseSettings):
    """
    Root settings container.

    Aggregates all sub-settings for easy access.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    @property
    def storage(self) -> StorageSettings:
        return StorageSettings()

    @property
    def budget(self) -> BudgetSettings:
        return BudgetSettings()

    @property
    def notifications(self) -> NotificationSettings:
        return NotificationSettings()

    @property
    def app(self) -> AppSettings:
        return AppSettings()


@lru_cache()
def get_settings() -> Settings:
    """
    Get application settings (cached).

    Call get_settings.cache_clear() to reload if needed.
    """
    return Settings()


def validate_all_settings() -> dict[str, bool]:
    """
    Validate all settings are properly configured.

    Returns a dict of {setting_name: is_valid}, with a
    "<name>_error" entry for each failure. Useful for startup checks.
    """
    results = {}
    settings = get_settings()

    for name in ("storage", "budget", "notifications", "app"):
        try:
            getattr(settings, name)
            results[name] = True
        except ValueError as e:
            results[name] = False
            results[f"{name}_error"] = str(e)

    return results
