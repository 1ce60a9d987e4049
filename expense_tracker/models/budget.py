"""
Budget Status and Notification Models

The Budget Monitor produces a BudgetAlert; the Notification Center turns
alerts and action confirmations into a Notification the UI can render.
Neither model knows anything about how it is displayed.
"""

from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class BudgetStatus(str, Enum):
    """
    Threshold status for the current month.

    Each band includes its lower bound: exactly 70% is WARNING,
    exactly 100% is EXCEEDED.
    """
    NORMAL = "normal"        # below 70%
    WARNING = "warning"      # 70% up to 90%
    CRITICAL = "critical"    # 90% up to 100%
    EXCEEDED = "exceeded"    # 100% and above


class NotificationSeverity(str, Enum):
    """Severity of a user-facing notification."""
    INFO = "info"
    WARNING = "warning"
    CRITICAL = "critical"
    DANGER = "danger"

    @property
    def is_alert(self) -> bool:
        """Critical and danger notifications stay on screen longer."""
        return self in (NotificationSeverity.CRITICAL, NotificationSeverity.DANGER)


class BudgetAlert(BaseModel):
    """
    Result of one budget evaluation.

    Emitted after every ledger mutation and every limit change,
    whether or not the status changed since the previous evaluation.
    """
    model_config = ConfigDict(frozen=True)

    status: BudgetStatus
    severity: Optional[NotificationSeverity] = Field(
        default=None,
        description="None when spending is in the normal band"
    )
    message: Optional[str] = Field(
        default=None,
        description="Formatted alert text, None for the normal band"
    )

    year: int
    month: int = Field(ge=1, le=12)
    total_spent: Decimal
    monthly_limit: Decimal
    percentage_used: Decimal

    @property
    def remaining(self) -> Decimal:
        return self.monthly_limit - self.total_spent

    @property
    def overage(self) -> Decimal:
        return max(self.total_spent - self.monthly_limit, Decimal("0"))

    @property
    def should_notify(self) -> bool:
        return self.severity is not None


class BudgetSummary(BaseModel):
    """Figures for the dashboard cards (spent, limit, remaining, progress)."""
    model_config = ConfigDict(frozen=True)

    year: int
    month: int = Field(ge=1, le=12)
    total_spent: Decimal
    monthly_limit: Decimal
    remaining: Decimal = Field(description="Negative once the limit is exceeded")
    percentage_used: Decimal
    progress_percentage: Decimal = Field(
        ge=0,
        le=100,
        description="percentage_used capped at 100, for progress bars"
    )


class Notification(BaseModel):
    """
    The single visible notification.

    dismiss_at is the auto-dismiss deadline; a manual dismiss or a newer
    notification supersedes it.
    """
    model_config = ConfigDict(frozen=True)

    message: str
    severity: NotificationSeverity = NotificationSeverity.INFO
    shown_at: datetime
    dismiss_at: datetime

    def is_visible(self, now: datetime) -> bool:
        return now < self.dismiss_at
