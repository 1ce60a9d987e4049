"""
Budget Monitor

Maps the share of the monthly limit already spent onto a threshold band:

    percentage_used < 70         NORMAL    (no notification)
    70 <= percentage_used < 90   WARNING   (warning)
    90 <= percentage_used < 100  CRITICAL  (critical)
    percentage_used >= 100       EXCEEDED  (danger)

DESIGN DECISION: The monitor is STATELESS. It does not remember the last
status, so it cannot debounce: callers evaluate after every mutation and
may show the same alert twice in a row. It only ever looks at the month
containing `today`.
"""

from collections.abc import Iterable
from datetime import date
from decimal import ROUND_HALF_UP, Decimal

from expense_tracker.config import get_settings
from expense_tracker.models.budget import BudgetAlert, BudgetStatus, NotificationSeverity
from expense_tracker.models.expense import ExpenseRecord
from expense_tracker.queries.aggregation import monthly_total, percentage_of


WARNING_THRESHOLD = Decimal("70")
CRITICAL_THRESHOLD = Decimal("90")
EXCEEDED_THRESHOLD = Decimal("100")

_SEVERITY_BY_STATUS = {
    BudgetStatus.NORMAL: None,
    BudgetStatus.WARNING: NotificationSeverity.WARNING,
    BudgetStatus.CRITICAL: NotificationSeverity.CRITICAL,
    BudgetStatus.EXCEEDED: NotificationSeverity.DANGER,
}


def classify(percentage_used: Decimal) -> BudgetStatus:
    """Threshold band for a percentage; lower bounds are inclusive."""
    if percentage_used >= EXCEEDED_THRESHOLD:
        return BudgetStatus.EXCEEDED
    if percentage_used >= CRITICAL_THRESHOLD:
        return BudgetStatus.CRITICAL
    if percentage_used >= WARNING_THRESHOLD:
        return BudgetStatus.WARNING
    return BudgetStatus.NORMAL


def format_money(amount: Decimal, symbol: str = "") -> str:
    return f"{symbol}{amount.quantize(Decimal('0.01'), rounding=ROUND_HALF_UP)}"


def format_percent(value: Decimal) -> str:
    """Whole percent, halves rounded up (69.5 -> '70')."""
    return str(value.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


class BudgetMonitor:
    """
    Evaluates current-month spending against the monthly limit.

    The currency symbol only affects message text.
    """

    def __init__(self, currency_symbol: str | None = None):
        if currency_symbol is None:
            currency_symbol = get_settings().budget.currency_symbol
        self._symbol = currency_symbol

    def evaluate_total(
        self,
        total_spent: Decimal,
        monthly_limit: Decimal,
        year: int,
        month: int,
    ) -> BudgetAlert:
        """Build the alert for an already-computed monthly total."""
        percentage = percentage_of(total_spent, monthly_limit)
        status = classify(percentage)

        return BudgetAlert(
            status=status,
            severity=_SEVERITY_BY_STATUS[status],
            message=self._message(status, total_spent, monthly_limit, percentage),
            year=year,
            month=month,
            total_spent=total_spent,
            monthly_limit=monthly_limit,
            percentage_used=percentage,
        )

    def evaluate(
        self,
        snapshot: Iterable[ExpenseRecord],
        monthly_limit: Decimal,
        today: date,
    ) -> BudgetAlert:
        """Evaluate the month containing `today`; past months are never considered."""
        total = monthly_total(snapshot, today.year, today.month)
        return self.evaluate_total(total, monthly_limit, today.year, today.month)

    def _message(
        self,
        status: BudgetStatus,
        total_spent: Decimal,
        monthly_limit: Decimal,
        percentage: Decimal,
    ) -> str | None:
        if status == BudgetStatus.WARNING:
            remaining = format_money(monthly_limit - total_spent, self._symbol)
            return (
                f"Warning: You've used {format_percent(percentage)}% of your monthly budget! "
                f"Only {remaining} remaining."
            )
        if status == BudgetStatus.CRITICAL:
            remaining = format_money(monthly_limit - total_spent, self._symbol)
            return (
                f"Critical: You've used {format_percent(percentage)}% of your budget! "
                f"Only {remaining} remaining."
            )
        if status == BudgetStatus.EXCEEDED:
            overage = format_money(total_spent - monthly_limit, self._symbol)
            return (
                f"Alert: Budget exceeded by {overage}! "
                f"You are {format_percent(percentage - EXCEEDED_THRESHOLD)}% over budget."
            )
        return None
