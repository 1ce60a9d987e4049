"""Aggregation and filtering over ledger snapshots."""

from expense_tracker.queries.aggregation import (
    budget_summary,
    category_breakdown,
    month_label,
    monthly_total,
    shift_month,
    trailing_series,
)
from expense_tracker.queries.filters import (
    categories_in_use,
    filter_expenses,
    matches,
    sort_newest_first,
)

__all__ = [
    "budget_summary",
    "categories_in_use",
    "category_breakdown",
    "filter_expenses",
    "matches",
    "month_label",
    "monthly_total",
    "shift_month",
    "sort_newest_first",
    "trailing_series",
]
