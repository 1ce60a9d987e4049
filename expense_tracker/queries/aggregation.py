"""
Aggregation Engine

DESIGN DECISION: Aggregation is a set of PURE functions over a snapshot.
They never read the store, never read the clock (callers pass the
reference date) and never fail: an empty snapshot yields zero totals.

All arithmetic is Decimal, so monthly_total and the sum of the
category breakdown agree to the cent.
"""

from collections.abc import Iterable
from datetime import date
from decimal import Decimal

from expense_tracker.models.expense import ExpenseRecord
from expense_tracker.models.reports import CategoryBreakdown, MonthlyTotal
from expense_tracker.models.budget import BudgetSummary


ZERO = Decimal("0")
HUNDRED = Decimal("100")


def in_month(record: ExpenseRecord, year: int, month: int) -> bool:
    """True if the record's date falls in the given calendar month."""
    return record.date.year == year and record.date.month == month


def month_records(snapshot: Iterable[ExpenseRecord], year: int, month: int) -> list[ExpenseRecord]:
    return [record for record in snapshot if in_month(record, year, month)]


def monthly_total(snapshot: Iterable[ExpenseRecord], year: int, month: int) -> Decimal:
    """Sum of amounts dated in the given calendar month."""
    return sum(
        (record.amount for record in month_records(snapshot, year, month)),
        ZERO,
    )


def category_breakdown(snapshot: Iterable[ExpenseRecord], year: int, month: int) -> CategoryBreakdown:
    """
    Group one month's spending by category.

    Categories appear in order of first occurrence in the snapshot.
    """
    totals: dict[str, Decimal] = {}
    for record in month_records(snapshot, year, month):
        totals[record.category] = totals.get(record.category, ZERO) + record.amount

    return CategoryBreakdown(
        year=year,
        month=month,
        totals=totals,
        total=sum(totals.values(), ZERO),
    )


def shift_month(year: int, month: int, offset: int) -> tuple[int, int]:
    """
    Move a (year, month) pair by `offset` months.

    shift_month(2024, 1, -2) == (2023, 11)
    """
    index = year * 12 + (month - 1) + offset
    return index // 12, index % 12 + 1


def month_label(year: int, month: int) -> str:
    """'Oct 2023' style label."""
    return date(year, month, 1).strftime("%b %Y")


def trailing_series(
    snapshot: Iterable[ExpenseRecord],
    months_count: int,
    anchor: date,
) -> list[MonthlyTotal]:
    """
    Per-month totals for the `months_count` months ending at the anchor
    month, oldest first.
    """
    records = list(snapshot)
    series = []
    for offset in range(months_count - 1, -1, -1):
        year, month = shift_month(anchor.year, anchor.month, -offset)
        series.append(MonthlyTotal(
            label=month_label(year, month),
            year=year,
            month=month,
            total=monthly_total(records, year, month),
        ))
    return series


def percentage_of(amount: Decimal, limit: Decimal) -> Decimal:
    """amount / limit * 100, exact."""
    return amount / limit * HUNDRED


def budget_summary(
    snapshot: Iterable[ExpenseRecord],
    monthly_limit: Decimal,
    today: date,
) -> BudgetSummary:
    """Spent, remaining and progress for the month containing `today`."""
    spent = monthly_total(snapshot, today.year, today.month)
    percentage = percentage_of(spent, monthly_limit)
    return BudgetSummary(
        year=today.year,
        month=today.month,
        total_spent=spent,
        monthly_limit=monthly_limit,
        remaining=monthly_limit - spent,
        percentage_used=percentage,
        progress_percentage=min(percentage, HUNDRED),
    )
