"""Aggregation and export result models."""

from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field


class MonthlyTotal(BaseModel):
    """One point of a trailing series."""
    model_config = ConfigDict(frozen=True)

    label: str = Field(description="e.g. 'Oct 2023'")
    year: int
    month: int = Field(ge=1, le=12)
    total: Decimal


class CategoryBreakdown(BaseModel):
    """
    Spending per category for one calendar month.

    `total` is the sum of all groups and equals the monthly total
    for the same period.
    """
    model_config = ConfigDict(frozen=True)

    year: int
    month: int = Field(ge=1, le=12)
    totals: dict[str, Decimal] = Field(default_factory=dict)
    total: Decimal = Decimal("0")

    def share(self, category: str) -> Decimal:
        """Percentage of the month's spending in `category` (0 when nothing was spent)."""
        if not self.total:
            return Decimal("0")
        return self.totals.get(category, Decimal("0")) / self.total * 100


class CsvExport(BaseModel):
    """A rendered CSV document ready to offer as a download."""
    model_config = ConfigDict(frozen=True)

    filename: str
    content: str
    row_count: int = Field(ge=1)

    @property
    def mime_type(self) -> str:
        return "text/csv"
