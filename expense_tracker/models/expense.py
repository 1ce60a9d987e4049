"""
Core Data Models for Expense Tracker

These models define the strict schemas for all data flowing through the system.
They are designed to:
1. Enforce type safety at runtime
2. Provide clear validation error messages
3. Be serializable for storage and export

DESIGN DECISION: Categories are an OPEN set of strings.
The suggested list below only feeds selectors and validator warnings;
records carrying any other label are stored and aggregated like the rest.
"""

import datetime
from decimal import Decimal
from typing import Optional
from uuid import uuid4

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
)


# =============================================================================
# CATEGORIES - suggestions, not an enumeration
# =============================================================================

SUGGESTED_CATEGORIES: tuple[str, ...] = (
    "food",
    "transport",
    "books",
    "entertainment",
    "utilities",
    "rent",
    "clothing",
    "health",
    "other",
)


def new_expense_id() -> str:
    """Fresh opaque identifier (122 bits of randomness)."""
    return uuid4().hex


# Amounts and limits fit in 12 digits, 2 of them after the point
MAX_DIGITS = 12
MAX_DECIMAL_PLACES = 2
MAX_AMOUNT = Decimal("10000000000")


def _strip(value):
    return value.strip() if isinstance(value, str) else value


# =============================================================================
# EXPENSE MODELS
# =============================================================================

class ExpenseInput(BaseModel):
    """
    User-supplied expense data, before an identifier is assigned.

    This is what the add and edit forms produce once validated.
    Amounts are limited to two fractional digits: we reject 12.345
    rather than silently rounding it.

    Name and category are stripped; notes are kept exactly as typed.
    """
    model_config = ConfigDict(frozen=True)

    name: str = Field(
        ...,
        min_length=1,
        max_length=200,
        description="Display label"
    )
    amount: Decimal = Field(
        ...,
        ge=0,
        max_digits=MAX_DIGITS,
        decimal_places=MAX_DECIMAL_PLACES,
        allow_inf_nan=False,
        description="Amount spent"
    )
    category: str = Field(
        ...,
        min_length=1,
        max_length=50,
        description="Category label (open set)"
    )
    date: datetime.date = Field(
        ...,
        description="Calendar date of the expense"
    )
    notes: Optional[str] = Field(
        default=None,
        max_length=1000,
        description="Optional free text"
    )

    @field_validator('name', 'category', mode='before')
    @classmethod
    def strip_labels(cls, v):
        return _strip(v)


class ExpenseRecord(BaseModel):
    """
    A single stored transaction.

    CRITICAL: Records are immutable. Editing an expense removes the
    record and inserts a new one, which gets a NEW id.

    Loading is more lenient than ExpenseInput on precision because
    older stores wrote binary floats (e.g. 12.3 stored as a JSON number),
    but the magnitude bound is the same.
    """
    model_config = ConfigDict(frozen=True)

    id: str = Field(
        default_factory=new_expense_id,
        min_length=1,
        description="Opaque unique identifier"
    )
    name: str = Field(..., min_length=1)
    amount: Decimal = Field(..., ge=0, lt=MAX_AMOUNT, allow_inf_nan=False)
    category: str = Field(..., min_length=1)
    date: datetime.date
    notes: Optional[str] = None

    @field_validator('id', 'name', 'category', mode='before')
    @classmethod
    def strip_labels(cls, v):
        return _strip(v)

    @classmethod
    def from_input(cls, data: ExpenseInput, expense_id: Optional[str] = None) -> "ExpenseRecord":
        """Create a record from validated input, assigning a fresh id unless given."""
        return cls(
            id=expense_id or new_expense_id(),
            **data.model_dump(),
        )

    def to_input(self) -> ExpenseInput:
        """The editable part of this record (used to pre-fill the edit form)."""
        return ExpenseInput.model_construct(**self.model_dump(exclude={"id"}))

    @property
    def notes_text(self) -> str:
        """Notes with absent treated as empty."""
        return self.notes or ""


class BudgetConfig(BaseModel):
    """The single active monthly spending limit."""
    model_config = ConfigDict(frozen=True)

    monthly_limit: Decimal = Field(
        ...,
        gt=0,
        max_digits=MAX_DIGITS,
        decimal_places=MAX_DECIMAL_PLACES,
        allow_inf_nan=False,
        description="Spending ceiling for the current calendar month"
    )


# =============================================================================
# VALIDATION MODELS
# =============================================================================

class ValidationIssue(BaseModel):
    """A single validation issue found."""

    field: str = Field(
        ...,
        description="Field with the issue"
    )
    issue_type: str = Field(
        ...,
        description="Type of issue (e.g., 'missing', 'invalid_format', 'unknown_category')"
    )
    message: str = Field(
        ...,
        description="Human-readable description of the issue"
    )
    severity: str = Field(
        ...,
        pattern="^(error|warning|info)$",
        description="Issue severity"
    )
    suggested_fix: Optional[str] = Field(
        default=None,
        description="Suggested fix if available"
    )


class ValidationResult(BaseModel):
    """
    Result of validating raw form input.

    `expense` is only set when there are no error-level issues.
    """

    expense: Optional[ExpenseInput] = None
    issues: list[ValidationIssue] = Field(
        default_factory=list,
        description="All validation issues found"
    )

    @property
    def is_valid(self) -> bool:
        return self.expense is not None and not self.has_errors

    @property
    def has_errors(self) -> bool:
        """Check if there are any error-level issues."""
        return any(issue.severity == "error" for issue in self.issues)

    @property
    def error_count(self) -> int:
        """Count error-level issues."""
        return sum(1 for issue in self.issues if issue.severity == "error")

    @property
    def warnings(self) -> list[str]:
        return [issue.message for issue in self.issues if issue.severity == "warning"]
