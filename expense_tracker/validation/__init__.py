"""Input validation package."""

from expense_tracker.validation.validator import (
    ExpenseValidationError,
    ExpenseValidator,
    parse_amount,
)

__all__ = ["ExpenseValidationError", "ExpenseValidator", "parse_amount"]
