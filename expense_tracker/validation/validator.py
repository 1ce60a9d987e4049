"""
Two-Stage Input Validation

DESIGN DECISION: Form input is validated in two distinct stages
BEFORE anything touches the ledger.

STAGE 1 - SCHEMA VALIDATION:
- Required field presence (name, amount, category, date)
- Amount is a finite, non-negative number below 10 billion with at most 2 decimals
- Date is a real calendar date
A failure here is an error: the expense is not created.

STAGE 2 - SEMANTIC VALIDATION:
- Category outside the suggested list
- Date in the future
These are warnings only. The ledger accepts any category label and
any date, exactly as users are used to.

IMPORTANT: Validation NEVER silently fixes values (no rounding of
amounts, no guessing of dates). It reports issues for the user to fix.
"""

from collections.abc import Callable, Iterable, Mapping
from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Any, Optional

from pydantic import ValidationError

from expense_tracker.models.expense import (
    MAX_AMOUNT,
    MAX_DECIMAL_PLACES,
    SUGGESTED_CATEGORIES,
    BudgetConfig,
    ExpenseInput,
    ValidationIssue,
    ValidationResult,
)


REQUIRED_FIELDS = ("name", "amount", "category", "date")


class ExpenseValidationError(ValueError):
    """Input was rejected; `issues` lists every error and warning found."""

    def __init__(self, issues: list[ValidationIssue]):
        self.issues = issues
        errors = [issue.message for issue in issues if issue.severity == "error"]
        super().__init__("; ".join(errors) or "Invalid input")


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def parse_amount(value: Any) -> Decimal:
    """
    Parse user-entered money.

    Raises:
        InvalidOperation: For anything that is not a finite number
    """
    if isinstance(value, bool):
        raise InvalidOperation(f"Not a number: {value!r}")
    if isinstance(value, Decimal):
        amount = value
    elif isinstance(value, (int, float)):
        amount = Decimal(str(value))
    else:
        amount = Decimal(str(value).strip())
    if not amount.is_finite():
        raise InvalidOperation(f"Not a finite number: {value!r}")
    return amount


class ExpenseValidator:
    """
    Validates raw add/edit form input through a two-stage pipeline.
    """

    def __init__(
        self,
        known_categories: Iterable[str] = SUGGESTED_CATEGORIES,
        today: Callable[[], date] = date.today,
    ):
        self._known_categories = frozenset(known_categories)
        self._today = today

    def _validate_schema(
        self,
        raw: Mapping[str, Any],
    ) -> tuple[Optional[ExpenseInput], list[ValidationIssue]]:
        """
        Stage 1: Schema validation.

        Returns: (expense_or_none, list_of_issues)
        """
        issues = []
        flagged = set()

        for field in REQUIRED_FIELDS:
            if _is_blank(raw.get(field)):
                issues.append(ValidationIssue(
                    field=field,
                    issue_type="missing",
                    message=f"{field.capitalize()} is required",
                    severity="error",
                ))
                flagged.add(field)

        candidate = dict(raw)

        if "amount" not in flagged:
            try:
                candidate["amount"] = parse_amount(raw["amount"])
            except (InvalidOperation, ValueError):
                issues.append(ValidationIssue(
                    field="amount",
                    issue_type="invalid_format",
                    message=f"Amount '{raw['amount']}' is not a number",
                    severity="error",
                    suggested_fix="Enter the amount in digits, e.g. 250 or 99.50",
                ))
                flagged.add("amount")

        if _is_blank(candidate.get("notes")):
            candidate["notes"] = None

        if flagged:
            return None, issues

        try:
            expense = ExpenseInput.model_validate(candidate)
        except ValidationError as e:
            for error in e.errors():
                field = str(error["loc"][0]) if error["loc"] else "expense"
                issues.append(ValidationIssue(
                    field=field,
                    issue_type=error["type"],
                    message=f"{field.capitalize()}: {error['msg']}",
                    severity="error",
                ))
            return None, issues

        return expense, issues

    def _validate_semantic(self, expense: ExpenseInput) -> list[ValidationIssue]:
        """
        Stage 2: Semantic validation (warnings only).
        """
        issues = []

        if self._known_categories and expense.category not in self._known_categories:
            issues.append(ValidationIssue(
                field="category",
                issue_type="unknown_category",
                message=f"Category '{expense.category}' is not one of the usual categories",
                severity="warning",
                suggested_fix="Check the spelling, or keep it as a new category",
            ))

        if expense.date > self._today():
            issues.append(ValidationIssue(
                field="date",
                issue_type="future_date",
                message=f"Date ({expense.date.isoformat()}) is in the future",
                severity="warning",
                suggested_fix="Please verify the date is correct",
            ))

        return issues

    def validate(self, raw: Mapping[str, Any]) -> ValidationResult:
        """
        Run the full pipeline.

        Stage 2 only runs when stage 1 produced an expense.
        """
        expense, issues = self._validate_schema(raw)
        if expense is not None:
            issues.extend(self._validate_semantic(expense))
        return ValidationResult(expense=expense, issues=issues)

    def require_valid(self, raw: Mapping[str, Any]) -> ExpenseInput:
        """
        Validate and return the expense, or raise.

        Raises:
            ExpenseValidationError: If there is any error-level issue
        """
        result = self.validate(raw)
        if not result.is_valid:
            raise ExpenseValidationError(result.issues)
        return result.expense

    def validate_budget(self, raw_limit: Any) -> Decimal:
        """
        Validate a new monthly limit.

        Raises:
            ExpenseValidationError: If the limit is missing, not a number,
                not positive, or too large or too precise to store
        """
        if _is_blank(raw_limit):
            raise ExpenseValidationError([ValidationIssue(
                field="monthly_limit",
                issue_type="missing",
                message="Monthly budget is required",
                severity="error",
            )])

        try:
            limit = parse_amount(raw_limit)
        except (InvalidOperation, ValueError):
            raise ExpenseValidationError([ValidationIssue(
                field="monthly_limit",
                issue_type="invalid_format",
                message=f"Monthly budget '{raw_limit}' is not a number",
                severity="error",
            )])

        try:
            return BudgetConfig(monthly_limit=limit).monthly_limit
        except ValidationError:
            if limit <= 0:
                message = "Monthly budget must be greater than zero"
            else:
                message = (
                    f"Monthly budget must be below {MAX_AMOUNT:,} "
                    f"with at most {MAX_DECIMAL_PLACES} decimal places"
                )
            raise ExpenseValidationError([ValidationIssue(
                field="monthly_limit",
                issue_type="out_of_range",
                message=message,
                severity="error",
            )])

    def get_user_friendly_summary(self, result: ValidationResult) -> str:
        """
        Generate a user-friendly summary of validation results.
        """
        if result.is_valid and not result.warnings:
            return "All checks passed."

        lines = []

        if result.has_errors:
            lines.append("The expense could not be saved:")
            for issue in result.issues:
                if issue.severity == "error":
                    lines.append(f"   • {issue.message}")
                    if issue.suggested_fix:
                        lines.append(f"     {issue.suggested_fix}")

        if result.warnings:
            if lines:
                lines.append("")
            lines.append("Please verify the following:")
            for warning in result.warnings:
                lines.append(f"   • {warning}")

        return "\n".join(lines)
