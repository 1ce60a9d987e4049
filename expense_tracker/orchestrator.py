"""
Main Orchestrator for Expense Tracker

This module ties together all the components and defines the
user-facing operations:
1. Add / edit / delete an expense
2. Set the monthly budget
3. Search and filter the expense list
4. Dashboard figures (summary, trend, category breakdown)
5. CSV export

DESIGN DECISION: The orchestrator enforces the boundaries:
- Input is validated before the ledger is touched
- Deletion needs an explicit confirmation
- Every mutation is followed by a budget evaluation, unconditionally
- Every step is audited

Persistence failures are NOT swallowed here: a PersistenceError reaches
the caller, and the in-memory ledger keeps the change for the session.
"""

from collections.abc import Callable, Mapping
from datetime import date
from decimal import Decimal
from pathlib import Path
from typing import Any, Optional

from expense_tracker.audit import AuditLogger, configure_logging
from expense_tracker.config import get_settings
from expense_tracker.export import export_csv, export_filename
from expense_tracker.models.budget import (
    BudgetAlert,
    BudgetSummary,
    NotificationSeverity,
)
from expense_tracker.models.expense import ExpenseRecord
from expense_tracker.models.reports import CategoryBreakdown, CsvExport, MonthlyTotal
from expense_tracker.monitoring import BudgetMonitor, NotificationCenter, format_money
from expense_tracker.queries import (
    budget_summary,
    categories_in_use,
    category_breakdown,
    filter_expenses,
    sort_newest_first,
    trailing_series,
)
from expense_tracker.services.ledger import LedgerStore
from expense_tracker.services.storage import JsonFileKeyValueStore, KeyValueStore
from expense_tracker.validation import ExpenseValidationError, ExpenseValidator


ConfirmDelete = Callable[[ExpenseRecord], bool]


class ExpenseTracker:
    """
    Application service used by the presentation layer.

    Flow after every mutation (add, edit, delete, set budget):
    1. Ledger Store persists the full snapshot
    2. Action confirmation is shown (info notification)
    3. Budget Monitor evaluates the current month
    4. Any non-normal alert replaces the confirmation on screen

    The alert is shown last so an approaching limit is never hidden
    behind a routine "Added expense" message.
    """

    def __init__(
        self,
        ledger: LedgerStore,
        monitor: Optional[BudgetMonitor] = None,
        notifications: Optional[NotificationCenter] = None,
        validator: Optional[ExpenseValidator] = None,
        audit_logger: Optional[AuditLogger] = None,
        today: Callable[[], date] = date.today,
    ):
        self._ledger = ledger
        self._monitor = monitor or BudgetMonitor()
        self._notifications = notifications or NotificationCenter()
        self._today = today
        self._validator = validator or ExpenseValidator(today=today)
        self._audit_logger = audit_logger or AuditLogger()
        self._symbol = get_settings().budget.currency_symbol
        self._last_alert: Optional[BudgetAlert] = None

    @property
    def ledger(self) -> LedgerStore:
        return self._ledger

    @property
    def notifications(self) -> NotificationCenter:
        return self._notifications

    @property
    def last_alert(self) -> Optional[BudgetAlert]:
        """The alert from the most recent evaluation."""
        return self._last_alert

    # ------------------------------------------------------------------
    # Budget evaluation
    # ------------------------------------------------------------------

    def check_budget(self) -> BudgetAlert:
        """
        Evaluate the current month and surface the alert.

        Runs after every mutation, whether or not anything changed,
        so the same warning can be shown repeatedly.
        """
        alert = self._monitor.evaluate(
            self._ledger.list(),
            self._ledger.monthly_limit,
            self._today(),
        )
        self._last_alert = alert

        self._audit_logger.log_budget_evaluated(
            status=alert.status.value,
            percentage_used=str(alert.percentage_used.quantize(Decimal("0.01"))),
            total_spent=str(alert.total_spent),
            monthly_limit=str(alert.monthly_limit),
        )
        self._notifications.show_alert(alert)
        return alert

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def _validated(self, raw: Mapping[str, Any], action: str):
        try:
            return self._validator.require_valid(raw)
        except ExpenseValidationError as e:
            self._audit_logger.log_validation_failed(
                action,
                [
                    {"field": i.field, "type": i.issue_type, "message": i.message}
                    for i in e.issues
                ],
            )
            raise

    def add_expense(self, raw: Mapping[str, Any]) -> ExpenseRecord:
        """
        Validate and add an expense.

        Raises:
            ExpenseValidationError: Input rejected; ledger unchanged
            PersistenceError: Saved in memory but not on disk
        """
        data = self._validated(raw, "add")
        expense_id = self._ledger.add(data)
        record = self._ledger.find(expense_id)

        self._audit_logger.log_expense_added(
            expense_id=record.id,
            name=record.name,
            amount=str(record.amount),
            category=record.category,
        )
        self._notifications.show(
            f"Added expense: {record.name} ({format_money(record.amount, self._symbol)})"
        )
        self.check_budget()
        return record

    def edit_expense(self, expense_id: str, raw: Mapping[str, Any]) -> Optional[ExpenseRecord]:
        """
        Replace an expense with edited values.

        The edited expense gets a NEW id (remove, then insert).
        The new values are validated first, so a rejected edit leaves
        the original record in place.

        Returns:
            The new record, or None if `expense_id` is unknown

        Raises:
            ExpenseValidationError: Input rejected; ledger unchanged
            PersistenceError: Replaced in memory but not on disk
        """
        if self._ledger.find(expense_id) is None:
            return None

        data = self._validated(raw, "edit")
        new_id = self._ledger.replace(expense_id, data)
        record = self._ledger.find(new_id)

        self._audit_logger.log_expense_edited(expense_id, new_id, record.name)
        self._notifications.show(f"Expense updated: {record.name}")
        self.check_budget()
        return record

    def delete_expense(self, expense_id: str, confirm: ConfirmDelete) -> bool:
        """
        Delete an expense after explicit confirmation.

        `confirm` receives the record and returns True to proceed.
        Declining is not an error.

        Returns:
            True if the expense was deleted
        """
        record = self._ledger.find(expense_id)
        if record is None:
            return False

        if not confirm(record):
            self._audit_logger.log_delete_declined(expense_id)
            return False

        removed = self._ledger.remove(expense_id)
        if removed:
            self._audit_logger.log_expense_deleted(expense_id, record.name)
            self._notifications.show("Expense deleted successfully")
            self.check_budget()
        return removed

    def set_budget(self, raw_limit: Any) -> Decimal:
        """
        Change the monthly limit.

        Raises:
            ExpenseValidationError: Limit missing, not a number, not positive,
                or too large or too precise to store
        """
        try:
            limit = self._validator.validate_budget(raw_limit)
        except ExpenseValidationError as e:
            self._audit_logger.log_validation_failed(
                "set_budget",
                [{"field": i.field, "type": i.issue_type, "message": i.message} for i in e.issues],
            )
            raise

        old_limit = self._ledger.monthly_limit
        new_limit = self._ledger.set_monthly_limit(limit)

        self._audit_logger.log_budget_set(str(old_limit), str(new_limit))
        self._notifications.show(
            f"Monthly budget set to {format_money(new_limit, self._symbol)}"
        )
        self.check_budget()
        return new_limit

    # ------------------------------------------------------------------
    # Read-only views
    # ------------------------------------------------------------------

    def list_expenses(self, search_term: str = "", category: str = "") -> list[ExpenseRecord]:
        """Filtered expenses, newest first."""
        return sort_newest_first(
            filter_expenses(self._ledger.list(), search_term, category)
        )

    def categories(self) -> list[str]:
        return categories_in_use(self._ledger.list())

    def summary(self) -> BudgetSummary:
        return budget_summary(self._ledger.list(), self._ledger.monthly_limit, self._today())

    def monthly_trend(self, months: Optional[int] = None) -> list[MonthlyTotal]:
        months = months or get_settings().app.trend_months
        return trailing_series(self._ledger.list(), months, self._today())

    def current_breakdown(self) -> CategoryBreakdown:
        today = self._today()
        return category_breakdown(self._ledger.list(), today.year, today.month)

    def export(self) -> Optional[CsvExport]:
        """
        Export the ledger to CSV.

        An empty ledger is a warning, not an error: returns None and
        shows a warning notification.
        """
        snapshot = self._ledger.list()
        if not snapshot:
            self._audit_logger.log_export_skipped()
            self._notifications.show("No expenses to export", NotificationSeverity.WARNING)
            return None

        content = export_csv(snapshot)
        filename = export_filename(self._today(), get_settings().app.export_filename_prefix)
        self._audit_logger.log_export_completed(filename, len(snapshot))
        self._notifications.show("Expenses exported to CSV successfully")
        return CsvExport(filename=filename, content=content, row_count=len(snapshot))


def create_app_components(
    data_file: Optional[Path] = None,
    store: Optional[KeyValueStore] = None,
) -> ExpenseTracker:
    """
    Factory function to create a ready-to-use tracker.

    Args:
        data_file: JSON store location (defaults to settings)
        store: Use this store instead of a JSON file (tests)

    Returns:
        ExpenseTracker with the ledger loaded and the budget evaluated once
    """
    settings = get_settings()
    configure_logging(settings.app.log_level)

    audit_logger = AuditLogger()
    if store is None:
        store = JsonFileKeyValueStore(data_file or settings.storage.data_file)

    ledger = LedgerStore.load(
        store,
        default_monthly_limit=settings.budget.default_monthly_limit,
        audit_logger=audit_logger,
    )
    tracker = ExpenseTracker(ledger, audit_logger=audit_logger)
    tracker.check_budget()
    return tracker
