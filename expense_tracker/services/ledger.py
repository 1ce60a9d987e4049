"""
Ledger Store

DESIGN DECISION: One object owns the authoritative expense set and the
monthly limit. It is created by an explicit load() from the durable store
and writes a FULL snapshot back after every mutation.

TRADEOFFS:
- Rewriting the whole ledger on every change is O(n) per write
  (fine for a personal ledger of a few thousand rows)
- No append log, so there is nothing to compact or replay

Storage layout (key -> value):
- "expenses"      JSON array of expense objects
- "monthlyBudget" the limit as decimal text
"""

import json
from decimal import Decimal, InvalidOperation
from typing import Optional

import structlog
from pydantic import TypeAdapter, ValidationError

from expense_tracker.audit import AuditLogger
from expense_tracker.config import get_settings
from expense_tracker.models.expense import BudgetConfig, ExpenseInput, ExpenseRecord
from expense_tracker.services.storage.interface import (
    DuplicateError,
    KeyValueStore,
    StorageError,
)


EXPENSES_KEY = "expenses"
BUDGET_KEY = "monthlyBudget"

_records_adapter = TypeAdapter(list[ExpenseRecord])

logger = structlog.get_logger(__name__)


class LedgerStore:
    """
    In-memory expense ledger backed by a KeyValueStore.

    Records are kept in insertion order; that order is what list()
    returns and what the exporter uses to break date ties.
    """

    def __init__(
        self,
        store: KeyValueStore,
        monthly_limit: Optional[Decimal] = None,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._store = store
        self._records: dict[str, ExpenseRecord] = {}
        self._budget = BudgetConfig(
            monthly_limit=monthly_limit or get_settings().budget.default_monthly_limit
        )
        self._audit_logger = audit_logger

    # ------------------------------------------------------------------
    # Initialization
    # ------------------------------------------------------------------

    @classmethod
    def load(
        cls,
        store: KeyValueStore,
        default_monthly_limit: Optional[Decimal] = None,
        audit_logger: Optional[AuditLogger] = None,
    ) -> "LedgerStore":
        """
        Build a ledger from the durable store.

        Never raises for bad stored content: an unreadable store or an
        undecodable document yields an empty ledger, and a bad limit
        falls back to the default.
        """
        default_limit = default_monthly_limit or get_settings().budget.default_monthly_limit
        ledger = cls(store, monthly_limit=default_limit, audit_logger=audit_logger)

        records, skipped = ledger._read_expenses()
        for record in records:
            if record.id in ledger._records:
                logger.warning("duplicate_expense_id_on_load", expense_id=record.id)
                skipped += 1
                continue
            ledger._records[record.id] = record

        stored_limit = ledger._read_limit()
        if stored_limit is not None:
            ledger._budget = BudgetConfig(monthly_limit=stored_limit)

        if audit_logger:
            audit_logger.log_ledger_loaded(
                expense_count=len(ledger._records),
                skipped=skipped,
                monthly_limit=str(ledger.monthly_limit),
            )
        return ledger

    def _read_key(self, key: str) -> Optional[str]:
        try:
            return self._store.get(key)
        except StorageError as e:
            logger.error("ledger_read_failed", key=key, error=str(e))
            if self._audit_logger:
                self._audit_logger.log_ledger_load_failed(key, str(e))
            return None

    def _read_expenses(self) -> tuple[list[ExpenseRecord], int]:
        """Decode the stored ledger. Returns (records, number_of_skipped_entries)."""
        raw = self._read_key(EXPENSES_KEY)
        if not raw:
            return [], 0

        try:
            payload = json.loads(raw)
        except json.JSONDecodeError as e:
            logger.error("ledger_corrupt", key=EXPENSES_KEY, error=str(e))
            if self._audit_logger:
                self._audit_logger.log_ledger_load_failed(EXPENSES_KEY, str(e))
            return [], 0

        if not isinstance(payload, list):
            logger.error("ledger_corrupt", key=EXPENSES_KEY, error="not a JSON array")
            if self._audit_logger:
                self._audit_logger.log_ledger_load_failed(EXPENSES_KEY, "not a JSON array")
            return [], 0

        records = []
        skipped = 0
        for index, item in enumerate(payload):
            try:
                records.append(ExpenseRecord.model_validate(item))
            except ValidationError as e:
                # Skip malformed entries, keep the rest of the ledger
                skipped += 1
                logger.warning(
                    "expense_record_skipped",
                    index=index,
                    errors=e.error_count(),
                )
        return records, skipped

    def _read_limit(self) -> Optional[Decimal]:
        raw = self._read_key(BUDGET_KEY)
        if raw is None:
            return None
        try:
            limit = Decimal(raw.strip())
        except InvalidOperation:
            logger.warning("budget_limit_unparseable", value=raw)
            return None
        try:
            return BudgetConfig(monthly_limit=limit).monthly_limit
        except ValidationError:
            logger.warning("budget_limit_out_of_range", value=raw)
            return None

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def _write(self, key: str, value: str) -> None:
        try:
            self._store.set(key, value)
        except StorageError as e:
            logger.error("ledger_write_failed", key=key, error=str(e))
            if self._audit_logger:
                self._audit_logger.log_save_failed(key, str(e))
            raise

    def encode_expenses(self) -> str:
        """The stored form of the current ledger (JSON array, insertion order)."""
        return _records_adapter.dump_json(list(self._records.values())).decode("utf-8")

    def flush(self) -> None:
        """
        Write the full expense snapshot. The limit is written separately
        by set_monthly_limit().

        Raises:
            PersistenceError: If the store rejects the write. The in-memory
                ledger is left as it is.
        """
        self._write(EXPENSES_KEY, self.encode_expenses())

    # ------------------------------------------------------------------
    # Ledger operations
    # ------------------------------------------------------------------

    def add(self, data: ExpenseInput) -> str:
        """
        Insert a new record with a fresh id and persist.

        Returns:
            The new record's id

        Raises:
            DuplicateError: If the generated id is already taken (a bug)
            PersistenceError: If the snapshot could not be written
        """
        record = ExpenseRecord.from_input(data)
        if record.id in self._records:
            raise DuplicateError(f"Expense id collision: {record.id}")

        self._records[record.id] = record
        self.flush()
        return record.id

    def remove(self, expense_id: str) -> bool:
        """
        Remove a record if present and persist.

        Returns:
            True if a record was removed, False for an unknown id
        """
        if self._records.pop(expense_id, None) is None:
            return False
        self.flush()
        return True

    def replace(self, expense_id: str, data: ExpenseInput) -> Optional[str]:
        """
        Remove a record and insert `data` under a fresh id, with ONE write.

        The new record goes to the end of storage order, exactly as a
        remove followed by an add would leave it.

        Returns:
            The new record's id, or None for an unknown id

        Raises:
            PersistenceError: If the snapshot could not be written. The
                in-memory ledger already holds the new record.
        """
        if expense_id not in self._records:
            return None

        record = ExpenseRecord.from_input(data)
        if record.id in self._records:
            raise DuplicateError(f"Expense id collision: {record.id}")

        del self._records[expense_id]
        self._records[record.id] = record
        self.flush()
        return record.id

    def list(self) -> tuple[ExpenseRecord, ...]:
        """Immutable snapshot in storage order."""
        return tuple(self._records.values())

    def find(self, expense_id: str) -> Optional[ExpenseRecord]:
        return self._records.get(expense_id)

    def __len__(self) -> int:
        return len(self._records)

    def __contains__(self, expense_id: object) -> bool:
        return expense_id in self._records

    # ------------------------------------------------------------------
    # Budget
    # ------------------------------------------------------------------

    @property
    def monthly_limit(self) -> Decimal:
        return self._budget.monthly_limit

    def set_monthly_limit(self, limit: Decimal) -> Decimal:
        """
        Replace the monthly limit and persist it.

        Raises:
            pydantic.ValidationError: If the limit is not a finite positive number
            PersistenceError: If the write fails
        """
        self._budget = BudgetConfig(monthly_limit=limit)
        self._write(BUDGET_KEY, str(self._budget.monthly_limit))
        return self._budget.monthly_limit
