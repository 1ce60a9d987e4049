"""
CSV Exporter

Serializes a ledger snapshot to CSV:

    Date,Name,Category,Amount,Notes
    2024-03-05,Coffee,food,3.50,"Said ""hi"" twice"

Rules:
- rows sorted by date, newest first; same-date rows keep snapshot order
- amounts always carry exactly two fractional digits
- non-empty notes are ALWAYS quoted, embedded quotes doubled
- name and category are quoted only when they contain a comma,
  a quote or a line break
- an empty snapshot is rejected (EmptyExportError); callers are
  expected to check first and warn the user instead
"""

import csv
import io
from collections.abc import Iterable
from datetime import date
from decimal import ROUND_HALF_UP, Decimal

from expense_tracker.models.expense import ExpenseRecord
from expense_tracker.queries.filters import sort_newest_first


CSV_HEADER = ("Date", "Name", "Category", "Amount", "Notes")

_NEEDS_QUOTING = (",", '"', "\n", "\r")


class EmptyExportError(ValueError):
    """Export was requested for a ledger with no records."""
    pass


def quote(value: str) -> str:
    """Wrap in double quotes, doubling embedded quotes."""
    return '"' + value.replace('"', '""') + '"'


def quote_if_needed(value: str) -> str:
    if any(char in value for char in _NEEDS_QUOTING):
        return quote(value)
    return value


def format_amount(amount: Decimal) -> str:
    return str(amount.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))


def record_to_row(record: ExpenseRecord) -> str:
    """One CSV line (without the line terminator)."""
    notes = record.notes_text
    return ",".join([
        record.date.isoformat(),
        quote_if_needed(record.name),
        quote_if_needed(record.category),
        format_amount(record.amount),
        quote(notes) if notes else "",
    ])


def export_csv(snapshot: Iterable[ExpenseRecord]) -> str:
    """
    Render a snapshot as a CSV document.

    Raises:
        EmptyExportError: If the snapshot has no records
    """
    records = sort_newest_first(snapshot)
    if not records:
        raise EmptyExportError("No expenses to export")

    lines = [",".join(CSV_HEADER)]
    lines.extend(record_to_row(record) for record in records)
    return "\n".join(lines) + "\n"


def export_filename(today: date, prefix: str = "expenses") -> str:
    """expenses_2024-03-05.csv"""
    return f"{prefix}_{today.isoformat()}.csv"


def parse_csv(text: str) -> list[dict[str, str]]:
    """
    Read an exported document back into rows keyed by header.

    Values are returned exactly as text; no type conversion.
    """
    reader = csv.DictReader(io.StringIO(text, newline=""))
    return [dict(row) for row in reader]
