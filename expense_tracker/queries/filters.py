"""
Filter/Query Engine

Computes a filtered VIEW of a snapshot; never touches the ledger.

Matching rules:
- category filter: empty matches everything, otherwise exact match
- search term: empty matches everything, otherwise a case-insensitive
  substring of the name, the notes (absent = empty) or the category
Both conditions must hold.
"""

from collections.abc import Iterable

from expense_tracker.models.expense import ExpenseRecord


def matches(record: ExpenseRecord, search_term: str = "", category_filter: str = "") -> bool:
    """Does a single record pass the search and category filters?"""
    if category_filter and record.category != category_filter:
        return False

    if not search_term:
        return True

    needle = search_term.lower()
    return (
        needle in record.name.lower()
        or needle in record.notes_text.lower()
        or needle in record.category.lower()
    )


def filter_expenses(
    snapshot: Iterable[ExpenseRecord],
    search_term: str = "",
    category_filter: str = "",
) -> list[ExpenseRecord]:
    """
    Records matching both filters, in snapshot order.

    Ordering for display is a separate step (see sort_newest_first).
    """
    return [
        record for record in snapshot
        if matches(record, search_term, category_filter)
    ]


def sort_newest_first(records: Iterable[ExpenseRecord]) -> list[ExpenseRecord]:
    """Date descending; records on the same date keep their relative order."""
    return sorted(records, key=lambda record: record.date, reverse=True)


def categories_in_use(snapshot: Iterable[ExpenseRecord]) -> list[str]:
    """Distinct categories present in the snapshot, sorted."""
    return sorted({record.category for record in snapshot})
