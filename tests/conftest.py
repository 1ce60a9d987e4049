"""Shared fixtures for the expense tracker tests."""

from datetime import date, datetime, timedelta, timezone
from decimal import Decimal

import pytest

from expense_tracker.audit import AuditLogger
from expense_tracker.models.expense import ExpenseInput, ExpenseRecord
from expense_tracker.services.storage import InMemoryKeyValueStore


TODAY = date(2024, 3, 15)


class RecordingLogger:
    """Stands in for a structlog logger and remembers every call."""

    def __init__(self):
        self.calls = []

    def _record(self, level, event, **kwargs):
        self.calls.append((level, event, kwargs))

    def debug(self, event, **kwargs):
        self._record("debug", event, **kwargs)

    def info(self, event, **kwargs):
        self._record("info", event, **kwargs)

    def warning(self, event, **kwargs):
        self._record("warning", event, **kwargs)

    def error(self, event, **kwargs):
        self._record("error", event, **kwargs)

    def event_types(self):
        return [kwargs["event_type"] for _, _, kwargs in self.calls]


class FakeClock:
    """Manually advanced clock for notification deadlines."""

    def __init__(self, start=None):
        self.now = start or datetime(2024, 3, 15, 12, 0, tzinfo=timezone.utc)

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += timedelta(seconds=seconds)


def make_input(
    name="Coffee",
    amount="3.50",
    category="food",
    on=TODAY,
    notes=None,
):
    return ExpenseInput(
        name=name,
        amount=Decimal(amount),
        category=category,
        date=on,
        notes=notes,
    )


def make_record(name="Coffee", amount="3.50", category="food", on=TODAY, notes=None):
    return ExpenseRecord.from_input(make_input(name, amount, category, on, notes))


@pytest.fixture
def today():
    return TODAY


@pytest.fixture
def store():
    return InMemoryKeyValueStore()


@pytest.fixture
def recording_logger():
    return RecordingLogger()


@pytest.fixture
def audit_logger(recording_logger):
    return AuditLogger(logger=recording_logger)


@pytest.fixture
def clock():
    return FakeClock()
