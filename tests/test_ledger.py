"""Tests for the Ledger Store."""

import json
from datetime import date
from decimal import Decimal

import pytest

from conftest import make_input
from expense_tracker.services.ledger import BUDGET_KEY, EXPENSES_KEY, LedgerStore
from expense_tracker.services.storage import (
    InMemoryKeyValueStore,
    JsonFileKeyValueStore,
    PersistenceError,
)


def stored_expenses(store):
    return json.loads(store.get(EXPENSES_KEY))


class TestLedgerMutations:
    """Tests for add / remove / list."""

    def test_add_returns_new_id(self, store):
        """Test that add assigns an id and the record can be found by it."""
        ledger = LedgerStore(store)
        expense_id = ledger.add(make_input())

        assert expense_id in ledger
        assert ledger.find(expense_id).name == "Coffee"
        assert len(ledger) == 1

    def test_add_increases_count_by_one(self, store):
        """Test that each add grows the ledger by exactly one."""
        ledger = LedgerStore(store)
        for i in range(5):
            before = len(ledger)
            ledger.add(make_input(name=f"Item {i}"))
            assert len(ledger) == before + 1

    def test_list_keeps_insertion_order(self, store):
        """Test that list() returns records in the order they were added."""
        ledger = LedgerStore(store)
        ledger.add(make_input(name="First", on=date(2024, 3, 10)))
        ledger.add(make_input(name="Second", on=date(2024, 1, 1)))

        assert [r.name for r in ledger.list()] == ["First", "Second"]

    def test_list_is_a_snapshot(self, store):
        """Test that a snapshot does not change after later mutations."""
        ledger = LedgerStore(store)
        ledger.add(make_input())
        snapshot = ledger.list()
        ledger.add(make_input(name="Bus"))

        assert len(snapshot) == 1

    def test_remove(self, store):
        """Test removing present and unknown ids."""
        ledger = LedgerStore(store)
        expense_id = ledger.add(make_input())

        assert ledger.remove(expense_id) is True
        assert ledger.remove(expense_id) is False
        assert len(ledger) == 0

    def test_remove_unknown_id_does_not_write(self, store):
        """Test that removing nothing leaves the store untouched."""
        ledger = LedgerStore(store)
        ledger.remove("missing")
        assert store.write_count == 0

    def test_count_tracks_mixed_adds_and_removes(self, store):
        """Test that len() follows every add, remove and unknown remove."""
        ledger = LedgerStore(store)
        first = ledger.add(make_input(name="Coffee"))
        assert len(ledger) == 1
        second = ledger.add(make_input(name="Bus"))
        assert len(ledger) == 2

        ledger.remove(first)
        assert len(ledger) == 1
        ledger.remove(first)
        assert len(ledger) == 1
        ledger.remove("missing")
        assert len(ledger) == 1

        third = ledger.add(make_input(name="Rent"))
        assert len(ledger) == 2
        ledger.remove(second)
        ledger.remove(third)
        assert len(ledger) == 0
        assert ledger.list() == ()

    def test_replace_moves_record_to_end_with_new_id(self, store):
        """Test that replace swaps the record in one write."""
        ledger = LedgerStore(store)
        first = ledger.add(make_input(name="Coffee"))
        ledger.add(make_input(name="Bus"))
        writes = store.write_count

        new_id = ledger.replace(first, make_input(name="Latte"))

        assert new_id != first
        assert first not in ledger
        assert [r.name for r in ledger.list()] == ["Bus", "Latte"]
        assert [e["name"] for e in stored_expenses(store)] == ["Bus", "Latte"]
        assert store.write_count == writes + 1

    def test_replace_unknown_id(self, store):
        ledger = LedgerStore(store)
        assert ledger.replace("missing", make_input()) is None
        assert len(ledger) == 0
        assert store.write_count == 0

    def test_failed_replace_keeps_new_record_in_memory(self, store):
        """Test that a rejected write never leaves the ledger without the record."""
        ledger = LedgerStore(store)
        original = ledger.add(make_input(name="Coffee"))
        store.fail_writes = True

        with pytest.raises(PersistenceError):
            ledger.replace(original, make_input(name="Latte"))
        assert [r.name for r in ledger.list()] == ["Latte"]
        assert [e["name"] for e in stored_expenses(store)] == ["Coffee"]


class TestLedgerPersistence:
    """Tests for the full-snapshot write-through."""

    def test_every_mutation_writes_full_snapshot(self, store):
        """Test that the stored array always mirrors the ledger."""
        ledger = LedgerStore(store)
        first = ledger.add(make_input(name="Coffee"))
        ledger.add(make_input(name="Bus", category="transport"))
        assert [e["name"] for e in stored_expenses(store)] == ["Coffee", "Bus"]

        ledger.remove(first)
        assert [e["name"] for e in stored_expenses(store)] == ["Bus"]

    def test_stored_record_shape(self, store):
        """Test the stored field names and text encodings."""
        ledger = LedgerStore(store)
        expense_id = ledger.add(make_input(notes="morning"))

        [stored] = stored_expenses(store)
        assert stored == {
            "id": expense_id,
            "name": "Coffee",
            "amount": "3.50",
            "category": "food",
            "date": "2024-03-15",
            "notes": "morning",
        }

    def test_round_trip_through_json_file(self, tmp_path):
        """Test that a reloaded ledger equals the saved one."""
        path = tmp_path / "store.json"
        ledger = LedgerStore(JsonFileKeyValueStore(path))
        ledger.add(make_input(name="Coffee", notes='He said "hi"'))
        ledger.add(make_input(name="Rent", amount="1200.00", category="rent"))
        ledger.set_monthly_limit(Decimal("2500"))

        reloaded = LedgerStore.load(JsonFileKeyValueStore(path))

        assert reloaded.list() == ledger.list()
        assert reloaded.monthly_limit == Decimal("2500")

    def test_notes_whitespace_survives_reload(self, store):
        """Test that notes are stored exactly as typed."""
        ledger = LedgerStore(store)
        expense_id = ledger.add(make_input(notes="  x "))

        assert stored_expenses(store)[0]["notes"] == "  x "
        assert LedgerStore.load(store).find(expense_id).notes == "  x "

    def test_round_trip_through_memory_store(self, store):
        ledger = LedgerStore(store)
        for i in range(200):
            ledger.add(make_input(name=f"Item {i}", amount=f"{i}.25"))

        reloaded = LedgerStore.load(store)

        assert len(reloaded) == 200
        assert len({record.id for record in reloaded.list()}) == 200
        assert reloaded.list() == ledger.list()

    def test_failed_save_raises_and_keeps_record_in_memory(self, store):
        """Test that a rejected write is reported but the session keeps the change."""
        ledger = LedgerStore(store)
        store.fail_writes = True

        with pytest.raises(PersistenceError):
            ledger.add(make_input())
        assert len(ledger) == 1

    def test_failed_save_is_audited(self, store, audit_logger, recording_logger):
        """Test that a rejected write produces a save_failed audit event."""
        ledger = LedgerStore(store, audit_logger=audit_logger)
        store.fail_writes = True

        with pytest.raises(PersistenceError):
            ledger.add(make_input())
        assert "save_failed" in recording_logger.event_types()


class TestLedgerLoad:
    """Tests for rebuilding the ledger from stored content."""

    def test_empty_store_gives_defaults(self, store):
        """Test that a fresh store gives an empty ledger and the 5000 default."""
        ledger = LedgerStore.load(store)
        assert len(ledger) == 0
        assert ledger.monthly_limit == Decimal("5000")

    def test_corrupt_expenses_give_empty_ledger(self):
        """Test that an undecodable document is treated as no data."""
        store = InMemoryKeyValueStore({EXPENSES_KEY: "{not json", BUDGET_KEY: "3000"})
        ledger = LedgerStore.load(store)

        assert len(ledger) == 0
        assert ledger.monthly_limit == Decimal("3000")

    def test_non_array_expenses_give_empty_ledger(self):
        """Test that a JSON object under the expenses key is ignored."""
        store = InMemoryKeyValueStore({EXPENSES_KEY: '{"id": "x"}'})
        assert len(LedgerStore.load(store)) == 0

    def test_corrupt_file_gives_empty_ledger(self, tmp_path):
        """Test that a garbage store file does not stop the app from starting."""
        path = tmp_path / "store.json"
        path.write_text("garbage", encoding="utf-8")

        ledger = LedgerStore.load(JsonFileKeyValueStore(path))
        assert len(ledger) == 0
        assert ledger.monthly_limit == Decimal("5000")

        ledger.add(make_input())
        assert len(LedgerStore.load(JsonFileKeyValueStore(path))) == 1

    def test_malformed_records_are_skipped(self, audit_logger, recording_logger):
        """Test that one bad entry does not discard the rest."""
        payload = [
            {"id": "a", "name": "Coffee", "amount": "3.50", "category": "food", "date": "2024-03-05"},
            {"id": "b", "name": "", "amount": "1", "category": "food", "date": "2024-03-05"},
            {"id": "c", "name": "Bus", "amount": "oops", "category": "transport", "date": "2024-03-06"},
            {"id": "d", "name": "Book", "amount": "12", "category": "books", "date": "2024-02-30"},
            {"id": "e", "name": "Rent", "amount": "900", "category": "rent", "date": "2024-03-01"},
        ]
        store = InMemoryKeyValueStore({EXPENSES_KEY: json.dumps(payload)})

        ledger = LedgerStore.load(store, audit_logger=audit_logger)

        assert [r.id for r in ledger.list()] == ["a", "e"]
        _, _, loaded = recording_logger.calls[-1]
        assert loaded["details"]["skipped_records"] == 3

    def test_duplicate_ids_keep_first(self):
        """Test that a repeated id is loaded once."""
        payload = [
            {"id": "a", "name": "Coffee", "amount": "3.50", "category": "food", "date": "2024-03-05"},
            {"id": "a", "name": "Tea", "amount": "2.00", "category": "food", "date": "2024-03-05"},
        ]
        store = InMemoryKeyValueStore({EXPENSES_KEY: json.dumps(payload)})
        ledger = LedgerStore.load(store)

        assert len(ledger) == 1
        assert ledger.find("a").name == "Coffee"

    def test_legacy_float_amounts_load(self):
        """Test that amounts stored as JSON numbers are accepted."""
        payload = [
            {"id": "a", "name": "Coffee", "amount": 12.3, "category": "food", "date": "2024-03-05"},
        ]
        store = InMemoryKeyValueStore({EXPENSES_KEY: json.dumps(payload)})
        record = LedgerStore.load(store).find("a")

        assert record.amount.quantize(Decimal("0.01")) == Decimal("12.30")

    def test_oversized_stored_amount_is_skipped(self):
        """Test that an amount too large to format is dropped on load."""
        payload = [
            {"id": "a", "name": "Coffee", "amount": "3", "category": "food", "date": "2024-03-05"},
            {"id": "b", "name": "Yacht", "amount": "1e30", "category": "other", "date": "2024-03-05"},
        ]
        store = InMemoryKeyValueStore({EXPENSES_KEY: json.dumps(payload)})
        ledger = LedgerStore.load(store)

        assert [r.id for r in ledger.list()] == ["a"]

    def test_missing_notes_load_as_absent(self):
        """Test that records without a notes field load with notes None."""
        payload = [
            {"id": "a", "name": "Coffee", "amount": "3", "category": "food", "date": "2024-03-05"},
        ]
        store = InMemoryKeyValueStore({EXPENSES_KEY: json.dumps(payload)})
        assert LedgerStore.load(store).find("a").notes is None

    @pytest.mark.parametrize("stored", ["abc", "0", "-5", "NaN", "Infinity", "", "1e30", "2500.555"])
    def test_bad_stored_budget_falls_back_to_default(self, stored):
        """Test that an unusable stored limit is replaced by the default."""
        store = InMemoryKeyValueStore({BUDGET_KEY: stored})
        assert LedgerStore.load(store).monthly_limit == Decimal("5000")

    def test_default_limit_can_be_overridden(self, store):
        """Test the default used when nothing is stored."""
        ledger = LedgerStore.load(store, default_monthly_limit=Decimal("750"))
        assert ledger.monthly_limit == Decimal("750")


class TestLedgerBudget:
    """Tests for the monthly limit."""

    def test_set_monthly_limit_persists_text(self, store):
        """Test that the limit is stored as decimal text."""
        ledger = LedgerStore(store)
        ledger.set_monthly_limit(Decimal("2500.50"))

        assert ledger.monthly_limit == Decimal("2500.50")
        assert store.get(BUDGET_KEY) == "2500.50"

    def test_set_monthly_limit_rejects_non_positive(self, store):
        """Test that a zero limit is rejected and nothing is written."""
        ledger = LedgerStore(store)
        with pytest.raises(ValueError):
            ledger.set_monthly_limit(Decimal("0"))

        assert ledger.monthly_limit == Decimal("5000")
        assert store.get(BUDGET_KEY) is None
