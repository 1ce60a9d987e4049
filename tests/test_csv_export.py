"""Tests for the CSV Exporter."""

from datetime import date
from decimal import Decimal

import pytest

from conftest import make_record
from expense_tracker.export import (
    CSV_HEADER,
    EmptyExportError,
    export_csv,
    export_filename,
    parse_csv,
)
from expense_tracker.export.csv_exporter import quote_if_needed


class TestExportCsv:
    """Tests for export_csv."""

    def test_document_layout(self):
        """Test header, row order, amounts and notes quoting."""
        snapshot = (
            make_record("Coffee", "3.5", "food", date(2024, 3, 5), notes='He said "hi"'),
            make_record("Bus", "2", "transport", date(2024, 3, 6)),
        )

        assert export_csv(snapshot) == (
            "Date,Name,Category,Amount,Notes\n"
            "2024-03-06,Bus,transport,2.00,\n"
            '2024-03-05,Coffee,food,3.50,"He said ""hi"""\n'
        )

    def test_notes_always_quoted(self):
        snapshot = (make_record(notes="plain"),)
        assert export_csv(snapshot).splitlines()[1].endswith(',"plain"')

    def test_embedded_quotes_are_doubled(self):
        snapshot = (make_record(on=date(2024, 3, 5), notes='Said "hi" twice'),)
        assert export_csv(snapshot).splitlines()[1] == '2024-03-05,Coffee,food,3.50,"Said ""hi"" twice"'

    def test_name_with_comma_is_quoted(self):
        snapshot = (make_record(name="Lunch, team"),)
        assert '"Lunch, team"' in export_csv(snapshot)

    def test_empty_snapshot_raises(self):
        with pytest.raises(EmptyExportError):
            export_csv(())

    def test_same_date_keeps_snapshot_order(self):
        snapshot = (
            make_record("First", on=date(2024, 3, 1)),
            make_record("Second", on=date(2024, 3, 1)),
        )
        rows = parse_csv(export_csv(snapshot))
        assert [row["Name"] for row in rows] == ["First", "Second"]

    def test_parse_round_trip(self):
        """Test that a standard reader recovers every field."""
        snapshot = (
            make_record("Lunch, team", "12.25", "food", date(2024, 3, 5), notes='He said "hi"\nthen left'),
            make_record("Bus", "2", "transport", date(2024, 3, 4)),
        )

        rows = parse_csv(export_csv(snapshot))

        assert tuple(rows[0]) == CSV_HEADER
        assert rows[0] == {
            "Date": "2024-03-05",
            "Name": "Lunch, team",
            "Category": "food",
            "Amount": "12.25",
            "Notes": 'He said "hi"\nthen left',
        }
        assert rows[1]["Notes"] == ""
        assert Decimal(rows[1]["Amount"]) == Decimal("2")


class TestHelpers:
    """Tests for quoting and filenames."""

    def test_quote_if_needed(self):
        assert quote_if_needed("plain") == "plain"
        assert quote_if_needed('a"b') == '"a""b"'
        assert quote_if_needed("a\nb") == '"a\nb"'

    def test_export_filename(self):
        assert export_filename(date(2024, 3, 5)) == "expenses_2024-03-05.csv"
        assert export_filename(date(2024, 3, 5), prefix="ledger") == "ledger_2024-03-05.csv"
