"""CSV export package."""

from expense_tracker.export.csv_exporter import (
    CSV_HEADER,
    EmptyExportError,
    export_csv,
    export_filename,
    parse_csv,
)

__all__ = [
    "CSV_HEADER",
    "EmptyExportError",
    "export_csv",
    "export_filename",
    "parse_csv",
]
