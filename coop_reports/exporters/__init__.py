"""Exporters for report views."""

from coop_reports.exporters.csv_export import (
    INSTALLMENT_COLUMNS,
    INSTALLMENT_ROW_COLUMNS,
    LOAN_COLUMNS,
    build_export_filename,
    export_to_csv,
)
from coop_reports.exporters.csv_file import CsvFileExporter

__all__ = [
    "CsvFileExporter",
    "INSTALLMENT_COLUMNS",
    "INSTALLMENT_ROW_COLUMNS",
    "LOAN_COLUMNS",
    "build_export_filename",
    "export_to_csv",
]
