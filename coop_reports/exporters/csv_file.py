"""CSV file exporter for writing report downloads to disk."""

import logging
from pathlib import Path
from typing import Any, Iterable

from coop_reports.config import ExportConfig
from coop_reports.exceptions import ExportError
from coop_reports.exporters.csv_export import ColumnMapping, build_export_filename, export_to_csv

logger = logging.getLogger(__name__)


class CsvFileExporter:
    """Write CSV exports into an output directory."""

    def __init__(self, output_dir: str | Path | None = None, config: ExportConfig | None = None) -> None:
        """Initialize CSV file exporter.

        Parameters
        ----------
        output_dir : str | Path | None
            Directory to write CSV files. Overrides ``config.output_dir``.
        config : ExportConfig | None
            Export settings (locale, decimals, BOM).
        """
        self.config = config or ExportConfig()
        self.output_dir = Path(output_dir) if output_dir is not None else Path(self.config.output_dir)
        try:
            self.output_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise ExportError(f"Cannot create output directory {self.output_dir}: {e}") from e
        self._counts: dict[str, int] = {}

    def write(
        self,
        subject: str,
        rows: Iterable[Any],
        columns: ColumnMapping,
        filter_label: str | None = None,
    ) -> Path:
        """Export rows to ``reporte_<subject>[_<label>].csv`` and return its path."""
        rows = list(rows)
        content = export_to_csv(
            rows,
            columns,
            locale=self.config.locale,
            decimal_places=self.config.decimal_places,
            include_bom=self.config.include_bom,
        )
        file_path = self.output_dir / build_export_filename(subject, filter_label)

        try:
            # newline="" keeps the CRLF terminators written by the csv module
            with open(file_path, "w", encoding="utf-8", newline="") as f:
                f.write(content)
        except OSError as e:
            raise ExportError(f"Failed to write {file_path}: {e}") from e

        self._counts[file_path.name] = len(rows)
        logger.info(
            "Exported %d rows to %s",
            len(rows),
            file_path,
            extra={"export_file": file_path.name, "row_count": len(rows)},
        )
        return file_path

    def close(self) -> None:
        """Log a summary of written files."""
        logger.info("CSV files written to: %s", self.output_dir)
        for name, count in self._counts.items():
            logger.info("  %s: %d records", name, count)
