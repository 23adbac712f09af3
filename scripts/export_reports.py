#!/usr/bin/env python3
"""Compute portfolio reports from a snapshot and export them to CSV.

Writes:
- reporte_prestamos[_<STATUS>].csv: loans, optionally filtered by status
- reporte_cuotas_vencidas.csv: overdue installments
- reporte_cuotas_pendientes[_<STATUS>].csv: installments requiring attention

and logs the portfolio overview, aging buckets and payment activity.
"""

import argparse
import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from coop_reports.config import ReportConfig
from coop_reports.exceptions import CoopReportsError
from coop_reports.exporters import INSTALLMENT_ROW_COLUMNS, LOAN_COLUMNS, CsvFileExporter
from coop_reports.logging import get_logger, setup_logging
from coop_reports.models import Loan
from coop_reports.reports import (
    ReportAggregator,
    StatusSelection,
    attention_installments,
    filter_installments_by_status,
    filter_rows_by_client,
    overdue_installments,
    parse_installment_status,
    payment_events_from_installments,
    requires_attention,
)
from coop_reports.sources import JsonFileSource

logger = get_logger(__name__)


def _or_na(value: object) -> object:
    return "N/A" if value is None else value


def export_views(
    loans: list[Loan],
    exporter: CsvFileExporter,
    loan_status: str | None = None,
    installment_status: str = "all",
    client: str = "",
) -> list[Path]:
    """Write the loan, overdue and pending installment CSVs.

    Unknown status filters fall back to all records, and the filename
    then carries no filter label.

    Returns
    -------
    list[Path]
        Paths of the written files.
    """
    selection = StatusSelection()
    if loan_status:
        selection = selection.toggle(loan_status)

    pending_status = parse_installment_status(installment_status)
    pending = filter_rows_by_client(
        filter_installments_by_status(attention_installments(loans), pending_status),
        client,
    )
    if requires_attention(pending):
        logger.warning("Some installments are waiting for payment verification")

    pending_label = pending_status.value if pending_status is not None else None

    return [
        exporter.write("prestamos", selection.apply(loans), LOAN_COLUMNS, selection.label),
        exporter.write("cuotas_vencidas", overdue_installments(loans), INSTALLMENT_ROW_COLUMNS),
        exporter.write("cuotas_pendientes", pending, INSTALLMENT_ROW_COLUMNS, pending_label),
    ]


def main() -> None:
    """Main entry point."""
    config = ReportConfig.from_env()

    parser = argparse.ArgumentParser(description="Export loan portfolio reports to CSV")
    parser.add_argument(
        "--snapshot",
        type=Path,
        default=config.source.snapshot_path or project_root / "local" / "snapshot.json",
        help="Snapshot JSON file (default: $SNAPSHOT_PATH or local/snapshot.json)",
    )
    parser.add_argument(
        "--output-dir",
        type=Path,
        default=config.export.output_dir,
        help="Directory for CSV files (default: $REPORT_OUTPUT_DIR or output)",
    )
    parser.add_argument(
        "--loan-status",
        default=None,
        help="Only export loans with this status (e.g. ACTIVE, OVERDUE)",
    )
    parser.add_argument(
        "--installment-status",
        default="all",
        help="Filter for the pending installments report (default: all)",
    )
    parser.add_argument(
        "--client",
        default="",
        help="Customer name filter for the pending installments report",
    )
    parser.add_argument(
        "--log-format",
        choices=["standard", "json"],
        default="standard",
        help="Log output format (default: standard)",
    )
    args = parser.parse_args()

    setup_logging(config.log_level, args.log_format)

    aggregator = ReportAggregator(aging=config.aging, activity=config.activity)
    try:
        snapshot = JsonFileSource(args.snapshot).fetch()
    except CoopReportsError as e:
        logger.error("Could not load report data: %s", e)
        sys.exit(1)

    loans = snapshot.all_loans()
    if not loans:
        logger.info("No data to report")
        return

    reference_date = snapshot.captured_at.date()
    overview = aggregator.compute_portfolio_overview(loans)
    aging = aggregator.compute_delinquency_aging(snapshot.all_installments(), reference_date)
    activity = aggregator.compute_payment_activity(
        payment_events_from_installments(loans), now=snapshot.captured_at
    )

    logger.info("=" * 60)
    logger.info("Portfolio overview (%s)", reference_date.isoformat())
    logger.info("=" * 60)
    logger.info("Total loans:           %d", overview.total_loans)
    logger.info("Active loans:          %d", overview.active_loans)
    logger.info("Outstanding:           %s", overview.total_outstanding)
    logger.info("Overdue:               %s", overview.total_overdue)
    logger.info("Avg interest rate:     %s", _or_na(overview.average_interest_rate))
    logger.info("Avg installments/loan: %s", _or_na(overview.average_installments_per_loan))
    for bucket in aging:
        logger.info("Aging %-12s amount=%s count=%d", bucket.label, bucket.amount, bucket.count)
    logger.info(
        "Payments (%dd): reported=%d approved=%d rejected=%d avg_resolution_h=%s",
        config.activity.window_days,
        activity.reported_count,
        activity.approved_count,
        activity.rejected_count,
        _or_na(activity.average_resolution_hours),
    )

    exporter = None
    try:
        exporter = CsvFileExporter(args.output_dir, config=config.export)
        export_views(loans, exporter, args.loan_status, args.installment_status, args.client)
    except CoopReportsError as e:
        logger.error("Export failed: %s", e)
        sys.exit(1)
    finally:
        if exporter is not None:
            exporter.close()


if __name__ == "__main__":
    main()
