"""Report aggregation over loan book snapshots."""

from coop_reports.reports.activity import payment_events_from_installments
from coop_reports.reports.aggregator import (
    ReportAggregator,
    build_aging_buckets,
    days_overdue,
    remaining_principal,
)
from coop_reports.reports.filters import (
    ALL_STATUSES,
    attention_installments,
    filter_installments_by_status,
    filter_loans_by_status,
    filter_rows_by_client,
    group_loans_by_status,
    overdue_installments,
    parse_installment_status,
    parse_loan_status,
    requires_attention,
)
from coop_reports.reports.selection import StatusSelection

__all__ = [
    "ALL_STATUSES",
    "ReportAggregator",
    "StatusSelection",
    "attention_installments",
    "build_aging_buckets",
    "days_overdue",
    "filter_installments_by_status",
    "filter_loans_by_status",
    "filter_rows_by_client",
    "group_loans_by_status",
    "overdue_installments",
    "parse_installment_status",
    "parse_loan_status",
    "payment_events_from_installments",
    "remaining_principal",
    "requires_attention",
]
