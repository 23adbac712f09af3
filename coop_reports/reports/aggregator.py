"""Portfolio KPIs, delinquency aging and payment activity for the loan book."""

from __future__ import annotations

import logging
from datetime import date, datetime, timedelta
from decimal import Decimal
from typing import Iterable, Sequence

from coop_reports.config import ActivityConfig, AgingConfig
from coop_reports.exporters.serialization import quantize
from coop_reports.models import (
    OPEN_LOAN_STATUSES,
    AgingBucket,
    Installment,
    InstallmentStatus,
    Loan,
    PaymentActivity,
    PaymentEvent,
    PaymentOutcome,
    PortfolioOverview,
    ReportStats,
)
from coop_reports.reports.activity import payment_events_from_installments
from coop_reports.reports.filters import group_loans_by_status
from coop_reports.sources.base import DataSource

logger = logging.getLogger(__name__)

ZERO = Decimal("0")


def _as_date(value: date | datetime) -> date:
    return value.date() if isinstance(value, datetime) else value


def remaining_principal(loan: Loan) -> Decimal:
    """Principal still owed on a loan.

    Loans that are not open (paid, cancelled or never disbursed) owe
    nothing. Open loans owe their unpaid installments, or the full
    principal while no schedule exists.
    """
    if loan.status not in OPEN_LOAN_STATUSES:
        return ZERO
    if not loan.installments:
        return loan.principal
    return sum(
        (inst.amount for inst in loan.installments if inst.status != InstallmentStatus.PAID),
        ZERO,
    )


def days_overdue(installment: Installment, reference_date: date) -> int | None:
    """Days past due, or None when the installment is not delinquent.

    Installments flagged OVERDUE always count, at least one day late;
    PENDING ones count once their due date has passed.
    """
    days = (reference_date - installment.due_date).days
    if installment.status == InstallmentStatus.OVERDUE:
        return max(days, 1)
    if installment.status == InstallmentStatus.PENDING and days > 0:
        return days
    return None


def build_aging_buckets(edges: Sequence[int]) -> list[AgingBucket]:
    """Empty buckets for the given edges, in display order.

    ``(30, 60, 90)`` -> ``1-30 days``, ``31-60 days``, ``61-90 days``,
    ``90+ days``.
    """
    buckets = []
    lower = 1
    for edge in edges:
        buckets.append(AgingBucket(label=f"{lower}-{edge} days", min_days=lower, max_days=edge))
        lower = edge + 1
    buckets.append(AgingBucket(label=f"{edges[-1]}+ days", min_days=lower, max_days=None))
    return buckets


class ReportAggregator:
    """Compute report view models from a loan book snapshot.

    The aggregator holds configuration only. Every method is a pure
    function of its arguments, so one instance can serve concurrent
    requests for different snapshots.

    Parameters
    ----------
    aging : AgingConfig | None
        Delinquency bucket edges.
    activity : ActivityConfig | None
        Trailing window for payment activity.
    """

    def __init__(
        self,
        aging: AgingConfig | None = None,
        activity: ActivityConfig | None = None,
    ) -> None:
        self.aging = aging or AgingConfig()
        self.activity = activity or ActivityConfig()

    def compute_portfolio_overview(self, loans: Sequence[Loan]) -> PortfolioOverview:
        """Summarize the loan book.

        Parameters
        ----------
        loans : Sequence[Loan]
            Loans with their installments.

        Returns
        -------
        PortfolioOverview
            Totals rounded to two decimals; averages are None for an
            empty book (or when no loan carries an interest rate).
        """
        total_loans = len(loans)
        if not total_loans:
            return PortfolioOverview()

        active_loans = sum(1 for loan in loans if loan.status in OPEN_LOAN_STATUSES)
        total_outstanding = sum((remaining_principal(loan) for loan in loans), ZERO)
        total_overdue = sum(
            (
                inst.amount
                for loan in loans
                for inst in loan.installments
                if inst.status == InstallmentStatus.OVERDUE
            ),
            ZERO,
        )

        rates = [loan.interest_rate for loan in loans if loan.interest_rate is not None]
        average_rate = quantize(sum(rates, ZERO) / len(rates)) if rates else None

        total_installments = sum(len(loan.installments) for loan in loans)
        average_installments = quantize(Decimal(total_installments) / total_loans)

        return PortfolioOverview(
            total_loans=total_loans,
            active_loans=active_loans,
            total_outstanding=quantize(total_outstanding),
            total_overdue=quantize(total_overdue),
            average_interest_rate=average_rate,
            average_installments_per_loan=average_installments,
        )

    def compute_delinquency_aging(
        self,
        installments: Iterable[Installment],
        reference_date: date | datetime | None = None,
    ) -> list[AgingBucket]:
        """Bucket delinquent installments by days past due.

        Every bucket is returned, in display order, even when empty.
        Each delinquent installment lands in exactly one bucket.
        """
        reference = _as_date(reference_date or date.today())
        buckets = build_aging_buckets(self.aging.edges)
        amounts = [ZERO] * len(buckets)
        counts = [0] * len(buckets)

        for inst in installments:
            days = days_overdue(inst, reference)
            if days is None:
                continue
            for idx, bucket in enumerate(buckets):
                if bucket.contains(days):
                    amounts[idx] += inst.amount
                    counts[idx] += 1
                    break

        return [
            AgingBucket(
                label=bucket.label,
                min_days=bucket.min_days,
                max_days=bucket.max_days,
                amount=quantize(amounts[idx]),
                count=counts[idx],
            )
            for idx, bucket in enumerate(buckets)
        ]

    def compute_payment_activity(
        self,
        payment_events: Iterable[PaymentEvent],
        window_days: int | None = None,
        now: datetime | None = None,
    ) -> PaymentActivity:
        """Count payment reports in ``[now - window_days, now]``.

        The average resolution time covers resolved events only and is
        None when there are none.
        """
        window = window_days if window_days is not None else self.activity.window_days
        now = now or datetime.now()
        since = now - timedelta(days=window)

        events = [e for e in payment_events if since <= e.reported_at <= now]
        approved = sum(1 for e in events if e.outcome == PaymentOutcome.APPROVED)
        rejected = sum(1 for e in events if e.outcome == PaymentOutcome.REJECTED)

        resolution_hours = [
            Decimal(str((e.resolved_at - e.reported_at).total_seconds())) / 3600
            for e in events
            if e.outcome != PaymentOutcome.PENDING and e.resolved_at is not None
        ]
        average = (
            quantize(sum(resolution_hours, ZERO) / len(resolution_hours))
            if resolution_hours
            else None
        )

        return PaymentActivity(
            reported_count=len(events),
            approved_count=approved,
            rejected_count=rejected,
            average_resolution_hours=average,
        )

    def compute_report_stats(
        self,
        loans: Sequence[Loan],
        reference_date: date | datetime | None = None,
        now: datetime | None = None,
    ) -> ReportStats:
        """Compute the dashboard statistics for a set of loans."""
        installments = [inst for loan in loans for inst in loan.installments]

        total_loaned = sum((loan.principal for loan in loans), ZERO)
        total_collected = sum(
            (i.amount for i in installments if i.status == InstallmentStatus.PAID), ZERO
        )
        total_overdue = sum(
            (i.amount for i in installments if i.status == InstallmentStatus.OVERDUE), ZERO
        )

        return ReportStats(
            total_loaned=quantize(total_loaned),
            total_collected=quantize(total_collected),
            total_overdue=quantize(total_overdue),
            loans_by_status=group_loans_by_status(loans),
            aging=self.compute_delinquency_aging(installments, reference_date),
            activity=self.compute_payment_activity(
                payment_events_from_installments(loans), now=now
            ),
        )

    def build_report(
        self,
        source: DataSource,
        reference_date: date | datetime | None = None,
        now: datetime | None = None,
    ) -> ReportStats:
        """Fetch a snapshot from ``source`` and compute its statistics.

        Raises
        ------
        DataUnavailableError
            Propagated from the source; the aggregator does not retry.
        """
        snapshot = source.fetch()
        if snapshot.is_empty():
            logger.info("Snapshot captured at %s has no loans", snapshot.captured_at)

        stats = self.compute_report_stats(
            snapshot.all_loans(),
            reference_date=reference_date or snapshot.captured_at,
            now=now,
        )
        logger.info(
            "Computed report for %d loans: loaned=%s collected=%s overdue=%s",
            len(snapshot.loans),
            stats.total_loaned,
            stats.total_collected,
            stats.total_overdue,
            extra={"loan_count": len(snapshot.loans)},
        )
        return stats
