"""Derived report view models.

All report models are frozen: they are recomputed from a snapshot on each
request and never mutated afterwards.
"""

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal

from coop_reports.models.enums import InstallmentStatus, LoanStatus
from coop_reports.models.loan import Installment, Loan


@dataclass(frozen=True)
class PortfolioOverview:
    """Aggregate KPIs summarizing the full loan book."""

    total_loans: int = 0
    active_loans: int = 0
    total_outstanding: Decimal = Decimal("0.00")
    total_overdue: Decimal = Decimal("0.00")
    average_interest_rate: Decimal | None = None
    average_installments_per_loan: Decimal | None = None


@dataclass(frozen=True)
class AgingBucket:
    """Overdue amount and count for one days-past-due range.

    ``max_days`` is ``None`` for the open-ended last bucket.
    """

    label: str
    min_days: int
    max_days: int | None
    amount: Decimal = Decimal("0.00")
    count: int = 0

    def contains(self, days: int) -> bool:
        """Check whether a days-overdue value falls inside this bucket."""
        return days >= self.min_days and (self.max_days is None or days <= self.max_days)


@dataclass(frozen=True)
class PaymentActivity:
    """Payment report counters over a trailing window."""

    reported_count: int = 0
    approved_count: int = 0
    rejected_count: int = 0
    average_resolution_hours: Decimal | None = None


@dataclass(frozen=True)
class ReportStats:
    """Dashboard statistics for one snapshot."""

    total_loaned: Decimal
    total_collected: Decimal
    total_overdue: Decimal
    loans_by_status: dict[LoanStatus, int]
    aging: list[AgingBucket] = field(default_factory=list)
    activity: PaymentActivity = field(default_factory=PaymentActivity)


@dataclass(frozen=True)
class InstallmentRow:
    """Installment joined with its loan's customer, for tabular reports."""

    installment: Installment
    customer_name: str
    customer_email: str

    @classmethod
    def from_loan(cls, loan: Loan, installment: Installment) -> "InstallmentRow":
        return cls(
            installment=installment,
            customer_name=loan.customer_name,
            customer_email=loan.customer_email,
        )

    @property
    def loan_id(self) -> str:
        return self.installment.loan_id

    @property
    def installment_number(self) -> int:
        return self.installment.installment_number

    @property
    def amount(self) -> Decimal:
        return self.installment.amount

    @property
    def due_date(self) -> date:
        return self.installment.due_date

    @property
    def status(self) -> InstallmentStatus:
        return self.installment.status
