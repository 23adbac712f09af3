"""Domain models for loan portfolio reporting."""

from coop_reports.models.enums import (
    ATTENTION_INSTALLMENT_STATUSES,
    OPEN_LOAN_STATUSES,
    InstallmentStatus,
    LoanStatus,
    PaymentOutcome,
)
from coop_reports.models.loan import Installment, Loan, PaymentEvent
from coop_reports.models.report import (
    AgingBucket,
    InstallmentRow,
    PaymentActivity,
    PortfolioOverview,
    ReportStats,
)

__all__ = [
    "ATTENTION_INSTALLMENT_STATUSES",
    "AgingBucket",
    "Installment",
    "InstallmentRow",
    "InstallmentStatus",
    "Loan",
    "LoanStatus",
    "OPEN_LOAN_STATUSES",
    "PaymentActivity",
    "PaymentEvent",
    "PaymentOutcome",
    "PortfolioOverview",
    "ReportStats",
]
