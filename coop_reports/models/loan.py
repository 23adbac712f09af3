"""Loan models for the reporting domain."""

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal

from coop_reports.models.enums import InstallmentStatus, LoanStatus, PaymentOutcome


@dataclass
class Installment:
    """One scheduled payment (cuota) within a loan."""

    loan_id: str
    installment_number: int  # 1, 2, 3, ...
    amount: Decimal
    due_date: date
    status: InstallmentStatus
    payment_date: datetime | None = None
    payment_report_date: datetime | None = None  # When the member reported the payment
    admin_notes: str | None = None


@dataclass
class Loan:
    """Loan extended to a cooperative member."""

    loan_id: str
    customer_name: str
    customer_email: str
    principal: Decimal
    application_date: date
    status: LoanStatus
    installments: list[Installment] = field(default_factory=list)
    customer_id: str | None = None
    currency: str = "USD"
    interest_rate: Decimal | None = None  # Annual rate in percent (e.g. 12.5)
    disbursement_date: date | None = None


@dataclass(frozen=True)
class PaymentEvent:
    """A payment reported by a member and its review outcome."""

    loan_id: str
    installment_number: int
    reported_at: datetime
    outcome: PaymentOutcome
    resolved_at: datetime | None = None
