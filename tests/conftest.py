"""Pytest configuration and fixtures."""

import logging
from datetime import date, datetime, timedelta
from decimal import Decimal

import pytest

from coop_reports.models import Installment, InstallmentStatus, Loan, LoanStatus


@pytest.fixture
def seed() -> int:
    """Fixed seed for reproducible tests."""
    return 42


@pytest.fixture
def reference_date() -> date:
    """Fixed 'today' for aging calculations."""
    return date(2024, 6, 15)


@pytest.fixture
def now() -> datetime:
    """Fixed 'now' for payment activity windows."""
    return datetime(2024, 6, 15, 18, 0, 0)


def make_installment(
    loan_id: str,
    number: int,
    amount: str,
    due_date: date,
    status: InstallmentStatus,
    **kwargs,
) -> Installment:
    """Build an installment with Decimal amount."""
    return Installment(
        loan_id=loan_id,
        installment_number=number,
        amount=Decimal(amount),
        due_date=due_date,
        status=status,
        **kwargs,
    )


def make_loan(
    loan_id: str,
    principal: str,
    status: LoanStatus,
    installments: list[Installment] | None = None,
    **kwargs,
) -> Loan:
    """Build a loan with sensible defaults."""
    defaults = {
        "customer_name": f"Cliente {loan_id}",
        "customer_email": f"{loan_id}@example.com",
        "application_date": date(2024, 1, 10),
    }
    defaults.update(kwargs)
    return Loan(
        loan_id=loan_id,
        principal=Decimal(principal),
        status=status,
        installments=installments or [],
        **defaults,
    )


@pytest.fixture
def sample_loans(reference_date: date, now: datetime) -> list[Loan]:
    """Small loan book covering every installment status.

    loan-1 (ACTIVE, 12.00%): PAID 100, PENDING past due 100 (10 days), PENDING future 100
    loan-2 (OVERDUE, 15.00%): OVERDUE 200 (45 days), OVERDUE 200 (75 days), IN_VERIFICATION 200
    loan-3 (PAID): PAID 50, PAID 50
    loan-4 (CANCELLED): no installments
    """
    loan_1 = make_loan(
        "loan-1",
        "300.00",
        LoanStatus.ACTIVE,
        [
            make_installment(
                "loan-1", 1, "100.00", reference_date - timedelta(days=40), InstallmentStatus.PAID,
                payment_report_date=now - timedelta(days=5),
                payment_date=now - timedelta(days=5) + timedelta(hours=10),
            ),
            make_installment(
                "loan-1", 2, "100.00", reference_date - timedelta(days=10), InstallmentStatus.PENDING
            ),
            make_installment(
                "loan-1", 3, "100.00", reference_date + timedelta(days=20), InstallmentStatus.PENDING
            ),
        ],
        interest_rate=Decimal("12.00"),
        customer_name="María Pérez",
    )
    loan_2 = make_loan(
        "loan-2",
        "600.00",
        LoanStatus.OVERDUE,
        [
            make_installment(
                "loan-2", 1, "200.00", reference_date - timedelta(days=75), InstallmentStatus.OVERDUE,
                payment_report_date=now - timedelta(days=3),
                admin_notes="Pago rechazado: comprobante ilegible",
            ),
            make_installment(
                "loan-2", 2, "200.00", reference_date - timedelta(days=45), InstallmentStatus.OVERDUE
            ),
            make_installment(
                "loan-2", 3, "200.00", reference_date - timedelta(days=15),
                InstallmentStatus.IN_VERIFICATION,
                payment_report_date=now - timedelta(days=1),
            ),
        ],
        interest_rate=Decimal("15.00"),
        customer_name="Juan Andrade",
    )
    loan_3 = make_loan(
        "loan-3",
        "100.00",
        LoanStatus.PAID,
        [
            make_installment(
                "loan-3", 1, "50.00", reference_date - timedelta(days=90), InstallmentStatus.PAID,
                payment_report_date=now - timedelta(days=60),
                payment_date=now - timedelta(days=59),
            ),
            make_installment(
                "loan-3", 2, "50.00", reference_date - timedelta(days=60), InstallmentStatus.PAID
            ),
        ],
        customer_name="Rosa Mena",
    )
    loan_4 = make_loan("loan-4", "1000.00", LoanStatus.CANCELLED, customer_name="Pedro Vera")
    return [loan_1, loan_2, loan_3, loan_4]


@pytest.fixture
def restore_logging():
    """Restore root and package logger state after setup_logging."""
    root = logging.getLogger()
    package = logging.getLogger("coop_reports")
    saved = (root.level, root.handlers[:], package.level)
    yield
    root.setLevel(saved[0])
    root.handlers[:] = saved[1]
    package.setLevel(saved[2])
