"""Sample loan portfolio generator with realistic payment behavior."""

from __future__ import annotations

import logging
import random
from datetime import date, datetime, time, timedelta
from decimal import Decimal
from typing import Iterator

from coop_reports.generators.base import BaseGenerator
from coop_reports.models import Installment, InstallmentStatus, Loan, LoanStatus
from coop_reports.store import LoanSnapshot

logger = logging.getLogger(__name__)

REJECTION_NOTES = [
    "Pago rechazado: comprobante ilegible",
    "Rechazado, el monto no coincide",
    "Transferencia rechazada por el banco",
]


class PaymentBehavior:
    """Simulate member payment behavior on an installment schedule."""

    BEHAVIORS = ["good", "occasional_late", "chronic_late", "defaulter"]

    def __init__(self, seed: int | None = None) -> None:
        if seed is not None:
            random.seed(seed)

    def apply(
        self,
        installments: list[Installment],
        reference_date: date,
        on_time_rate: float = 0.80,
        late_rate: float = 0.12,
        default_rate: float = 0.08,
        rejection_rate: float = 0.03,
    ) -> list[Installment]:
        """Set statuses and payment dates on installments due before ``reference_date``.

        Parameters
        ----------
        installments : list[Installment]
            Installment schedule of one loan, modified in place.
        reference_date : date
            Current date; later installments stay PENDING.
        on_time_rate : float
            Weight of members who pay on time.
        late_rate : float
            Weight of members who pay late.
        default_rate : float
            Weight of members who stop paying.
        rejection_rate : float
            Probability that a payment report is rejected by an admin.

        Returns
        -------
        list[Installment]
            The same installments.
        """
        behavior = random.choices(
            self.BEHAVIORS,
            weights=[on_time_rate, late_rate * 0.7, late_rate * 0.3, default_rate],
            k=1,
        )[0]
        stop_after = random.randint(2, 6)
        now = datetime.combine(reference_date, time(18, 0))

        for inst in installments:
            if inst.due_date >= reference_date:
                continue

            if behavior == "defaulter" and inst.installment_number > stop_after:
                inst.status = InstallmentStatus.OVERDUE
                continue

            if behavior == "good":
                days_late = random.randint(-3, 2)
            elif behavior == "occasional_late":
                days_late = random.randint(0, 5) if random.random() < 0.8 else random.randint(10, 30)
            elif behavior == "chronic_late":
                days_late = random.randint(5, 45)
            else:
                days_late = random.randint(0, 15)

            reported_at = datetime.combine(
                inst.due_date + timedelta(days=days_late), time(random.randint(8, 20))
            )
            if reported_at > now:
                # Not reported yet
                inst.status = InstallmentStatus.OVERDUE
                continue

            inst.payment_report_date = reported_at

            if random.random() < rejection_rate:
                inst.status = InstallmentStatus.OVERDUE
                inst.admin_notes = random.choice(REJECTION_NOTES)
                continue

            resolved_at = reported_at + timedelta(hours=random.randint(1, 72))
            if resolved_at > now:
                inst.status = InstallmentStatus.IN_VERIFICATION
            else:
                inst.status = InstallmentStatus.PAID
                inst.payment_date = resolved_at

        return installments


class PortfolioGenerator(BaseGenerator):
    """Generate a synthetic cooperative loan book."""

    # Loans that never reach disbursement
    UNDISBURSED_STATUSES = [
        LoanStatus.REQUESTED,
        LoanStatus.IN_REVIEW,
        LoanStatus.APPROVED,
        LoanStatus.REJECTED,
        LoanStatus.CANCELLED,
    ]
    UNDISBURSED_RATE = 0.20

    TERMS_MONTHS = [6, 12, 18, 24, 36]
    # Annual interest rate range, percent
    INTEREST_RANGE = (9.0, 18.0)

    def __init__(self, seed: int | None = None, locale: str = "es_ES") -> None:
        super().__init__(seed, locale)
        self._payment_behavior = PaymentBehavior(seed=seed)

    def generate(self, num_loans: int = 50, reference_date: date | None = None) -> LoanSnapshot:
        """Generate a snapshot of ``num_loans`` loans.

        Parameters
        ----------
        num_loans : int
            Number of loans to generate.
        reference_date : date | None
            Snapshot date; defaults to today.

        Returns
        -------
        LoanSnapshot
            Snapshot holding the loans and their installments.
        """
        reference_date = reference_date or date.today()
        snapshot = LoanSnapshot(captured_at=datetime.combine(reference_date, time(18, 0)))

        for loan in self.generate_batch(num_loans, reference_date):
            snapshot.add_loan(loan)

        logger.info("Generated sample portfolio: %s", snapshot.summary())
        return snapshot

    def generate_batch(self, count: int, reference_date: date) -> Iterator[Loan]:
        """Generate loans one at a time.

        Yields
        ------
        Loan
            Generated loan with its installments.
        """
        for _ in range(count):
            yield self._generate_one(reference_date)

    def _generate_one(self, reference_date: date) -> Loan:
        """Generate a single loan."""
        name = self.fake.name()
        application_date = reference_date - timedelta(days=random.randint(30, 720))

        loan = Loan(
            loan_id=self.fake.uuid4(),
            customer_name=name,
            customer_email=self.fake.email(),
            principal=Decimal(random.randint(5, 100) * 100),
            application_date=application_date,
            status=LoanStatus.ACTIVE,
            customer_id=self.fake.uuid4(),
            interest_rate=Decimal(str(round(random.uniform(*self.INTEREST_RANGE), 2))),
        )

        if random.random() < self.UNDISBURSED_RATE:
            loan.status = random.choice(self.UNDISBURSED_STATUSES)
            return loan

        loan.disbursement_date = application_date + timedelta(days=random.randint(1, 10))
        loan.installments = list(
            self._generate_installments(loan, random.choice(self.TERMS_MONTHS))
        )
        self._payment_behavior.apply(loan.installments, reference_date)
        loan.status = self._loan_status(loan.installments)
        return loan

    def _generate_installments(self, loan: Loan, term_months: int) -> Iterator[Installment]:
        """Fixed-payment (PRICE) schedule, one installment every 30 days."""
        principal = float(loan.principal)
        rate = float(loan.interest_rate) / 12 / 100

        if rate > 0:
            pmt = principal * (rate * (1 + rate) ** term_months) / ((1 + rate) ** term_months - 1)
        else:
            pmt = principal / term_months

        for i in range(1, term_months + 1):
            yield Installment(
                loan_id=loan.loan_id,
                installment_number=i,
                amount=Decimal(str(round(pmt, 2))),
                due_date=loan.disbursement_date + timedelta(days=30 * i),
                status=InstallmentStatus.PENDING,
            )

    @staticmethod
    def _loan_status(installments: list[Installment]) -> LoanStatus:
        """Derive a disbursed loan's status from its installments."""
        if any(i.status == InstallmentStatus.OVERDUE for i in installments):
            return LoanStatus.OVERDUE
        if all(i.status == InstallmentStatus.PAID for i in installments):
            return LoanStatus.PAID
        return LoanStatus.ACTIVE
