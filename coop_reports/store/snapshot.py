"""Loan book snapshot with referential integrity between loans and installments."""

from dataclasses import dataclass, field
from datetime import datetime

from coop_reports.exceptions import ReferentialIntegrityError
from coop_reports.models import Installment, InstallmentRow, Loan


@dataclass
class LoanSnapshot:
    """Consistent, in-memory view of loans and their installments.

    Installments are owned by their loan (``Loan.installments``); the
    snapshot keeps an index from loan ID to loan so that installments
    arriving separately can be attached by their ``loan_id``.
    """

    loans: dict[str, Loan] = field(default_factory=dict)
    captured_at: datetime = field(default_factory=datetime.now)

    @classmethod
    def from_loans(cls, loans: list[Loan], captured_at: datetime | None = None) -> "LoanSnapshot":
        """Build a snapshot from loans that already carry their installments."""
        snapshot = cls(captured_at=captured_at or datetime.now())
        for loan in loans:
            snapshot.add_loan(loan)
        return snapshot

    def add_loan(self, loan: Loan) -> None:
        """Add a loan (and any installments it already holds) to the snapshot."""
        for inst in loan.installments:
            if inst.loan_id != loan.loan_id:
                raise ReferentialIntegrityError(
                    f"Installment {inst.installment_number} references loan {inst.loan_id}, "
                    f"but is attached to loan {loan.loan_id}"
                )
        self.loans[loan.loan_id] = loan

    def add_installment(self, installment: Installment) -> None:
        """Attach an installment to its loan, keeping installment-number order."""
        loan = self.loans.get(installment.loan_id)
        if loan is None:
            raise ReferentialIntegrityError(f"Loan {installment.loan_id} not found")

        loan.installments.append(installment)
        loan.installments.sort(key=lambda i: i.installment_number)

    # Query methods
    def get_loan(self, loan_id: str) -> Loan | None:
        """Get a loan by ID."""
        return self.loans.get(loan_id)

    def get_loan_installments(self, loan_id: str) -> list[Installment]:
        """Get all installments for a loan."""
        loan = self.loans.get(loan_id)
        return list(loan.installments) if loan else []

    def all_loans(self) -> list[Loan]:
        """All loans in insertion order."""
        return list(self.loans.values())

    def all_installments(self) -> list[Installment]:
        """All installments, flattened loan by loan."""
        return [inst for loan in self.loans.values() for inst in loan.installments]

    def installment_rows(self) -> list[InstallmentRow]:
        """All installments joined with their loan's customer."""
        return [
            InstallmentRow.from_loan(loan, inst)
            for loan in self.loans.values()
            for inst in loan.installments
        ]

    def is_empty(self) -> bool:
        return not self.loans

    def summary(self) -> dict[str, int]:
        """Return summary counts of all entities."""
        return {
            "loans": len(self.loans),
            "installments": sum(len(loan.installments) for loan in self.loans.values()),
        }
