"""Click-to-filter selection for the loan status chart."""

from dataclasses import dataclass
from typing import Iterable

from coop_reports.models import Loan, LoanStatus
from coop_reports.reports.filters import filter_loans_by_status, parse_loan_status


@dataclass(frozen=True)
class StatusSelection:
    """Currently selected loan status, if any.

    Selecting the status that is already selected clears the selection.
    """

    selected: LoanStatus | None = None

    def toggle(self, status: LoanStatus | str) -> "StatusSelection":
        """Select ``status``, or clear the selection if it is already selected.

        An unknown status clears the selection.
        """
        status = parse_loan_status(status)
        if status is None or status == self.selected:
            return StatusSelection()
        return StatusSelection(selected=status)

    def clear(self) -> "StatusSelection":
        return StatusSelection()

    @property
    def is_active(self) -> bool:
        return self.selected is not None

    @property
    def label(self) -> str | None:
        """Filter label for export filenames."""
        return self.selected.value if self.selected is not None else None

    def apply(self, loans: Iterable[Loan]) -> list[Loan]:
        """Loans with the selected status, or all loans when nothing is selected."""
        return filter_loans_by_status(loans, self.selected)
