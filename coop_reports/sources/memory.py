"""In-memory data source for tests and embedding callers."""

from copy import deepcopy
from datetime import datetime

from coop_reports.models import Loan
from coop_reports.store import LoanSnapshot


class InMemorySource:
    """Serve snapshots of a fixed list of loans.

    Each ``fetch`` returns an independent deep copy, so report requests
    never share mutable records.
    """

    def __init__(self, loans: list[Loan] | None = None) -> None:
        self._loans = list(loans or [])

    def fetch(self) -> LoanSnapshot:
        return LoanSnapshot.from_loans(deepcopy(self._loans), captured_at=datetime.now())
