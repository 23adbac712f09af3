"""In-memory snapshot of the loan book."""

from coop_reports.store.snapshot import LoanSnapshot

__all__ = ["LoanSnapshot"]
