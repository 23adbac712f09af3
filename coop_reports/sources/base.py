"""Data source contract for report snapshots."""

from typing import Protocol, runtime_checkable

from coop_reports.store import LoanSnapshot


@runtime_checkable
class DataSource(Protocol):
    """Supplies a consistent snapshot of the loan book on demand.

    Implementations return a complete snapshot or raise
    :class:`~coop_reports.exceptions.DataUnavailableError`; a partially
    read record is never returned.
    """

    def fetch(self) -> LoanSnapshot:
        ...
