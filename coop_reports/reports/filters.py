"""Grouping and filtering of loans and installments for drill-down views."""

import logging
from typing import Iterable, Protocol, Sequence, TypeVar

from coop_reports.models import (
    ATTENTION_INSTALLMENT_STATUSES,
    InstallmentRow,
    InstallmentStatus,
    Loan,
    LoanStatus,
)

logger = logging.getLogger(__name__)

ALL_STATUSES = "all"


class _HasInstallmentStatus(Protocol):
    @property
    def status(self) -> InstallmentStatus: ...


T = TypeVar("T", bound=_HasInstallmentStatus)


def group_loans_by_status(loans: Iterable[Loan]) -> dict[LoanStatus, int]:
    """Count loans per status, in order of first appearance."""
    counts: dict[LoanStatus, int] = {}
    for loan in loans:
        counts[loan.status] = counts.get(loan.status, 0) + 1
    return counts


def parse_loan_status(value: LoanStatus | str | None) -> LoanStatus | None:
    """Resolve a loan status filter value.

    Returns None for an empty, ``"all"`` or unrecognized value. Unrecognized
    values are logged at WARNING.
    """
    if value is None or isinstance(value, LoanStatus):
        return value
    normalized = value.strip().upper().replace(" ", "_")
    if not normalized or normalized.lower() == ALL_STATUSES:
        return None
    try:
        return LoanStatus(normalized)
    except ValueError:
        logger.warning("Unknown loan status filter %r, showing all", value)
        return None


def filter_loans_by_status(loans: Iterable[Loan], status: LoanStatus | str | None) -> list[Loan]:
    """Loans with exactly ``status``.

    All loans are returned when ``status`` is None, ``"all"`` or not a
    known loan status.
    """
    status = parse_loan_status(status)
    if status is None:
        return list(loans)
    return [loan for loan in loans if loan.status == status]


def parse_installment_status(value: InstallmentStatus | str | None) -> InstallmentStatus | None:
    """Resolve an installment status filter value.

    Returns None for an empty, ``"all"`` or unrecognized value. Unrecognized
    values are logged at WARNING.
    """
    if value is None or isinstance(value, InstallmentStatus):
        return value
    normalized = value.strip().upper().replace(" ", "_")
    if not normalized or normalized.lower() == ALL_STATUSES:
        return None
    try:
        return InstallmentStatus(normalized)
    except ValueError:
        logger.warning("Unknown installment status filter %r, showing all", value)
        return None


def filter_installments_by_status(
    installments: Sequence[T],
    status_filter: str | InstallmentStatus | None,
) -> list[T]:
    """Installments matching ``status_filter``, in their original order.

    ``"all"`` (any case) returns every installment. An unrecognized
    status is treated as ``"all"``.
    """
    status = parse_installment_status(status_filter)
    if status is None:
        return list(installments)
    return [inst for inst in installments if inst.status == status]


def filter_rows_by_client(rows: Iterable[InstallmentRow], query: str) -> list[InstallmentRow]:
    """Case-insensitive substring match on the customer name."""
    needle = query.strip().lower()
    if not needle:
        return list(rows)
    return [row for row in rows if needle in row.customer_name.lower()]


def requires_attention(installments: Iterable[_HasInstallmentStatus]) -> bool:
    """True when any installment is waiting for payment verification."""
    return any(inst.status == InstallmentStatus.IN_VERIFICATION for inst in installments)


def overdue_installments(loans: Iterable[Loan]) -> list[InstallmentRow]:
    """Overdue installments of all loans, joined with their customer."""
    return [
        InstallmentRow.from_loan(loan, inst)
        for loan in loans
        for inst in loan.installments
        if inst.status == InstallmentStatus.OVERDUE
    ]


def attention_installments(loans: Iterable[Loan]) -> list[InstallmentRow]:
    """Installments that are pending, overdue or in verification."""
    return [
        InstallmentRow.from_loan(loan, inst)
        for loan in loans
        for inst in loan.installments
        if inst.status in ATTENTION_INSTALLMENT_STATUSES
    ]
