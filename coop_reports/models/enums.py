"""Enumeration types for loan reporting entities."""

from enum import Enum


class LoanStatus(str, Enum):
    REQUESTED = "REQUESTED"
    IN_REVIEW = "IN_REVIEW"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"
    ACTIVE = "ACTIVE"
    OVERDUE = "OVERDUE"
    PAID = "PAID"
    CANCELLED = "CANCELLED"


# Disbursed and not yet repaid
OPEN_LOAN_STATUSES = frozenset({LoanStatus.ACTIVE, LoanStatus.OVERDUE})


class InstallmentStatus(str, Enum):
    PENDING = "PENDING"
    PAID = "PAID"
    OVERDUE = "OVERDUE"
    IN_VERIFICATION = "IN_VERIFICATION"
    REJECTED = "REJECTED"


# Statuses shown on the "requires attention" report
ATTENTION_INSTALLMENT_STATUSES = frozenset(
    {InstallmentStatus.PENDING, InstallmentStatus.OVERDUE, InstallmentStatus.IN_VERIFICATION}
)


class PaymentOutcome(str, Enum):
    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"
