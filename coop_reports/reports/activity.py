"""Payment events derived from installment payment reports."""

from typing import Iterable

from coop_reports.models import InstallmentStatus, Loan, PaymentEvent, PaymentOutcome

# Admins mark rejected payment reports in the notes ("rechazado", "rechazo")
REJECTION_MARKER = "rechaz"


def _outcome(status: InstallmentStatus, admin_notes: str | None) -> PaymentOutcome:
    if status == InstallmentStatus.PAID:
        return PaymentOutcome.APPROVED
    if status == InstallmentStatus.REJECTED:
        return PaymentOutcome.REJECTED
    if status == InstallmentStatus.IN_VERIFICATION:
        return PaymentOutcome.PENDING
    # A rejected report reverts the installment to pending/overdue
    if admin_notes and REJECTION_MARKER in admin_notes.lower():
        return PaymentOutcome.REJECTED
    return PaymentOutcome.PENDING


def payment_events_from_installments(loans: Iterable[Loan]) -> list[PaymentEvent]:
    """One event per installment with a reported payment."""
    events = []
    for loan in loans:
        for inst in loan.installments:
            if inst.payment_report_date is None:
                continue
            outcome = _outcome(inst.status, inst.admin_notes)
            events.append(
                PaymentEvent(
                    loan_id=loan.loan_id,
                    installment_number=inst.installment_number,
                    reported_at=inst.payment_report_date,
                    outcome=outcome,
                    resolved_at=inst.payment_date if outcome == PaymentOutcome.APPROVED else None,
                )
            )
    return events
