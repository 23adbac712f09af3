"""JSON file source and writer for loan book snapshots.

File layout::

    {
      "captured_at": "2024-06-15T10:30:00",
      "loans": [
        {"loan_id": "...", ..., "installments": [{"installment_number": 1, ...}]}
      ]
    }
"""

import json
import logging
from datetime import date, datetime, timezone
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Any

from coop_reports.exceptions import DataUnavailableError, ExportError, InvalidRecordError
from coop_reports.exporters.serialization import to_dict
from coop_reports.models import Installment, InstallmentStatus, Loan, LoanStatus
from coop_reports.store import LoanSnapshot

logger = logging.getLogger(__name__)


def _decimal(value: Any) -> Decimal | None:
    if value is None:
        return None
    return Decimal(str(value))


def _date(value: str | None) -> date | None:
    if not value:
        return None
    # Accept full timestamps for date fields
    return date.fromisoformat(value[:10])


def _datetime(value: str | None) -> datetime | None:
    """Parse an ISO timestamp into a naive datetime.

    Timestamps with an offset (or a trailing ``Z``) are converted to UTC
    and stored without tzinfo.
    """
    if not value:
        return None
    if not isinstance(value, str):
        raise TypeError(f"expected an ISO timestamp string, got {type(value).__name__}")
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed


def installment_from_dict(data: dict[str, Any], loan_id: str) -> Installment:
    """Build an installment from its JSON representation."""
    if not isinstance(data, dict):
        raise InvalidRecordError(f"Installment record for loan {loan_id} must be an object")
    try:
        return Installment(
            loan_id=data.get("loan_id", loan_id),
            installment_number=int(data["installment_number"]),
            amount=Decimal(str(data["amount"])),
            due_date=_date(data["due_date"]),
            status=InstallmentStatus(data["status"]),
            payment_date=_datetime(data.get("payment_date")),
            payment_report_date=_datetime(data.get("payment_report_date")),
            admin_notes=data.get("admin_notes"),
        )
    except (KeyError, ValueError, TypeError, InvalidOperation) as e:
        raise InvalidRecordError(f"Invalid installment record for loan {loan_id}: {e}") from e


def loan_from_dict(data: dict[str, Any]) -> Loan:
    """Build a loan, with its installments, from its JSON representation."""
    if not isinstance(data, dict):
        raise InvalidRecordError(f"Loan record must be an object, got {type(data).__name__}")
    loan_id = data.get("loan_id", "<unknown>")
    try:
        loan = Loan(
            loan_id=data["loan_id"],
            customer_name=data["customer_name"],
            customer_email=data.get("customer_email", ""),
            principal=Decimal(str(data["principal"])),
            application_date=_date(data["application_date"]),
            status=LoanStatus(data["status"]),
            customer_id=data.get("customer_id"),
            currency=data.get("currency", "USD"),
            interest_rate=_decimal(data.get("interest_rate")),
            disbursement_date=_date(data.get("disbursement_date")),
        )
    except (KeyError, ValueError, TypeError, InvalidOperation) as e:
        raise InvalidRecordError(f"Invalid loan record {loan_id}: {e}") from e

    loan.installments = sorted(
        (installment_from_dict(inst, loan.loan_id) for inst in data.get("installments") or []),
        key=lambda i: i.installment_number,
    )
    return loan


class JsonFileSource:
    """Read loan book snapshots from a JSON file."""

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)

    def fetch(self) -> LoanSnapshot:
        """Load the whole file and build a snapshot.

        Raises
        ------
        DataUnavailableError
            If the file cannot be read or is not valid JSON.
        InvalidRecordError
            If a loan or installment record is malformed.
        """
        try:
            with open(self.path, encoding="utf-8") as f:
                payload = json.load(f)
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
            raise DataUnavailableError(f"Cannot read snapshot {self.path}: {e}") from e

        if isinstance(payload, list):
            payload = {"loans": payload}
        if not isinstance(payload, dict):
            raise InvalidRecordError(f"Snapshot {self.path} must be an object or a list of loans")

        try:
            captured_at = _datetime(payload.get("captured_at")) or datetime.now()
        except (ValueError, TypeError) as e:
            raise InvalidRecordError(f"Invalid captured_at in snapshot {self.path}: {e}") from e

        snapshot = LoanSnapshot.from_loans(
            [loan_from_dict(item) for item in payload.get("loans") or []],
            captured_at=captured_at,
        )
        logger.info("Loaded snapshot from %s: %s", self.path, snapshot.summary())
        return snapshot


def write_snapshot(snapshot: LoanSnapshot, path: str | Path, pretty: bool = False) -> Path:
    """Write a snapshot in the format read by :class:`JsonFileSource`."""
    file_path = Path(path)
    data = {
        "captured_at": snapshot.captured_at.isoformat(),
        "loans": [to_dict(loan) for loan in snapshot.all_loans()],
    }
    try:
        file_path.parent.mkdir(parents=True, exist_ok=True)
        with open(file_path, "w", encoding="utf-8") as f:
            if pretty:
                json.dump(data, f, indent=2, ensure_ascii=False)
            else:
                json.dump(data, f, ensure_ascii=False)
    except OSError as e:
        raise ExportError(f"Failed to write snapshot {file_path}: {e}") from e

    logger.info("Wrote snapshot to %s: %s", file_path, snapshot.summary())
    return file_path
