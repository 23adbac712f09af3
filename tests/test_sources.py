"""Tests for data sources."""

import json
from datetime import datetime
from decimal import Decimal
from pathlib import Path

import pytest

from coop_reports.exceptions import DataUnavailableError, InvalidRecordError
from coop_reports.models import InstallmentStatus, LoanStatus
from coop_reports.reports import ReportAggregator
from coop_reports.sources import DataSource, InMemorySource, JsonFileSource, write_snapshot
from coop_reports.store import LoanSnapshot


class TestInMemorySource:
    """Tests for InMemorySource."""

    def test_fetch_returns_independent_copies(self, sample_loans) -> None:
        source = InMemorySource(sample_loans)

        first = source.fetch()
        first.get_loan("loan-1").status = LoanStatus.CANCELLED
        second = source.fetch()

        assert second.get_loan("loan-1").status == LoanStatus.ACTIVE
        assert sample_loans[0].status == LoanStatus.ACTIVE

    def test_empty(self) -> None:
        assert InMemorySource().fetch().is_empty()

    def test_satisfies_protocol(self) -> None:
        assert isinstance(InMemorySource(), DataSource)
        assert isinstance(JsonFileSource("x.json"), DataSource)


class TestJsonFileSource:
    """Tests for JsonFileSource and write_snapshot."""

    def test_round_trip(self, tmp_path: Path, sample_loans) -> None:
        captured_at = datetime(2024, 6, 15, 18, 0)
        path = write_snapshot(
            LoanSnapshot.from_loans(sample_loans, captured_at=captured_at),
            tmp_path / "nested" / "snapshot.json",
            pretty=True,
        )

        snapshot = JsonFileSource(path).fetch()

        assert snapshot.captured_at == captured_at
        assert [l.loan_id for l in snapshot.all_loans()] == [l.loan_id for l in sample_loans]
        loan_2 = snapshot.get_loan("loan-2")
        assert loan_2.principal == Decimal("600.00")
        assert loan_2.interest_rate == Decimal("15.00")
        assert loan_2.status == LoanStatus.OVERDUE
        assert loan_2.installments[0].status == InstallmentStatus.OVERDUE
        assert loan_2.installments[0].admin_notes.startswith("Pago rechazado")
        assert loan_2.installments[0].payment_report_date == sample_loans[1].installments[0].payment_report_date
        assert snapshot.get_loan("loan-4").installments == []
        assert snapshot.get_loan("loan-4").interest_rate is None

    def test_accepts_list_payload_and_sorts_installments(self, tmp_path: Path) -> None:
        path = tmp_path / "loans.json"
        path.write_text(
            json.dumps(
                [
                    {
                        "loan_id": "L1",
                        "customer_name": "Ana",
                        "principal": 100,
                        "application_date": "2024-01-01T10:00:00",
                        "status": "ACTIVE",
                        "installments": [
                            {"installment_number": 2, "amount": "50", "due_date": "2024-03-01", "status": "PENDING"},
                            {"installment_number": 1, "amount": "50", "due_date": "2024-02-01", "status": "PAID"},
                        ],
                    }
                ]
            ),
            encoding="utf-8",
        )

        snapshot = JsonFileSource(path).fetch()

        loan = snapshot.get_loan("L1")
        assert loan.customer_email == ""
        assert loan.application_date.isoformat() == "2024-01-01"
        assert [i.installment_number for i in loan.installments] == [1, 2]
        assert loan.installments[0].loan_id == "L1"

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(DataUnavailableError):
            JsonFileSource(tmp_path / "missing.json").fetch()

    def test_invalid_json(self, tmp_path: Path) -> None:
        path = tmp_path / "bad.json"
        path.write_text("{not json", encoding="utf-8")

        with pytest.raises(DataUnavailableError):
            JsonFileSource(path).fetch()

    def test_invalid_loan_record(self, tmp_path: Path) -> None:
        path = tmp_path / "bad.json"
        path.write_text(json.dumps({"loans": [{"loan_id": "L1", "status": "UNKNOWN"}]}), encoding="utf-8")

        with pytest.raises(InvalidRecordError, match="L1"):
            JsonFileSource(path).fetch()

    def test_invalid_installment_record(self, tmp_path: Path) -> None:
        loan = {
            "loan_id": "L1",
            "customer_name": "Ana",
            "principal": "10",
            "application_date": "2024-01-01",
            "status": "ACTIVE",
            "installments": [{"installment_number": 1, "amount": "abc", "due_date": "2024-02-01", "status": "PAID"}],
        }
        path = tmp_path / "bad.json"
        path.write_text(json.dumps({"loans": [loan]}), encoding="utf-8")

        with pytest.raises(InvalidRecordError):
            JsonFileSource(path).fetch()

    def test_non_object_payload(self, tmp_path: Path) -> None:
        path = tmp_path / "bad.json"
        path.write_text("42", encoding="utf-8")

        with pytest.raises(InvalidRecordError):
            JsonFileSource(path).fetch()

    def test_non_object_loan_record(self, tmp_path: Path) -> None:
        path = tmp_path / "bad.json"
        path.write_text(json.dumps(["L1"]), encoding="utf-8")

        with pytest.raises(InvalidRecordError, match="must be an object"):
            JsonFileSource(path).fetch()

    def test_invalid_utf8(self, tmp_path: Path) -> None:
        path = tmp_path / "latin1.json"
        path.write_bytes(b'{"loans": [{"customer_name": "\xff\xfe"}]}')

        with pytest.raises(DataUnavailableError):
            JsonFileSource(path).fetch()

    def test_invalid_captured_at(self, tmp_path: Path) -> None:
        path = tmp_path / "bad.json"
        path.write_text(json.dumps({"captured_at": "yesterday", "loans": []}), encoding="utf-8")

        with pytest.raises(InvalidRecordError, match="captured_at"):
            JsonFileSource(path).fetch()

    def test_offset_timestamps_become_naive_utc(self, tmp_path: Path) -> None:
        loan = {
            "loan_id": "L1",
            "customer_name": "Ana",
            "principal": "100",
            "application_date": "2024-01-01",
            "status": "ACTIVE",
            "installments": [
                {
                    "installment_number": 1,
                    "amount": "50",
                    "due_date": "2024-06-01",
                    "status": "PAID",
                    "payment_report_date": "2024-06-10T10:00:00+00:00",
                    "payment_date": "2024-06-10T09:00:00-05:00",
                },
                {
                    "installment_number": 2,
                    "amount": "50",
                    "due_date": "2024-07-01",
                    "status": "IN_VERIFICATION",
                    "payment_report_date": "2024-06-12T08:00:00Z",
                },
            ],
        }
        path = tmp_path / "aware.json"
        path.write_text(
            json.dumps({"captured_at": "2024-06-15T18:00:00+00:00", "loans": [loan]}),
            encoding="utf-8",
        )
        source = JsonFileSource(path)

        snapshot = source.fetch()
        first, second = snapshot.get_loan_installments("L1")

        assert snapshot.captured_at == datetime(2024, 6, 15, 18, 0)
        assert first.payment_report_date == datetime(2024, 6, 10, 10, 0)
        assert first.payment_date == datetime(2024, 6, 10, 14, 0)
        assert second.payment_report_date == datetime(2024, 6, 12, 8, 0)

        stats = ReportAggregator().build_report(source, now=datetime(2024, 6, 15, 18, 0))

        assert stats.activity.reported_count == 2
        assert stats.activity.approved_count == 1
        assert stats.activity.average_resolution_hours == Decimal("4.00")

    def test_non_string_timestamp(self, tmp_path: Path) -> None:
        loan = {
            "loan_id": "L1",
            "customer_name": "Ana",
            "principal": "100",
            "application_date": "2024-01-01",
            "status": "ACTIVE",
            "installments": [
                {
                    "installment_number": 1,
                    "amount": "50",
                    "due_date": "2024-06-01",
                    "status": "PAID",
                    "payment_date": 1718000000,
                }
            ],
        }
        path = tmp_path / "bad.json"
        path.write_text(json.dumps({"loans": [loan]}), encoding="utf-8")

        with pytest.raises(InvalidRecordError):
            JsonFileSource(path).fetch()
