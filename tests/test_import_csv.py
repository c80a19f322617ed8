"""Tests for CSV ingestion of ledger events."""

from __future__ import annotations

from datetime import date
from decimal import Decimal

import pytest

from ledgerbook.exceptions import ValidationError
from ledgerbook.services.collector import EventKind
from ledgerbook.services.import_csv import ColumnMapping, collect_csv_events, read_source_records


def _write(tmp_path, text: str):
    path = tmp_path / "events.csv"
    path.write_text(text, encoding="utf-8")
    return path


def test_read_source_records_lowercases_headers_and_blanks(tmp_path):
    path = _write(tmp_path, "Date,Kind,Amount,Reference\n2024-01-01,debit,100,\n")

    (record,) = read_source_records(path)

    assert record == {"date": "2024-01-01", "kind": "debit", "amount": "100", "reference": None}


def test_collect_csv_events_normalizes_rows(tmp_path):
    path = _write(
        tmp_path,
        "date,kind,amount,reference,description\n"
        "2024-01-05,DEBIT,1000,L-1,Loan\n"
        "2024-01-10,credit,300.50,P-1,First payment\n",
    )

    result = collect_csv_events(path)

    assert result.skipped == 0
    assert [e.kind for e in result.events] == [EventKind.DEBIT, EventKind.CREDIT]
    assert result.events[1].amount == Decimal("300.50")
    assert result.events[1].date == date(2024, 1, 10)
    assert result.events[1].description == "First payment"


def test_bad_rows_are_skipped_not_fatal(tmp_path):
    path = _write(
        tmp_path,
        "date,kind,amount\n"
        "2024-01-05,debit,1000\n"
        "not-a-date,credit,5\n"
        "2024-01-06,transfer,5\n"
        "2024-01-07,credit,\n"
        "2024-01-08,credit,-3\n",
    )

    result = collect_csv_events(path)

    assert len(result.events) == 1
    assert result.skipped == 4


def test_strict_mode_raises(tmp_path):
    path = _write(tmp_path, "date,kind,amount\nbad,debit,1\n")

    with pytest.raises(ValidationError):
        collect_csv_events(path, strict=True)


def test_custom_mapping_and_missing_columns(tmp_path):
    path = _write(tmp_path, "When,Type,Value,Loan,State\n2024-02-01,debit,10,7,active\n")
    mapping = ColumnMapping(
        date="When", kind="Type", amount="Value", reference=None, description=None, group="Loan", status="State"
    )

    (event,) = collect_csv_events(path, mapping).events

    assert (event.group, event.status) == ("7", "active")
    with pytest.raises(ValidationError) as excinfo:
        collect_csv_events(path, ColumnMapping())
    assert excinfo.value.rejected == ["date", "amount", "kind"]
