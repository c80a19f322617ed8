"""CSV export helpers for statements and holder summaries."""

from __future__ import annotations

import csv
import io
from datetime import date
from pathlib import Path
from typing import IO, Iterable

from .collector import EventKind
from .reconstructor import StatementEntry, format_amount
from .summary import HolderSummary

STATEMENT_HEADERS = ["date", "reference", "description", "debit", "credit", "balance"]
SUMMARY_HEADERS = [
    "holder_id",
    "name",
    "phone",
    "total_debits",
    "total_credits",
    "outstanding_balance",
    "windowed_credit_total",
    "payment_count",
    "last_payment_date",
    "avg_payment",
    "groups",
    "active_groups",
]


def _serialize_value(value):
    if value is None:
        return ""
    if isinstance(value, date):
        return value.isoformat()
    return str(value)


def _statement_row(entry: StatementEntry) -> dict[str, str]:
    return {
        "date": _serialize_value(entry.date),
        "reference": _serialize_value(entry.reference),
        "description": _serialize_value(entry.description),
        # Blank rather than 0.00 on the side the event does not touch.
        "debit": format_amount(entry.amount) if entry.kind is EventKind.DEBIT else "",
        "credit": format_amount(entry.amount) if entry.kind is EventKind.CREDIT else "",
        "balance": format_amount(entry.running_balance),
    }


def write_statement_csv(statement: Iterable[StatementEntry], fh: IO[str]) -> int:
    """Write statement rows in the order given and return how many were written."""

    writer = csv.DictWriter(
        fh, fieldnames=STATEMENT_HEADERS, extrasaction="ignore", quoting=csv.QUOTE_MINIMAL
    )
    writer.writeheader()
    count = 0
    for entry in statement:
        writer.writerow(_statement_row(entry))
        count += 1
    return count


def export_statement_csv(*, statement: Iterable[StatementEntry], output_path: Path) -> Path:
    """Write a statement to CSV at `output_path`.

    Columns are deterministic: date, reference, description, debit, credit,
    balance. Rows keep the chronological order of ``statement`` exactly.
    Returns the path written.
    """

    output_path.parent.mkdir(parents=True, exist_ok=True)
    # Use newline='' for csv on Windows
    with output_path.open("w", newline="", encoding="utf-8") as fh:
        write_statement_csv(statement, fh)
    return output_path


def statement_csv_text(statement: Iterable[StatementEntry]) -> str:
    buffer = io.StringIO(newline="")
    write_statement_csv(statement, buffer)
    return buffer.getvalue()


def write_summary_csv(summaries: Iterable[HolderSummary], fh: IO[str]) -> int:
    writer = csv.DictWriter(
        fh, fieldnames=SUMMARY_HEADERS, extrasaction="ignore", quoting=csv.QUOTE_MINIMAL
    )
    writer.writeheader()
    count = 0
    for row in summaries:
        s = row.summary
        writer.writerow(
            {
                "holder_id": _serialize_value(row.holder_id),
                "name": _serialize_value(row.name),
                "phone": _serialize_value(row.phone),
                "total_debits": format_amount(s.total_debits),
                "total_credits": format_amount(s.total_credits),
                "outstanding_balance": format_amount(s.outstanding_balance),
                "windowed_credit_total": format_amount(s.windowed_credit_total),
                "payment_count": _serialize_value(s.event_count_in_window),
                "last_payment_date": _serialize_value(s.last_credit_date),
                "avg_payment": format_amount(s.avg_event_amount),
                "groups": _serialize_value(s.group_count),
                "active_groups": _serialize_value(s.active_group_count),
            }
        )
        count += 1
    return count


def export_summary_csv(*, summaries: Iterable[HolderSummary], output_path: Path) -> Path:
    """Write holder summaries to CSV in the order given."""

    output_path.parent.mkdir(parents=True, exist_ok=True)
    with output_path.open("w", newline="", encoding="utf-8") as fh:
        write_summary_csv(summaries, fh)
    return output_path


def summary_csv_text(summaries: Iterable[HolderSummary]) -> str:
    buffer = io.StringIO(newline="")
    write_summary_csv(summaries, buffer)
    return buffer.getvalue()
