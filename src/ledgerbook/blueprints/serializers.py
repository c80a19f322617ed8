"""JSON shapes shared by the API blueprints; amounts go out as 2-decimal strings."""

from __future__ import annotations

from datetime import date
from typing import Any, Optional

from flask import request

from ..exceptions import ValidationError
from ..services.cheques import ChequeReminder, StatusBucket
from ..services.collector import parse_date
from ..services.interest import LoanPosition, PaymentAllocation
from ..services.ledger import StatementResult
from ..services.ledger_service import BillReminder
from ..services.reconstructor import StatementEntry, format_amount
from ..services.summary import AccountSummary, HolderSummary


def _iso(value: Optional[date]) -> Optional[str]:
    return value.isoformat() if value is not None else None


def date_arg(name: str, *, default: Optional[date] = None, source: Any = None) -> Optional[date]:
    """Read a YYYY-MM-DD value from the query string (or ``source``)."""

    values = request.args if source is None else source
    raw = values.get(name)
    if raw is None or not str(raw).strip():
        return default
    parsed = parse_date(raw)
    if parsed is None:
        raise ValidationError(f"'{name}' must be a YYYY-MM-DD date", rejected=[{name: raw}])
    return parsed


def int_arg(name: str, *, default: int, minimum: int = 0) -> int:
    raw = request.args.get(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = int(raw)
    except ValueError:
        raise ValidationError(f"'{name}' must be an integer", rejected=[{name: raw}]) from None
    if value < minimum:
        raise ValidationError(f"'{name}' must be at least {minimum}", rejected=[{name: raw}])
    return value


def entry_to_dict(entry: StatementEntry) -> dict:
    return {
        "date": entry.date.isoformat(),
        "kind": entry.kind.value,
        "reference": entry.reference,
        "description": entry.description,
        "amount": format_amount(entry.amount),
        "debit": format_amount(entry.debit),
        "credit": format_amount(entry.credit),
        "balance": format_amount(entry.running_balance),
        "group": entry.group,
        "status": entry.status,
    }


def summary_to_dict(summary: AccountSummary) -> dict:
    return {
        "semantics": summary.semantics.value,
        "total_debits": format_amount(summary.total_debits),
        "total_credits": format_amount(summary.total_credits),
        "net_balance": format_amount(summary.net_balance),
        "outstanding_balance": format_amount(summary.outstanding_balance),
        "windowed_credit_total": format_amount(summary.windowed_credit_total),
        "event_count_in_window": summary.event_count_in_window,
        "last_credit_date": _iso(summary.last_credit_date),
        "avg_event_amount": format_amount(summary.avg_event_amount),
        "group_count": summary.group_count,
        "active_group_count": summary.active_group_count,
    }


def statement_to_dict(result: StatementResult) -> dict:
    return {
        "statement": [entry_to_dict(entry) for entry in result.statement],
        "summary": summary_to_dict(result.summary),
        "skipped": result.skipped,
    }


def holder_to_dict(row: HolderSummary) -> dict:
    return {
        "holder_id": row.holder_id,
        "name": row.name,
        "phone": row.phone,
        "summary": summary_to_dict(row.summary),
    }


def position_to_dict(position: LoanPosition) -> dict:
    return {
        "loan_id": position.loan_id,
        "reference": position.reference,
        "principal": format_amount(position.principal),
        "paid": format_amount(position.paid),
        "balance": format_amount(position.balance),
        "interest": format_amount(position.interest),
        "total_due": format_amount(position.total_due),
    }


def allocation_to_dict(allocation: PaymentAllocation) -> dict:
    return {
        "allocated": format_amount(allocation.allocated),
        "unallocated": format_amount(allocation.unallocated),
        "lines": [
            {
                "bill_id": line.bill_id,
                "interest": format_amount(line.interest),
                "principal": format_amount(line.principal),
                "closes": line.closes,
            }
            for line in allocation.lines
        ],
    }


def bill_reminder_to_dict(reminder: BillReminder) -> dict:
    return {
        "bill_id": reminder.bill_id,
        "bill_number": reminder.bill_number,
        "mahajan_id": reminder.mahajan_id,
        "mahajan_name": reminder.mahajan_name,
        "bill_amount": format_amount(reminder.bill_amount),
        "bill_date": _iso(reminder.bill_date),
        "due_date": _iso(reminder.due_date),
        "outstanding_balance": format_amount(reminder.outstanding_balance),
        "amount_due": format_amount(reminder.amount_due),
    }


def bucket_to_dict(bucket: StatusBucket) -> dict:
    return {"count": bucket.count, "total": format_amount(bucket.total)}


def cheque_reminder_to_dict(reminder: ChequeReminder) -> dict:
    return {
        "cheque_id": reminder.cheque_id,
        "cheque_number": reminder.cheque_number,
        "cheque_date": _iso(reminder.cheque_date),
        "amount": format_amount(reminder.amount),
        "status": reminder.status.value,
        "party_name": reminder.party_name,
        "days_pending": reminder.days_pending,
    }
