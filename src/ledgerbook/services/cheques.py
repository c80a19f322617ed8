"""Cheque status bookkeeping and pending-cheque reminders."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Any, Iterable

from ..exceptions import ValidationError
from .collector import parse_amount, parse_date


class ChequeStatus(str, Enum):
    PENDING = "pending"
    PROCESSING = "processing"
    CLEARED = "cleared"
    BOUNCED = "bounced"


OPEN_STATUSES = frozenset({ChequeStatus.PENDING, ChequeStatus.PROCESSING})


def _status_of(cheque: Any) -> ChequeStatus | None:
    value = getattr(cheque, "status", None)
    if isinstance(value, ChequeStatus):
        return value
    try:
        return ChequeStatus(str(value).strip().lower())
    except ValueError:
        return None


def parse_status(value: Any) -> ChequeStatus:
    """Validate a status string; any status may be written directly."""

    if isinstance(value, ChequeStatus):
        return value
    try:
        return ChequeStatus(str(value).strip().lower())
    except ValueError:
        allowed = ", ".join(s.value for s in ChequeStatus)
        raise ValidationError(
            f"cheque status must be one of: {allowed}", rejected=[value]
        ) from None


@dataclass(frozen=True, slots=True)
class StatusBucket:
    count: int
    total: Decimal


def status_breakdown(cheques: Iterable[Any]) -> dict[ChequeStatus, StatusBucket]:
    """Count and total cheques per status; every status is present in the result."""

    counts = {status: 0 for status in ChequeStatus}
    totals = {status: Decimal("0") for status in ChequeStatus}
    for cheque in cheques:
        status = _status_of(cheque)
        if status is None:
            continue
        counts[status] += 1
        totals[status] += parse_amount(getattr(cheque, "amount", None)) or Decimal("0")
    return {status: StatusBucket(counts[status], totals[status]) for status in ChequeStatus}


@dataclass(frozen=True, slots=True)
class ChequeReminder:
    cheque_id: int | None
    cheque_number: str
    cheque_date: date
    amount: Decimal
    status: ChequeStatus
    party_name: str
    days_pending: int


def pending_reminders(
    cheques: Iterable[Any], *, as_of: date, threshold_days: int = 0
) -> list[ChequeReminder]:
    """Return open cheques outstanding for at least ``threshold_days``, oldest first."""

    reminders: list[ChequeReminder] = []
    for cheque in cheques:
        status = _status_of(cheque)
        if status is None:
            continue
        if status not in OPEN_STATUSES:
            continue
        cheque_date = parse_date(getattr(cheque, "cheque_date", None))
        if cheque_date is None:
            continue
        days_pending = (as_of - cheque_date).days
        if days_pending < threshold_days:
            continue
        reminders.append(
            ChequeReminder(
                cheque_id=getattr(cheque, "id", None),
                cheque_number=str(getattr(cheque, "cheque_number", "") or ""),
                cheque_date=cheque_date,
                amount=parse_amount(getattr(cheque, "amount", None)) or Decimal("0"),
                status=status,
                party_name=str(getattr(cheque, "party_name", "") or ""),
                days_pending=days_pending,
            )
        )
    reminders.sort(key=lambda r: (r.cheque_date, r.cheque_id or 0))
    return reminders


__all__ = [
    "ChequeReminder",
    "ChequeStatus",
    "StatusBucket",
    "parse_status",
    "pending_reminders",
    "status_breakdown",
]
