"""Chronological statement reconstruction with a running balance."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable

from ..exceptions import LedgerContractError
from .collector import EventKind, MonetaryEvent

_ZERO = Decimal("0")
_CENT = Decimal("0.01")


@dataclass(frozen=True, slots=True)
class StatementEntry:
    """One statement row: the event plus the balance after applying it."""

    date: date
    kind: EventKind
    amount: Decimal
    reference: str
    description: str
    running_balance: Decimal
    group: str | None = None
    status: str | None = None

    @property
    def debit(self) -> Decimal:
        return self.amount if self.kind is EventKind.DEBIT else _ZERO

    @property
    def credit(self) -> Decimal:
        return self.amount if self.kind is EventKind.CREDIT else _ZERO


def signed_effect(event: MonetaryEvent | StatementEntry) -> Decimal:
    """Return +amount for debits and -amount for credits."""

    return event.amount if event.kind is EventKind.DEBIT else -event.amount


def _chronological(events: Iterable[MonetaryEvent]) -> list[MonetaryEvent]:
    items = list(events)
    for event in items:
        if event.date is None:
            raise LedgerContractError(
                f"event {event.reference!r} reached the reconstructor without a date"
            )
    # sorted() is stable: same-day events keep their input order.
    return sorted(items, key=lambda e: e.date)


def reconstruct_statement(events: Iterable[MonetaryEvent]) -> list[StatementEntry]:
    """Sort events by date and fold them into running-balance statement rows."""

    balance = _ZERO
    statement: list[StatementEntry] = []
    for event in _chronological(events):
        balance += signed_effect(event)
        statement.append(
            StatementEntry(
                date=event.date,
                kind=event.kind,
                amount=event.amount,
                reference=event.reference,
                description=event.description,
                running_balance=balance,
                group=event.group,
                status=event.status,
            )
        )
    return statement


def lifetime_balance(events: Iterable[MonetaryEvent]) -> Decimal:
    """Return the final folded balance over every event (0 for no events)."""

    total = _ZERO
    for event in events:
        if event.date is None:
            raise LedgerContractError(
                f"event {event.reference!r} reached the reconstructor without a date"
            )
        total += signed_effect(event)
    return total


def quantize(amount: Decimal) -> Decimal:
    """Round to cents for presentation only."""

    value = Decimal(amount).quantize(_CENT, rounding=ROUND_HALF_UP)
    return value if value != 0 else _ZERO.quantize(_CENT)


def format_amount(amount: Decimal | None) -> str:
    """Return the two-decimal presentation string used by every export."""

    if amount is None:
        return ""
    return f"{quantize(amount):.2f}"


__all__ = [
    "StatementEntry",
    "format_amount",
    "lifetime_balance",
    "quantize",
    "reconstruct_statement",
    "signed_effect",
]
