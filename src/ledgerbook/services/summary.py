"""Aggregate summaries per account holder."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Iterable, Optional, Sequence

from .collector import EventKind, MonetaryEvent
from .reconstructor import lifetime_balance
from .window import StatementFilters, apply_filters

_ZERO = Decimal("0")


class BalanceSemantics(str, Enum):
    """How the lifetime balance is presented."""

    OWED = "owed"  # amount owed by the holder, never shown below zero
    NET = "net"  # net position, may legitimately be negative


@dataclass(frozen=True, slots=True)
class AccountSummary:
    total_debits: Decimal
    total_credits: Decimal
    net_balance: Decimal
    outstanding_balance: Decimal
    windowed_credit_total: Decimal
    event_count_in_window: int
    last_credit_date: Optional[date]
    avg_event_amount: Decimal
    group_count: int = 0
    active_group_count: int = 0
    semantics: BalanceSemantics = BalanceSemantics.OWED

    @classmethod
    def zero(cls, semantics: BalanceSemantics = BalanceSemantics.OWED) -> "AccountSummary":
        return cls(
            total_debits=_ZERO,
            total_credits=_ZERO,
            net_balance=_ZERO,
            outstanding_balance=_ZERO,
            windowed_credit_total=_ZERO,
            event_count_in_window=0,
            last_credit_date=None,
            avg_event_amount=_ZERO,
            semantics=semantics,
        )


def build_summary(
    all_events: Sequence[MonetaryEvent],
    windowed_events: Sequence[MonetaryEvent],
    *,
    semantics: BalanceSemantics = BalanceSemantics.OWED,
    grouped_events: Sequence[MonetaryEvent] | None = None,
) -> AccountSummary:
    """Reduce the lifetime and windowed event sets into an :class:`AccountSummary`.

    Lifetime figures always come from ``all_events``; the window only feeds the
    windowed credit total, the in-window credit count, the average and the last
    credit date. Group counts (loans, bills) come from ``grouped_events``, which
    defaults to ``all_events`` and is normally the status-filtered set.
    """

    if not all_events and not windowed_events:
        return AccountSummary.zero(semantics)

    total_debits = sum((e.amount for e in all_events if e.kind is EventKind.DEBIT), _ZERO)
    total_credits = sum((e.amount for e in all_events if e.kind is EventKind.CREDIT), _ZERO)
    net = lifetime_balance(all_events)
    outstanding = max(_ZERO, net) if semantics is BalanceSemantics.OWED else net

    window_credits = [e for e in windowed_events if e.kind is EventKind.CREDIT]
    windowed_total = sum((e.amount for e in window_credits), _ZERO)
    count = len(window_credits)
    average = windowed_total / count if count > 0 else _ZERO
    last_credit = max((e.date for e in window_credits), default=None)

    groups: dict[str, Optional[str]] = {}
    for event in all_events if grouped_events is None else grouped_events:
        if event.group is not None:
            groups.setdefault(event.group, event.status)
    active = sum(1 for status in groups.values() if (status or "").lower() == "active")

    return AccountSummary(
        total_debits=total_debits,
        total_credits=total_credits,
        net_balance=net,
        outstanding_balance=outstanding,
        windowed_credit_total=windowed_total,
        event_count_in_window=count,
        last_credit_date=last_credit,
        avg_event_amount=average,
        group_count=len(groups),
        active_group_count=active,
        semantics=semantics,
    )


@dataclass(frozen=True, slots=True)
class HolderLedger:
    """All events of one account holder, unfiltered."""

    holder_id: int
    name: str
    events: tuple[MonetaryEvent, ...]
    phone: Optional[str] = None


@dataclass(frozen=True, slots=True)
class HolderSummary:
    holder_id: int
    name: str
    phone: Optional[str]
    summary: AccountSummary


def summarize_holders(
    holders: Iterable[HolderLedger],
    filters: StatementFilters | None = None,
    *,
    semantics: BalanceSemantics = BalanceSemantics.OWED,
) -> list[HolderSummary]:
    """Summarize each holder independently, highest outstanding balance first.

    Holders without any event passing the status filter are left out. Ties are
    broken by holder id so exports stay reproducible.
    """

    rows: list[HolderSummary] = []
    status_only = StatementFilters(status=filters.status) if filters else None
    for holder in holders:
        grouped = apply_filters(holder.events, status_only)
        if not grouped:
            continue
        windowed = apply_filters(holder.events, filters)
        rows.append(
            HolderSummary(
                holder_id=holder.holder_id,
                name=holder.name,
                phone=holder.phone,
                summary=build_summary(
                    holder.events, windowed, semantics=semantics, grouped_events=grouped
                ),
            )
        )
    rows.sort(key=lambda row: (-row.summary.outstanding_balance, row.holder_id))
    return rows


__all__ = [
    "AccountSummary",
    "BalanceSemantics",
    "HolderLedger",
    "HolderSummary",
    "build_summary",
    "summarize_holders",
]
