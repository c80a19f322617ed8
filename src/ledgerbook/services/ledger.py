"""Statement + summary for one account holder in a single call."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

from .collector import MonetaryEvent
from .reconstructor import StatementEntry, reconstruct_statement
from .summary import AccountSummary, BalanceSemantics, build_summary
from .window import StatementFilters, apply_filters


@dataclass(frozen=True, slots=True)
class StatementResult:
    statement: tuple[StatementEntry, ...]
    summary: AccountSummary
    skipped: int = 0


def reconstruct(
    events: Iterable[MonetaryEvent],
    filters: StatementFilters | None = None,
    *,
    semantics: BalanceSemantics = BalanceSemantics.OWED,
    skipped: int = 0,
) -> StatementResult:
    """Reconstruct the displayed statement and the holder summary.

    Statement rows are the filtered events folded from zero in date order.
    Lifetime totals and the outstanding balance are always computed over the
    full, unfiltered history so no window or status filter can change them.
    """

    all_events = list(events)
    if not all_events:
        return StatementResult(statement=(), summary=AccountSummary.zero(semantics), skipped=skipped)

    visible = apply_filters(all_events, filters)
    grouped = apply_filters(all_events, StatementFilters(status=filters.status) if filters else None)
    summary = build_summary(all_events, visible, semantics=semantics, grouped_events=grouped)
    return StatementResult(
        statement=tuple(reconstruct_statement(visible)),
        summary=summary,
        skipped=skipped,
    )


__all__ = ["StatementResult", "reconstruct"]
