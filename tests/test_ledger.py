"""Tests for the combined statement + summary reconstruction."""

from __future__ import annotations

import random
from datetime import date, timedelta
from decimal import Decimal

import pytest

from ledgerbook.services.ledger import reconstruct
from ledgerbook.services.reconstructor import lifetime_balance, signed_effect
from ledgerbook.services.summary import BalanceSemantics
from ledgerbook.services.window import DateWindow, StatementFilters
from tests.conftest import ev


def _random_events(seed: int, count: int = 40):
    rng = random.Random(seed)
    start = date(2024, 1, 1)
    return [
        ev(
            start + timedelta(days=rng.randint(0, 60)),
            rng.choice(["debit", "credit"]),
            Decimal(rng.randint(1, 100000)) / 100,
            reference=f"r{i}",
        )
        for i in range(count)
    ]


def test_example_scenario():
    events = [
        ev(date(2024, 1, 5), "debit", 1000),
        ev(date(2024, 1, 10), "credit", 300),
        ev(date(2024, 1, 10), "credit", 200),
    ]

    result = reconstruct(events)

    assert [row.running_balance for row in result.statement] == [
        Decimal("1000"),
        Decimal("700"),
        Decimal("500"),
    ]
    assert result.summary.outstanding_balance == Decimal("500")
    assert result.skipped == 0


@pytest.mark.parametrize("seed", range(5))
def test_statement_is_chronological_and_stable(seed):
    events = _random_events(seed)

    statement = reconstruct(events).statement

    order = {e.reference: i for i, e in enumerate(events)}
    for previous, current in zip(statement, statement[1:]):
        assert previous.date <= current.date
        if previous.date == current.date:
            assert order[previous.reference] < order[current.reference]


@pytest.mark.parametrize("seed", range(5))
def test_fold_holds_for_windowed_statement(seed):
    events = _random_events(seed)
    filters = StatementFilters(window=DateWindow(date(2024, 1, 20), date(2024, 2, 10)))

    statement = reconstruct(events, filters).statement

    balance = Decimal("0")
    for row in statement:
        balance += signed_effect(row)
        assert row.running_balance == balance
    assert all(date(2024, 1, 20) <= row.date <= date(2024, 2, 10) for row in statement)


@pytest.mark.parametrize(
    "window",
    [
        DateWindow(),
        DateWindow(date(2024, 1, 10), date(2024, 1, 20)),
        DateWindow(start=date(2024, 2, 15)),
        DateWindow(date(2024, 2, 1), date(2024, 1, 1)),
    ],
)
def test_window_never_changes_lifetime_balance(window):
    events = _random_events(11)
    expected = lifetime_balance(events)

    summary = reconstruct(events, StatementFilters(window=window), semantics=BalanceSemantics.NET).summary

    assert summary.net_balance == expected
    assert summary.outstanding_balance == expected


def test_empty_input_returns_zero_summary():
    result = reconstruct([], StatementFilters())

    assert result.statement == ()
    assert result.summary.outstanding_balance == Decimal("0")
    assert result.summary.total_debits == Decimal("0")
    assert result.summary.event_count_in_window == 0
    assert result.summary.avg_event_amount == Decimal("0")


def test_owed_clamps_and_net_does_not():
    events = [ev(date(2024, 1, 1), "debit", 100), ev(date(2024, 1, 2), "credit", 250)]

    owed = reconstruct(events, semantics=BalanceSemantics.OWED).summary
    net = reconstruct(events, semantics=BalanceSemantics.NET).summary

    assert owed.outstanding_balance == Decimal("0")
    assert net.outstanding_balance == Decimal("-150")


def test_inverted_window_scenario():
    events = [
        ev(date(2024, 1, 5), "debit", 1000),
        ev(date(2024, 1, 10), "credit", 300),
    ]
    filters = StatementFilters(window=DateWindow(date(2024, 2, 1), date(2024, 1, 1)))

    result = reconstruct(events, filters)

    assert result.statement == ()
    assert result.summary.event_count_in_window == 0
    assert result.summary.avg_event_amount == Decimal("0")
    assert result.summary.outstanding_balance == Decimal("700")


def test_status_filter_limits_rows_but_not_outstanding():
    events = [
        ev(date(2024, 1, 1), "debit", 100, group="1", status="active"),
        ev(date(2024, 1, 2), "debit", 50, group="2", status="closed"),
        ev(date(2024, 1, 3), "credit", 50, group="2", status="closed"),
    ]

    result = reconstruct(events, StatementFilters(status="closed"))

    assert [row.running_balance for row in result.statement] == [Decimal("50"), Decimal("0")]
    assert result.summary.outstanding_balance == Decimal("100")
    assert result.summary.group_count == 1


def test_skip_count_is_carried_through():
    assert reconstruct([ev(date(2024, 1, 1), "debit", 1)], skipped=3).skipped == 3
    assert reconstruct([], skipped=2).skipped == 2
