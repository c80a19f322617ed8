"""Date-window and status filters applied before windowed aggregation."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Iterable, Optional

from ..exceptions import ValidationError
from .collector import MonetaryEvent, parse_date

_NO_STATUS = {"", "all", "any"}


@dataclass(frozen=True, slots=True)
class DateWindow:
    """Inclusive ``[start, end]`` window; either bound may be open."""

    start: Optional[date] = None
    end: Optional[date] = None

    @property
    def is_inverted(self) -> bool:
        return self.start is not None and self.end is not None and self.start > self.end

    def contains(self, day: date) -> bool:
        # An inverted range is a user-input condition: it matches nothing.
        if self.is_inverted:
            return False
        if self.start is not None and day < self.start:
            return False
        if self.end is not None and day > self.end:
            return False
        return True


def normalize_status(value: Optional[str]) -> Optional[str]:
    """Return the lower-cased status filter, or None when it means "all"."""

    if value is None:
        return None
    lowered = value.strip().lower()
    if lowered in _NO_STATUS:
        return None
    return lowered


@dataclass(frozen=True, slots=True)
class StatementFilters:
    """Window plus an optional grouping-status filter."""

    window: DateWindow = field(default_factory=DateWindow)
    status: Optional[str] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "status", normalize_status(self.status))

    def cache_key(self) -> tuple[Optional[str], Optional[str], str]:
        return (
            self.window.start.isoformat() if self.window.start else None,
            self.window.end.isoformat() if self.window.end else None,
            self.status or "all",
        )

    def matches_status(self, event: MonetaryEvent) -> bool:
        if self.status is None:
            return True
        return (event.status or "").strip().lower() == self.status


def apply_filters(
    events: Iterable[MonetaryEvent], filters: StatementFilters | None
) -> list[MonetaryEvent]:
    """Return the events passing the status filter and the date window, in input order."""

    if filters is None:
        return list(events)
    return [
        event
        for event in events
        if filters.matches_status(event) and filters.window.contains(event.date)
    ]


def _parse_bound(name: str, raw: Optional[str]) -> Optional[date]:
    if raw is None or not str(raw).strip():
        return None
    parsed = parse_date(raw)
    if parsed is None:
        raise ValidationError(f"'{name}' must be a YYYY-MM-DD date", rejected=[{name: raw}])
    return parsed


def parse_filters(
    from_value: Optional[str] = None,
    to_value: Optional[str] = None,
    status: Optional[str] = None,
) -> StatementFilters:
    """Build filters from request or CLI strings.

    Unparseable dates raise :class:`ValidationError`; an inverted range is
    accepted and simply matches nothing.
    """

    window = DateWindow(
        start=_parse_bound("from", from_value),
        end=_parse_bound("to", to_value),
    )
    return StatementFilters(window=window, status=status)


__all__ = [
    "DateWindow",
    "StatementFilters",
    "apply_filters",
    "normalize_status",
    "parse_filters",
]
