"""Normalize heterogeneous source records into monetary events.

Loans, bills, payments, partner and firm-account rows all arrive in their own
shapes. A :class:`SourceMapping` describes how one record type maps onto
:class:`MonetaryEvent`; :func:`collect_events` applies a batch of mappings and
reports every record it had to reject instead of dropping it silently.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any, Callable, Iterable, Mapping, Union

from ..exceptions import ValidationError
from ..logging_config import get_logger

logger = get_logger(__name__)

FieldSpec = Union[str, Callable[[Any], Any], None]


class EventKind(str, Enum):
    """Effect of an event on the holder's balance."""

    DEBIT = "DEBIT"  # increases the amount owed
    CREDIT = "CREDIT"  # decreases the amount owed


@dataclass(frozen=True, slots=True)
class MonetaryEvent:
    """A dated, non-negative movement of money for one account holder."""

    date: date
    kind: EventKind
    amount: Decimal
    reference: str = ""
    description: str = ""
    group: str | None = None
    status: str | None = None

    def __post_init__(self) -> None:
        if not isinstance(self.kind, EventKind):
            raise ValueError(f"kind must be an EventKind, got {self.kind!r}")
        if isinstance(self.date, datetime):
            object.__setattr__(self, "date", self.date.date())
        if not isinstance(self.amount, Decimal):
            object.__setattr__(self, "amount", Decimal(str(self.amount)))
        if not self.amount.is_finite():
            raise ValueError(f"amount must be a finite number, got {self.amount!r}")
        if self.amount < 0:
            raise ValueError("amount must be non-negative; direction belongs in kind")


@dataclass(frozen=True, slots=True)
class SourceMapping:
    """Maps one source record type onto :class:`MonetaryEvent`.

    Every field is either an attribute/key name or a callable receiving the
    record. ``kind`` is fixed per mapping unless ``kind_field`` resolves to a
    per-record value.
    """

    kind: EventKind | None
    date_field: FieldSpec
    amount_field: FieldSpec
    reference_field: FieldSpec = "id"
    description_field: FieldSpec = None
    group_field: FieldSpec = None
    status_field: FieldSpec = None
    kind_field: FieldSpec = None


@dataclass(frozen=True, slots=True)
class RejectedRecord:
    record: Any
    reason: str


@dataclass(slots=True)
class CollectionResult:
    events: list[MonetaryEvent] = field(default_factory=list)
    rejected: list[RejectedRecord] = field(default_factory=list)

    @property
    def skipped(self) -> int:
        return len(self.rejected)


def _read(record: Any, accessor: FieldSpec) -> Any:
    if accessor is None:
        return None
    if callable(accessor):
        return accessor(record)
    if isinstance(record, Mapping):
        return record.get(accessor)
    return getattr(record, accessor, None)


def parse_date(value: Any) -> date | None:
    """Return the calendar day for a date, datetime or ISO string; None otherwise."""

    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str) and value.strip():
        text = value.strip()
        try:
            return date.fromisoformat(text[:10])
        except ValueError:
            return None
    return None


def parse_amount(value: Any) -> Decimal | None:
    """Return an exact Decimal for numeric input; None when missing or unparseable."""

    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, Decimal):
        amount = value
    else:
        text = str(value).strip().replace(",", "")
        if not text:
            return None
        try:
            amount = Decimal(text)
        except InvalidOperation:
            return None
    if not amount.is_finite():
        return None
    return amount


def _parse_kind(value: Any) -> EventKind | None:
    if isinstance(value, EventKind):
        return value
    if isinstance(value, str):
        try:
            return EventKind(value.strip().upper())
        except ValueError:
            return None
    return None


def _text(value: Any) -> str:
    return "" if value is None else str(value)


def _build_event(record: Any, mapping: SourceMapping) -> MonetaryEvent | str:
    """Return the event for ``record`` or the reason it was rejected."""

    day = parse_date(_read(record, mapping.date_field))
    if day is None:
        return "missing or invalid date"
    amount = parse_amount(_read(record, mapping.amount_field))
    if amount is None:
        return "missing or invalid amount"
    if amount < 0:
        return "negative amount"
    kind = mapping.kind
    if mapping.kind_field is not None:
        kind = _parse_kind(_read(record, mapping.kind_field))
    if kind is None:
        return "missing or invalid kind"

    group = _read(record, mapping.group_field)
    status = _read(record, mapping.status_field)
    return MonetaryEvent(
        date=day,
        kind=kind,
        amount=amount,
        reference=_text(_read(record, mapping.reference_field)),
        description=_text(_read(record, mapping.description_field)),
        group=None if group is None else str(group),
        status=None if status is None else str(status),
    )


def collect_events(
    sources: Iterable[tuple[Iterable[Any], SourceMapping]], *, strict: bool = False
) -> CollectionResult:
    """Normalize every record of every source into events.

    With ``strict`` the whole batch fails with :class:`ValidationError` once all
    records have been inspected; otherwise rejected records are returned next to
    the events.
    """

    result = CollectionResult()
    for records, mapping in sources:
        for record in records:
            outcome = _build_event(record, mapping)
            if isinstance(outcome, MonetaryEvent):
                result.events.append(outcome)
            else:
                result.rejected.append(RejectedRecord(record=record, reason=outcome))

    if result.rejected:
        if strict:
            raise ValidationError(
                f"{result.skipped} source record(s) rejected", rejected=result.rejected
            )
        logger.warning(
            "Skipped malformed source records",
            extra={
                "skipped": result.skipped,
                "reasons": sorted({r.reason for r in result.rejected}),
            },
        )
    return result


def transfer_events(
    amount: Any,
    on: date,
    *,
    reference: str = "",
    description_out: str = "",
    description_in: str = "",
) -> tuple[MonetaryEvent, MonetaryEvent]:
    """Model a transfer as two explicit events: CREDIT on the source, DEBIT on the destination."""

    value = parse_amount(amount)
    if value is None or value <= 0:
        raise ValidationError("transfer amount must be a positive number", rejected=[amount])
    source = MonetaryEvent(
        date=on,
        kind=EventKind.CREDIT,
        amount=value,
        reference=reference,
        description=description_out,
    )
    destination = MonetaryEvent(
        date=on,
        kind=EventKind.DEBIT,
        amount=value,
        reference=reference,
        description=description_in,
    )
    return source, destination


__all__ = [
    "CollectionResult",
    "EventKind",
    "MonetaryEvent",
    "RejectedRecord",
    "SourceMapping",
    "collect_events",
    "parse_amount",
    "parse_date",
    "transfer_events",
]
