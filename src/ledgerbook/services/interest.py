"""Interest accrual and interest-first payment allocation.

Every calculation takes the reference date explicitly; nothing here reads the
wall clock.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Any, Iterable, Optional

from ..exceptions import ValidationError
from .collector import parse_amount

_ZERO = Decimal("0")
_HUNDRED = Decimal("100")
_DAYS_PER_YEAR = Decimal("365")
_DAYS_PER_MONTH = Decimal("30")
_SETTLED = Decimal("0.01")


class InterestType(str, Enum):
    NONE = "none"
    DAILY = "daily"  # loans: per-annum rate pro-rated by day
    MONTHLY = "monthly"  # loans: per-month rate with fractional months
    SIMPLE = "simple"  # bills: per-annum rate, whole days elapsed
    FLAT = "flat"  # bills: one-off percentage

    @classmethod
    def parse(cls, value: Any) -> "InterestType":
        if isinstance(value, cls):
            return value
        if value is None:
            return cls.NONE
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            return cls.NONE


def _decimal(value: Any) -> Decimal:
    parsed = parse_amount(value)
    return parsed if parsed is not None else _ZERO


def accrued_interest(
    principal: Any,
    rate: Any,
    interest_type: InterestType | str | None,
    *,
    start: date,
    as_of: date,
) -> Decimal:
    """Return simple interest on ``principal`` between ``start`` and ``as_of``.

    ``rate`` is a percentage. Unknown types, a missing rate and a non-positive
    principal all accrue nothing; time-based types accrue nothing before
    ``start``.
    """

    kind = InterestType.parse(interest_type)
    amount = _decimal(principal)
    pct = _decimal(rate)
    if kind is InterestType.NONE or pct <= 0 or amount <= 0:
        return _ZERO

    if kind is InterestType.FLAT:
        return amount * pct / _HUNDRED

    days = (as_of - start).days
    if days <= 0:
        return _ZERO

    if kind is InterestType.DAILY:
        return amount * (pct / _HUNDRED) * Decimal(days) / _DAYS_PER_YEAR
    if kind is InterestType.SIMPLE:
        return amount * pct * Decimal(days) / (_HUNDRED * _DAYS_PER_YEAR)

    # MONTHLY: whole calendar months plus the day-of-month difference over 30.
    months = (as_of.year - start.year) * 12 + (as_of.month - start.month)
    fraction = Decimal(as_of.day - start.day) / _DAYS_PER_MONTH
    return amount * (pct / _HUNDRED) * (Decimal(months) + fraction)


@dataclass(frozen=True, slots=True)
class LoanPosition:
    """Principal balance and accrued interest for one loan."""

    loan_id: int
    reference: str
    principal: Decimal
    paid: Decimal
    balance: Decimal
    interest: Decimal

    @property
    def total_due(self) -> Decimal:
        return self.balance + self.interest


def loan_position(
    *,
    loan_id: int,
    reference: str,
    principal: Any,
    payments: Iterable[Any],
    rate: Any,
    interest_type: InterestType | str | None,
    start: date,
    as_of: date,
) -> LoanPosition:
    """Return the outstanding balance of a loan with interest accrued on that balance."""

    amount = _decimal(principal)
    paid = sum((_decimal(p) for p in payments), _ZERO)
    balance = amount - paid
    interest = accrued_interest(balance, rate, interest_type, start=start, as_of=as_of)
    return LoanPosition(
        loan_id=loan_id,
        reference=reference,
        principal=amount,
        paid=paid,
        balance=balance,
        interest=interest,
    )


@dataclass(frozen=True, slots=True)
class OpenBill:
    """An unpaid (or partly paid) vendor bill."""

    bill_id: int
    bill_date: date
    amount: Decimal
    principal_paid: Decimal = _ZERO
    interest_paid: Decimal = _ZERO
    rate: Decimal = _ZERO
    interest_type: InterestType = InterestType.NONE
    due_date: Optional[date] = None

    @property
    def outstanding_principal(self) -> Decimal:
        return self.amount - self.principal_paid


@dataclass(frozen=True, slots=True)
class AllocationLine:
    bill_id: int
    interest: Decimal
    principal: Decimal
    closes: bool


@dataclass(slots=True)
class PaymentAllocation:
    lines: list[AllocationLine] = field(default_factory=list)
    unallocated: Decimal = _ZERO

    @property
    def allocated(self) -> Decimal:
        return sum((line.interest + line.principal for line in self.lines), _ZERO)


def outstanding_interest(bill: OpenBill, *, since: date, as_of: date) -> Decimal:
    accrued = accrued_interest(
        bill.outstanding_principal, bill.rate, bill.interest_type, start=since, as_of=as_of
    )
    return max(_ZERO, accrued - bill.interest_paid)


def allocate_payment(amount: Any, bills: Iterable[OpenBill], *, as_of: date) -> PaymentAllocation:
    """Spread a payment across bills, oldest first, interest before principal."""

    remaining = parse_amount(amount)
    if remaining is None or remaining <= 0:
        raise ValidationError("payment amount must be a positive number", rejected=[amount])

    allocation = PaymentAllocation()
    for bill in sorted(bills, key=lambda b: b.bill_date):
        if remaining <= 0:
            break
        principal_due = bill.outstanding_principal
        if principal_due <= 0:
            continue

        interest_due = outstanding_interest(bill, since=bill.bill_date, as_of=as_of)
        interest_part = min(interest_due, remaining)
        remaining -= interest_part

        principal_part = min(principal_due, remaining) if remaining > 0 else _ZERO
        remaining -= principal_part

        if interest_part > 0 or principal_part > 0:
            allocation.lines.append(
                AllocationLine(
                    bill_id=bill.bill_id,
                    interest=interest_part,
                    principal=principal_part,
                    closes=principal_part > 0 and principal_due - principal_part <= _SETTLED,
                )
            )

    allocation.unallocated = remaining
    return allocation


def amount_due(bill: OpenBill, *, as_of: date) -> Decimal:
    """Outstanding principal plus unpaid interest accrued since the due date."""

    since = bill.due_date or bill.bill_date
    return bill.outstanding_principal + outstanding_interest(bill, since=since, as_of=as_of)


__all__ = [
    "AllocationLine",
    "InterestType",
    "LoanPosition",
    "OpenBill",
    "PaymentAllocation",
    "accrued_interest",
    "allocate_payment",
    "amount_due",
    "loan_position",
]
