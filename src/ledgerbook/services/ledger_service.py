"""Statements, summaries and payments backed by the SQLModel repositories.

Each method loads the complete, unfiltered record set for one account holder,
normalizes it through the collector and hands the events to the pure core.
Malformed rows are skipped and counted rather than failing the view.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Any, Callable, Iterable, Optional
from uuid import uuid4

from ..domain.repositories import (
    BillCustomerRepository,
    CustomerRepository,
    FirmAccountRepository,
    MahajanRepository,
    PartnerRepository,
)
from ..exceptions import HolderNotFound, ValidationError
from ..infra.database import SessionFactory
from ..infra.repositories import (
    SQLModelBillCustomerRepository,
    SQLModelCustomerRepository,
    SQLModelFirmAccountRepository,
    SQLModelMahajanRepository,
    SQLModelPartnerRepository,
)
from ..logging_config import get_logger
from ..models.bill_customer import SALE_PAYMENT, SALE_REFUND, Sale, SaleTransaction
from ..models.customer import Loan
from ..models.firm import OUTFLOW_TYPES
from ..models.mahajan import Bill, BillTransaction
from ..models.partner import INVESTMENT, WITHDRAWAL, PartnerTransaction
from .cache import SummaryCache
from .collector import EventKind, SourceMapping, collect_events, parse_amount, transfer_events
from .interest import (
    InterestType,
    LoanPosition,
    OpenBill,
    PaymentAllocation,
    allocate_payment,
    amount_due,
    loan_position,
)
from .ledger import StatementResult, reconstruct
from .reconstructor import quantize
from .summary import BalanceSemantics, HolderLedger, HolderSummary, summarize_holders
from .window import StatementFilters

logger = get_logger(__name__)

_ZERO = Decimal("0")


def summary_cache_key(holder_kind: str, filters: StatementFilters) -> tuple:
    """Summary cache key: the holder kind followed by the filter key."""

    return (holder_kind, *filters.cache_key())


def _loan_status(loan: Loan) -> str:
    return "active" if loan.is_active else "closed"


def _bill_status(bill: Bill) -> str:
    return "active" if bill.is_active else "closed"


def _loan_sources(loans: list[Loan], transactions: Iterable[Any]) -> list[tuple[Iterable[Any], SourceMapping]]:
    by_id = {loan.id: loan for loan in loans}
    payments = [t for t in transactions if t.loan_id in by_id]

    disbursement = SourceMapping(
        kind=EventKind.DEBIT,
        date_field="loan_date",
        amount_field="principal_amount",
        reference_field="loan_number",
        description_field=lambda loan: f"Loan - {loan.description or loan.loan_number}",
        group_field="id",
        status_field=_loan_status,
    )
    repayment = SourceMapping(
        kind=EventKind.CREDIT,
        date_field="payment_date",
        amount_field="amount",
        reference_field="id",
        description_field=lambda t: (
            f"Payment Received - {by_id[t.loan_id].description or 'Loan'} "
            f"({by_id[t.loan_id].loan_number}) - {t.transaction_type} via {t.payment_mode}"
        ),
        group_field="loan_id",
        status_field=lambda t: _loan_status(by_id[t.loan_id]),
    )
    return [(loans, disbursement), (payments, repayment)]


def _bill_sources(bills: list[Bill], transactions: Iterable[BillTransaction]) -> list[tuple[Iterable[Any], SourceMapping]]:
    by_id = {bill.id: bill for bill in bills}
    payments = [t for t in transactions if t.bill_id in by_id]

    issued = SourceMapping(
        kind=EventKind.DEBIT,
        date_field="bill_date",
        amount_field="bill_amount",
        reference_field="bill_number",
        description_field=lambda bill: f"Bill - {bill.description or bill.bill_number}",
        group_field="id",
        status_field=_bill_status,
    )

    def _describe(t: BillTransaction) -> str:
        bill = by_id[t.bill_id]
        text = (
            f"Paid - {bill.description or 'Bill'} ({bill.bill_number}) - "
            f"{t.transaction_type} via {t.payment_mode}"
        )
        return f"{text} - {t.notes}" if t.notes else text

    paid = SourceMapping(
        kind=EventKind.CREDIT,
        date_field="payment_date",
        amount_field="amount",
        reference_field="id",
        description_field=_describe,
        group_field="bill_id",
        status_field=lambda t: _bill_status(by_id[t.bill_id]),
    )
    return [(bills, issued), (payments, paid)]


def _sale_status(sale: Sale) -> str:
    return "active" if sale.is_active else "closed"


def _sale_sources(sales: list[Sale], transactions: Iterable[SaleTransaction]) -> list[tuple[Iterable[Any], SourceMapping]]:
    by_id = {sale.id: sale for sale in sales}
    settlements = [t for t in transactions if t.sale_id in by_id]

    sold = SourceMapping(
        kind=EventKind.DEBIT,
        date_field="sale_date",
        amount_field="sale_amount",
        reference_field="sale_number",
        description_field=lambda sale: (
            f"Sale #{sale.sale_number} - {sale.description}"
            if sale.description
            else f"Sale #{sale.sale_number}"
        ),
        group_field="id",
        status_field=_sale_status,
    )

    def _describe(t: SaleTransaction) -> str:
        label = "Refund" if t.transaction_type == SALE_REFUND else "Payment Received"
        lines = [line.strip() for line in (t.notes or "").splitlines() if line.strip()]
        return " - ".join([label, *lines])

    # Refunds are DEBITs: they raise the balance like a sale.
    settled = SourceMapping(
        kind=None,
        kind_field=lambda t: {
            SALE_PAYMENT: EventKind.CREDIT,
            SALE_REFUND: EventKind.DEBIT,
        }.get((t.transaction_type or "").lower()),
        date_field="payment_date",
        amount_field="amount",
        reference_field=lambda t: by_id[t.sale_id].sale_number,
        description_field=_describe,
        group_field="sale_id",
        status_field=lambda t: _sale_status(by_id[t.sale_id]),
    )
    return [(sales, sold), (settlements, settled)]


_PARTNER_MAPPING = SourceMapping(
    kind=None,
    kind_field=lambda t: {
        INVESTMENT: EventKind.DEBIT,
        WITHDRAWAL: EventKind.CREDIT,
    }.get((t.direction or "").lower()),
    date_field="payment_date",
    amount_field="amount",
    reference_field=lambda t: t.transfer_ref or t.id,
    description_field=lambda t: t.notes or f"{t.direction.title()} via {t.payment_mode}",
)

_FIRM_MAPPING = SourceMapping(
    kind=None,
    kind_field=lambda t: (
        EventKind.CREDIT if (t.transaction_type or "").lower() in OUTFLOW_TYPES else EventKind.DEBIT
    ),
    date_field="transaction_date",
    amount_field="amount",
    reference_field="id",
    description_field=lambda t: t.description or t.transaction_type.replace("_", " ").title(),
)


@dataclass(frozen=True, slots=True)
class SummaryReport:
    rows: tuple[HolderSummary, ...]
    skipped: int = 0

    @property
    def total_outstanding(self) -> Decimal:
        return sum((row.summary.outstanding_balance for row in self.rows), _ZERO)

    @property
    def total_received(self) -> Decimal:
        return sum((row.summary.windowed_credit_total for row in self.rows), _ZERO)


@dataclass(frozen=True, slots=True)
class BillReminder:
    bill_id: int
    bill_number: str
    mahajan_id: int
    mahajan_name: str
    bill_amount: Decimal
    bill_date: date
    due_date: Optional[date]
    outstanding_balance: Decimal
    amount_due: Decimal


class StatementService:
    """Account-holder ledgers for one user."""

    def __init__(
        self,
        session_factory: SessionFactory,
        *,
        user_id: int,
        cache_capacity: int = 10,
        cache: SummaryCache[SummaryReport] | None = None,
        customers: CustomerRepository | None = None,
        mahajans: MahajanRepository | None = None,
        bill_customers: BillCustomerRepository | None = None,
        partners: PartnerRepository | None = None,
        firm_accounts: FirmAccountRepository | None = None,
    ):
        self.user_id = user_id
        if cache is None:
            cache = SummaryCache(cache_capacity)
        self.cache: SummaryCache[SummaryReport] = cache
        self.customers = customers or SQLModelCustomerRepository(session_factory)
        self.mahajans = mahajans or SQLModelMahajanRepository(session_factory)
        self.bill_customers = bill_customers or SQLModelBillCustomerRepository(session_factory)
        self.partners = partners or SQLModelPartnerRepository(session_factory)
        self.firm_accounts = firm_accounts or SQLModelFirmAccountRepository(session_factory)

    # Customers ------------------------------------------------------------

    def customer_statement(
        self, customer_id: int, filters: StatementFilters | None = None
    ) -> StatementResult:
        if self.customers.get_by_id(customer_id, user_id=self.user_id) is None:
            raise HolderNotFound("customer", customer_id)
        loans = self.customers.list_loans(user_id=self.user_id, customer_id=customer_id)
        payments = self.customers.list_loan_transactions(
            [loan.id for loan in loans], user_id=self.user_id
        )
        collected = collect_events(_loan_sources(loans, payments))
        return reconstruct(
            collected.events,
            filters,
            semantics=BalanceSemantics.OWED,
            skipped=collected.skipped,
        )

    def _cached_summaries(
        self,
        holder_kind: str,
        filters: StatementFilters | None,
        refresh: bool,
        load: Callable[[], tuple[list[HolderLedger], int]],
    ) -> SummaryReport:
        filters = filters or StatementFilters()
        if refresh:
            self.cache.clear()
        key = summary_cache_key(holder_kind, filters)
        cached = self.cache.get(key)
        if cached is not None:
            return cached

        ledgers, skipped = load()
        report = SummaryReport(
            rows=tuple(summarize_holders(ledgers, filters, semantics=BalanceSemantics.OWED)),
            skipped=skipped,
        )
        logger.info(
            "Holder summary computed",
            extra={
                "holder_kind": holder_kind,
                "holders": len(report.rows),
                "skipped": skipped,
                "cache_key": key,
            },
        )
        return self.cache.put(key, report)

    def customer_summaries(
        self, filters: StatementFilters | None = None, *, refresh: bool = False
    ) -> SummaryReport:
        """Per-customer summaries sorted by outstanding balance, cached by filter."""

        return self._cached_summaries("customers", filters, refresh, self._customer_ledgers)

    def _customer_ledgers(self) -> tuple[list[HolderLedger], int]:
        customers = self.customers.list_all(user_id=self.user_id)
        loans = self.customers.list_loans(user_id=self.user_id)
        payments = self.customers.list_loan_transactions(
            [loan.id for loan in loans], user_id=self.user_id
        )
        loans_by_customer: dict[int, list[Loan]] = {}
        for loan in loans:
            loans_by_customer.setdefault(loan.customer_id, []).append(loan)

        ledgers: list[HolderLedger] = []
        skipped = 0
        for customer in customers:
            customer_loans = loans_by_customer.get(customer.id, [])
            if not customer_loans:
                continue
            collected = collect_events(_loan_sources(customer_loans, payments))
            skipped += collected.skipped
            ledgers.append(
                HolderLedger(
                    holder_id=customer.id,
                    name=customer.name,
                    phone=customer.phone,
                    events=tuple(collected.events),
                )
            )
        return ledgers, skipped

    def customer_outstanding(self, customer_id: int, *, as_of: date) -> list[LoanPosition]:
        """Principal balance plus accrued interest for each of the customer's loans."""

        if self.customers.get_by_id(customer_id, user_id=self.user_id) is None:
            raise HolderNotFound("customer", customer_id)
        loans = self.customers.list_loans(user_id=self.user_id, customer_id=customer_id)
        payments = self.customers.list_loan_transactions(
            [loan.id for loan in loans], user_id=self.user_id
        )
        paid_by_loan: dict[int, list[Any]] = {}
        for payment in payments:
            paid_by_loan.setdefault(payment.loan_id, []).append(payment.amount)
        return [
            loan_position(
                loan_id=loan.id,
                reference=loan.loan_number,
                principal=loan.principal_amount,
                payments=paid_by_loan.get(loan.id, []),
                rate=loan.interest_rate,
                interest_type=loan.interest_type,
                start=loan.loan_date,
                as_of=as_of,
            )
            for loan in loans
        ]

    # Mahajans -------------------------------------------------------------

    def mahajan_statement(
        self, mahajan_id: int, filters: StatementFilters | None = None
    ) -> StatementResult:
        if self.mahajans.get_by_id(mahajan_id, user_id=self.user_id) is None:
            raise HolderNotFound("mahajan", mahajan_id)
        bills = self.mahajans.list_bills(mahajan_id, user_id=self.user_id)
        payments = self.mahajans.list_bill_transactions(
            [bill.id for bill in bills], user_id=self.user_id
        )
        collected = collect_events(_bill_sources(bills, payments))
        return reconstruct(
            collected.events,
            filters,
            semantics=BalanceSemantics.OWED,
            skipped=collected.skipped,
        )

    def mahajan_summaries(
        self, filters: StatementFilters | None = None, *, refresh: bool = False
    ) -> SummaryReport:
        """Per-mahajan summaries of what is still owed on bills, cached by filter."""

        return self._cached_summaries("mahajans", filters, refresh, self._mahajan_ledgers)

    def _mahajan_ledgers(self) -> tuple[list[HolderLedger], int]:
        ledgers: list[HolderLedger] = []
        skipped = 0
        for mahajan in self.mahajans.list_all(user_id=self.user_id):
            bills = self.mahajans.list_bills(mahajan.id, user_id=self.user_id)
            if not bills:
                continue
            payments = self.mahajans.list_bill_transactions(
                [bill.id for bill in bills], user_id=self.user_id
            )
            collected = collect_events(_bill_sources(bills, payments))
            skipped += collected.skipped
            ledgers.append(
                HolderLedger(
                    holder_id=mahajan.id,
                    name=mahajan.name,
                    phone=mahajan.phone,
                    events=tuple(collected.events),
                )
            )
        return ledgers, skipped

    def _open_bills(self, bills: list[Bill]) -> list[OpenBill]:
        payments = self.mahajans.list_bill_transactions(
            [bill.id for bill in bills], user_id=self.user_id
        )
        principal_paid: dict[int, Decimal] = {}
        interest_paid: dict[int, Decimal] = {}
        for payment in payments:
            amount = parse_amount(payment.amount) or _ZERO
            if payment.transaction_type == "interest":
                interest_paid[payment.bill_id] = interest_paid.get(payment.bill_id, _ZERO) + amount
            elif payment.transaction_type in ("payment", "principal"):
                principal_paid[payment.bill_id] = principal_paid.get(payment.bill_id, _ZERO) + amount
        return [
            OpenBill(
                bill_id=bill.id,
                bill_date=bill.bill_date,
                due_date=bill.due_date,
                amount=parse_amount(bill.bill_amount) or _ZERO,
                principal_paid=principal_paid.get(bill.id, _ZERO),
                interest_paid=interest_paid.get(bill.id, _ZERO),
                rate=parse_amount(bill.interest_rate) or _ZERO,
                interest_type=InterestType.parse(bill.interest_type),
            )
            for bill in bills
        ]

    def record_mahajan_payment(
        self,
        mahajan_id: int,
        amount: Any,
        *,
        payment_date: date,
        payment_mode: str = "cash",
        notes: str | None = None,
    ) -> PaymentAllocation:
        """Pay a mahajan's active bills oldest first, interest before principal."""

        mahajan = self.mahajans.get_by_id(mahajan_id, user_id=self.user_id)
        if mahajan is None:
            raise HolderNotFound("mahajan", mahajan_id)
        bills = self.mahajans.list_bills(mahajan_id, user_id=self.user_id, active_only=True)
        allocation = allocate_payment(amount, self._open_bills(bills), as_of=payment_date)

        rows: list[BillTransaction] = []
        for line in allocation.lines:
            if line.interest > 0:
                rows.append(
                    BillTransaction(
                        bill_id=line.bill_id,
                        amount=float(quantize(line.interest)),
                        transaction_type="interest",
                        payment_date=payment_date,
                        payment_mode=payment_mode,
                        notes=notes or f"Interest payment for {mahajan.name}",
                    )
                )
            if line.principal > 0:
                rows.append(
                    BillTransaction(
                        bill_id=line.bill_id,
                        amount=float(quantize(line.principal)),
                        transaction_type="principal",
                        payment_date=payment_date,
                        payment_mode=payment_mode,
                        notes=notes or f"Principal payment for {mahajan.name}",
                    )
                )
        self.mahajans.record_payments(
            rows,
            close_bill_ids=[line.bill_id for line in allocation.lines if line.closes],
            user_id=self.user_id,
        )
        self.cache.clear()
        logger.info(
            "Mahajan payment recorded",
            extra={
                "mahajan_id": mahajan_id,
                "allocated": str(allocation.allocated),
                "unallocated": str(allocation.unallocated),
                "bills": len(allocation.lines),
            },
        )
        return allocation

    def bill_reminders(self, *, as_of: date) -> list[BillReminder]:
        """Active bills due by ``as_of`` that still have principal outstanding."""

        bills = self.mahajans.list_active_bills_due(as_of, user_id=self.user_id)
        names: dict[int, str] = {}
        reminders: list[BillReminder] = []
        for bill, open_bill in zip(bills, self._open_bills(bills)):
            if open_bill.outstanding_principal <= 0:
                continue
            if bill.mahajan_id not in names:
                mahajan = self.mahajans.get_by_id(bill.mahajan_id, user_id=self.user_id)
                names[bill.mahajan_id] = mahajan.name if mahajan else "Unknown"
            reminders.append(
                BillReminder(
                    bill_id=bill.id,
                    bill_number=bill.bill_number or "N/A",
                    mahajan_id=bill.mahajan_id,
                    mahajan_name=names[bill.mahajan_id],
                    bill_amount=open_bill.amount,
                    bill_date=bill.bill_date,
                    due_date=bill.due_date,
                    outstanding_balance=open_bill.outstanding_principal,
                    amount_due=amount_due(open_bill, as_of=as_of),
                )
            )
        return reminders

    # Bill customers -------------------------------------------------------

    def bill_customer_statement(
        self, bill_customer_id: int, filters: StatementFilters | None = None
    ) -> StatementResult:
        """Sales and refunds raise the balance, payments received lower it."""

        if self.bill_customers.get_by_id(bill_customer_id, user_id=self.user_id) is None:
            raise HolderNotFound("bill customer", bill_customer_id)
        sales = self.bill_customers.list_sales(bill_customer_id, user_id=self.user_id)
        settlements = self.bill_customers.list_sale_transactions(
            [sale.id for sale in sales], user_id=self.user_id
        )
        collected = collect_events(_sale_sources(sales, settlements))
        return reconstruct(
            collected.events,
            filters,
            semantics=BalanceSemantics.OWED,
            skipped=collected.skipped,
        )

    # Partners -------------------------------------------------------------

    def partner_statement(
        self, partner_id: int, filters: StatementFilters | None = None
    ) -> StatementResult:
        if self.partners.get_by_id(partner_id, user_id=self.user_id) is None:
            raise HolderNotFound("partner", partner_id)
        rows = self.partners.list_transactions(partner_id, user_id=self.user_id)
        collected = collect_events([(rows, _PARTNER_MAPPING)])
        return reconstruct(
            collected.events, filters, semantics=BalanceSemantics.NET, skipped=collected.skipped
        )

    def transfer_between_partners(
        self,
        from_partner_id: int,
        to_partner_id: int,
        amount: Any,
        *,
        payment_date: date,
        payment_mode: str = "bank",
        notes: str | None = None,
    ) -> tuple[PartnerTransaction, PartnerTransaction]:
        """Record a transfer as a withdrawal from one partner and an investment by the other."""

        if from_partner_id == to_partner_id:
            raise ValidationError("cannot transfer to the same partner", rejected=[to_partner_id])
        source = self.partners.get_by_id(from_partner_id, user_id=self.user_id)
        if source is None:
            raise HolderNotFound("partner", from_partner_id)
        destination = self.partners.get_by_id(to_partner_id, user_id=self.user_id)
        if destination is None:
            raise HolderNotFound("partner", to_partner_id)

        reference = f"TRF-{uuid4().hex[:12]}"
        note = notes or "Money transfer"
        out_event, in_event = transfer_events(
            amount,
            payment_date,
            reference=reference,
            description_out=f"Transfer/Paid to {destination.name}: {note}",
            description_in=f"Transfer/Paid from {source.name}: {note}",
        )
        withdrawal, investment = self.partners.add_transactions(
            [
                PartnerTransaction(
                    partner_id=source.id,
                    direction=WITHDRAWAL,
                    amount=float(out_event.amount),
                    payment_date=out_event.date,
                    payment_mode=payment_mode,
                    transfer_ref=reference,
                    notes=out_event.description,
                ),
                PartnerTransaction(
                    partner_id=destination.id,
                    direction=INVESTMENT,
                    amount=float(in_event.amount),
                    payment_date=in_event.date,
                    payment_mode=payment_mode,
                    transfer_ref=reference,
                    notes=in_event.description,
                ),
            ]
        )
        logger.info(
            "Partner transfer recorded",
            extra={
                "from_partner_id": from_partner_id,
                "to_partner_id": to_partner_id,
                "amount": str(out_event.amount),
                "reference": reference,
            },
        )
        return withdrawal, investment

    # Firm accounts --------------------------------------------------------

    def firm_account_statement(
        self, account_id: int, filters: StatementFilters | None = None
    ) -> StatementResult:
        if self.firm_accounts.get_by_id(account_id, user_id=self.user_id) is None:
            raise HolderNotFound("firm account", account_id)
        rows = self.firm_accounts.list_transactions(account_id, user_id=self.user_id)
        collected = collect_events([(rows, _FIRM_MAPPING)])
        return reconstruct(
            collected.events, filters, semantics=BalanceSemantics.NET, skipped=collected.skipped
        )


__all__ = [
    "BillReminder",
    "summary_cache_key",
    "SummaryReport",
    "StatementService",
]
