"""Pytest configuration and shared fixtures for Ledgerbook tests.

This module provides database fixtures, test data factories, and helper utilities
for testing the ledger core, repositories, services and routes without touching
the real app database.
"""

from __future__ import annotations

import logging
import tempfile
from datetime import date
from decimal import Decimal
from pathlib import Path

import pytest
from sqlmodel import SQLModel, create_engine

from ledgerbook import create_app
from ledgerbook.config import TestConfig
from ledgerbook.infra.database import create_session_factory

# Import all models to ensure they're registered with SQLModel metadata
from ledgerbook.models import (
    Bill,
    BillCustomer,
    BillTransaction,
    Cheque,
    Customer,
    FirmAccount,
    FirmTransaction,
    Loan,
    LoanTransaction,
    Mahajan,
    Partner,
    PartnerTransaction,
    Sale,
    SaleTransaction,
)
from ledgerbook.services.collector import EventKind, MonetaryEvent

USER_ID = 1
OTHER_USER_ID = 2


def ev(
    day: date,
    kind: EventKind | str,
    amount,
    *,
    reference: str = "",
    description: str = "",
    group: str | None = None,
    status: str | None = None,
) -> MonetaryEvent:
    """Build a MonetaryEvent with terse arguments for core tests."""

    if isinstance(kind, str):
        kind = EventKind(kind.upper())
    return MonetaryEvent(
        date=day,
        kind=kind,
        amount=Decimal(str(amount)),
        reference=reference,
        description=description,
        group=group,
        status=status,
    )


# =============================================================================
# Database Fixtures
# =============================================================================


@pytest.fixture(scope="function")
def db_engine():
    """Create an isolated SQLite database file for each test.

    Yields:
        Engine: SQLModel engine connected to test database
    """
    with tempfile.NamedTemporaryFile(suffix=".db", delete=False) as f:
        db_path = Path(f.name)

    engine = create_engine(
        f"sqlite:///{db_path}", echo=False, connect_args={"check_same_thread": False}
    )
    SQLModel.metadata.create_all(engine)

    yield engine

    engine.dispose()
    db_path.unlink(missing_ok=True)


@pytest.fixture(scope="function")
def session_factory(db_engine):
    """Session factory matching the one the app builds (commit on exit)."""

    return create_session_factory(db_engine)


def _persist(session_factory, row):
    with session_factory() as session:
        session.add(row)
        session.commit()
        session.refresh(row)
    return row


# =============================================================================
# Test Data Factories
# =============================================================================


@pytest.fixture
def customer_factory(session_factory):
    def _create_customer(
        name: str = "Ramesh Traders", phone: str | None = None, user_id: int = USER_ID
    ) -> Customer:
        return _persist(session_factory, Customer(name=name, phone=phone, user_id=user_id))

    return _create_customer


@pytest.fixture
def loan_factory(session_factory):
    def _create_loan(
        customer: Customer,
        principal: float = 1000.0,
        loan_date: date = date(2024, 1, 1),
        *,
        loan_number: str | None = None,
        interest_rate: float | None = None,
        interest_type: str = "none",
        is_active: bool = True,
        description: str | None = None,
    ) -> Loan:
        return _persist(
            session_factory,
            Loan(
                user_id=customer.user_id,
                customer_id=customer.id,
                loan_number=loan_number or f"L-{customer.id}-{loan_date:%Y%m%d}",
                principal_amount=principal,
                interest_rate=interest_rate,
                interest_type=interest_type,
                loan_date=loan_date,
                is_active=is_active,
                description=description,
            ),
        )

    return _create_loan


@pytest.fixture
def loan_payment_factory(session_factory):
    def _create_payment(
        loan: Loan,
        amount: float,
        payment_date: date,
        *,
        transaction_type: str = "payment",
        payment_mode: str = "cash",
    ) -> LoanTransaction:
        return _persist(
            session_factory,
            LoanTransaction(
                loan_id=loan.id,
                amount=amount,
                payment_date=payment_date,
                transaction_type=transaction_type,
                payment_mode=payment_mode,
            ),
        )

    return _create_payment


@pytest.fixture
def mahajan_factory(session_factory):
    def _create_mahajan(name: str = "Gupta Wholesale", user_id: int = USER_ID) -> Mahajan:
        return _persist(session_factory, Mahajan(name=name, user_id=user_id))

    return _create_mahajan


@pytest.fixture
def bill_factory(session_factory):
    def _create_bill(
        mahajan: Mahajan,
        amount: float,
        bill_date: date,
        *,
        due_date: date | None = None,
        interest_rate: float | None = None,
        interest_type: str = "none",
        bill_number: str | None = None,
        is_active: bool = True,
    ) -> Bill:
        return _persist(
            session_factory,
            Bill(
                user_id=mahajan.user_id,
                mahajan_id=mahajan.id,
                bill_number=bill_number or f"B-{bill_date:%Y%m%d}",
                bill_amount=amount,
                bill_date=bill_date,
                due_date=due_date,
                interest_rate=interest_rate,
                interest_type=interest_type,
                is_active=is_active,
            ),
        )

    return _create_bill


@pytest.fixture
def bill_payment_factory(session_factory):
    def _create_payment(
        bill: Bill, amount: float, payment_date: date, *, transaction_type: str = "payment"
    ) -> BillTransaction:
        return _persist(
            session_factory,
            BillTransaction(
                bill_id=bill.id,
                amount=amount,
                payment_date=payment_date,
                transaction_type=transaction_type,
            ),
        )

    return _create_payment


@pytest.fixture
def bill_customer_factory(session_factory):
    def _create_bill_customer(
        name: str = "Mehta Textiles", phone: str | None = None, user_id: int = USER_ID
    ) -> BillCustomer:
        return _persist(session_factory, BillCustomer(name=name, phone=phone, user_id=user_id))

    return _create_bill_customer


@pytest.fixture
def sale_factory(session_factory):
    def _create_sale(
        bill_customer: BillCustomer,
        amount: float,
        sale_date: date,
        *,
        sale_number: str | None = None,
        description: str | None = None,
        is_active: bool = True,
    ) -> Sale:
        return _persist(
            session_factory,
            Sale(
                user_id=bill_customer.user_id,
                bill_customer_id=bill_customer.id,
                sale_number=sale_number or f"S-{sale_date:%Y%m%d}",
                sale_amount=amount,
                sale_date=sale_date,
                description=description,
                is_active=is_active,
            ),
        )

    return _create_sale


@pytest.fixture
def sale_transaction_factory(session_factory):
    def _create_transaction(
        sale: Sale,
        amount: float,
        payment_date: date,
        *,
        transaction_type: str = "payment",
        notes: str | None = None,
    ) -> SaleTransaction:
        return _persist(
            session_factory,
            SaleTransaction(
                sale_id=sale.id,
                amount=amount,
                payment_date=payment_date,
                transaction_type=transaction_type,
                notes=notes,
            ),
        )

    return _create_transaction


@pytest.fixture
def partner_factory(session_factory):
    def _create_partner(name: str = "Asha", user_id: int = USER_ID) -> Partner:
        return _persist(session_factory, Partner(name=name, user_id=user_id))

    return _create_partner


@pytest.fixture
def partner_transaction_factory(session_factory):
    def _create_transaction(
        partner: Partner, amount: float, payment_date: date, direction: str = "investment"
    ) -> PartnerTransaction:
        return _persist(
            session_factory,
            PartnerTransaction(
                partner_id=partner.id,
                amount=amount,
                payment_date=payment_date,
                direction=direction,
            ),
        )

    return _create_transaction


@pytest.fixture
def firm_account_factory(session_factory):
    def _create_account(name: str = "Cash in hand", user_id: int = USER_ID) -> FirmAccount:
        return _persist(session_factory, FirmAccount(account_name=name, user_id=user_id))

    return _create_account


@pytest.fixture
def firm_transaction_factory(session_factory):
    def _create_transaction(
        account: FirmAccount,
        transaction_type: str,
        amount: float,
        transaction_date: date,
        description: str | None = None,
    ) -> FirmTransaction:
        return _persist(
            session_factory,
            FirmTransaction(
                firm_account_id=account.id,
                transaction_type=transaction_type,
                amount=amount,
                transaction_date=transaction_date,
                description=description,
            ),
        )

    return _create_transaction


@pytest.fixture
def cheque_factory(session_factory):
    def _create_cheque(
        cheque_number: str,
        amount: float,
        cheque_date: date,
        *,
        status: str = "pending",
        party_name: str | None = "Sharma & Sons",
        user_id: int = USER_ID,
    ) -> Cheque:
        return _persist(
            session_factory,
            Cheque(
                cheque_number=cheque_number,
                amount=amount,
                cheque_date=cheque_date,
                status=status,
                party_name=party_name,
                user_id=user_id,
            ),
        )

    return _create_cheque


# =============================================================================
# Flask Fixtures
# =============================================================================


@pytest.fixture
def app(monkeypatch, tmp_path, db_engine):
    """Flask app bound to the same database file the factories write to."""

    monkeypatch.setenv("LEDGERBOOK_DATA_DIR", str(tmp_path / "instance"))
    config = TestConfig()
    config.DATABASE_URL = db_engine.url.render_as_string(hide_password=False)
    flask_app = create_app(config=config)

    yield flask_app

    flask_app.extensions["ledgerbook"]["engine"].dispose()
    package_logger = logging.getLogger("ledgerbook")
    for handler in list(package_logger.handlers):
        package_logger.removeHandler(handler)
        handler.close()


@pytest.fixture
def client(app):
    return app.test_client()
