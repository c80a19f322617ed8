"""SQLModel implementation of the mahajan/bill repository."""

from __future__ import annotations

from datetime import date
from typing import Iterable, Optional

from sqlmodel import select

from ...models.mahajan import Bill, BillTransaction, Mahajan
from ..database import SessionFactory


class SQLModelMahajanRepository:
    """Mahajans, bills and bill payments scoped to one user."""

    def __init__(self, session_factory: SessionFactory):
        self.session_factory = session_factory

    def get_by_id(self, mahajan_id: int, *, user_id: int) -> Optional[Mahajan]:
        with self.session_factory() as session:
            return session.exec(
                select(Mahajan)
                .where(Mahajan.id == mahajan_id)
                .where(Mahajan.user_id == user_id)
            ).first()

    def list_all(self, *, user_id: int) -> list[Mahajan]:
        with self.session_factory() as session:
            statement = (
                select(Mahajan).where(Mahajan.user_id == user_id).order_by(Mahajan.id)  # type: ignore
            )
            return list(session.exec(statement).all())

    def list_bills(
        self, mahajan_id: int, *, user_id: int, active_only: bool = False
    ) -> list[Bill]:
        """List a mahajan's bills oldest first."""
        with self.session_factory() as session:
            statement = (
                select(Bill)
                .where(Bill.user_id == user_id)
                .where(Bill.mahajan_id == mahajan_id)
            )
            if active_only:
                statement = statement.where(Bill.is_active == True)  # noqa: E712
            statement = statement.order_by(Bill.bill_date, Bill.id)  # type: ignore
            return list(session.exec(statement).all())

    def list_active_bills_due(self, as_of: date, *, user_id: int) -> list[Bill]:
        """Active bills whose due date is on or before ``as_of``."""
        with self.session_factory() as session:
            statement = (
                select(Bill)
                .where(Bill.user_id == user_id)
                .where(Bill.is_active == True)  # noqa: E712
                .where(Bill.due_date.is_not(None))  # type: ignore
                .where(Bill.due_date <= as_of)  # type: ignore
                .order_by(Bill.due_date, Bill.id)  # type: ignore
            )
            return list(session.exec(statement).all())

    def list_bill_transactions(
        self, bill_ids: Iterable[int], *, user_id: int
    ) -> list[BillTransaction]:
        ids = list(bill_ids)
        if not ids:
            return []
        with self.session_factory() as session:
            statement = (
                select(BillTransaction)
                .join(Bill, BillTransaction.bill_id == Bill.id)  # type: ignore
                .where(Bill.user_id == user_id)
                .where(BillTransaction.bill_id.in_(ids))  # type: ignore
                .order_by(BillTransaction.payment_date, BillTransaction.id)  # type: ignore
            )
            return list(session.exec(statement).all())

    def record_payments(
        self,
        transactions: Iterable[BillTransaction],
        *,
        close_bill_ids: Iterable[int] = (),
        user_id: int,
    ) -> list[BillTransaction]:
        """Insert payment rows and close fully paid bills in one transaction."""
        rows = list(transactions)
        closing = set(close_bill_ids)
        with self.session_factory() as session:
            for row in rows:
                session.add(row)
            if closing:
                bills = session.exec(
                    select(Bill)
                    .where(Bill.user_id == user_id)
                    .where(Bill.id.in_(closing))  # type: ignore
                ).all()
                for bill in bills:
                    bill.is_active = False
                    session.add(bill)
            session.commit()
            for row in rows:
                session.refresh(row)
            return rows
