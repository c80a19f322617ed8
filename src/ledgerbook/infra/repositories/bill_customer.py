"""SQLModel implementation of the bill customer/sale repository."""

from __future__ import annotations

from typing import Iterable, Optional

from sqlmodel import select

from ...models.bill_customer import BillCustomer, Sale, SaleTransaction
from ..database import SessionFactory


class SQLModelBillCustomerRepository:
    def __init__(self, session_factory: SessionFactory):
        self.session_factory = session_factory

    def get_by_id(self, bill_customer_id: int, *, user_id: int) -> Optional[BillCustomer]:
        with self.session_factory() as session:
            return session.exec(
                select(BillCustomer)
                .where(BillCustomer.id == bill_customer_id)
                .where(BillCustomer.user_id == user_id)
            ).first()

    def list_sales(self, bill_customer_id: int, *, user_id: int) -> list[Sale]:
        with self.session_factory() as session:
            statement = (
                select(Sale)
                .where(Sale.user_id == user_id)
                .where(Sale.bill_customer_id == bill_customer_id)
                .order_by(Sale.sale_date, Sale.id)  # type: ignore
            )
            return list(session.exec(statement).all())

    def list_sale_transactions(
        self, sale_ids: Iterable[int], *, user_id: int
    ) -> list[SaleTransaction]:
        ids = list(sale_ids)
        if not ids:
            return []
        with self.session_factory() as session:
            statement = (
                select(SaleTransaction)
                .join(Sale, SaleTransaction.sale_id == Sale.id)  # type: ignore
                .where(Sale.user_id == user_id)
                .where(SaleTransaction.sale_id.in_(ids))  # type: ignore
                .order_by(SaleTransaction.payment_date, SaleTransaction.id)  # type: ignore
            )
            return list(session.exec(statement).all())
