"""SQLModel implementation of the customer/loan repository."""

from __future__ import annotations

from typing import Iterable, Optional

from sqlmodel import select

from ...models.customer import Customer, Loan, LoanTransaction
from ..database import SessionFactory


class SQLModelCustomerRepository:
    """Customers, loans and loan repayments scoped to one user."""

    def __init__(self, session_factory: SessionFactory):
        """Initialize with a session factory."""
        self.session_factory = session_factory

    def get_by_id(self, customer_id: int, *, user_id: int) -> Optional[Customer]:
        """Retrieve a customer by ID."""
        with self.session_factory() as session:
            return session.exec(
                select(Customer)
                .where(Customer.id == customer_id)
                .where(Customer.user_id == user_id)
            ).first()

    def list_all(self, *, user_id: int) -> list[Customer]:
        with self.session_factory() as session:
            statement = (
                select(Customer)
                .where(Customer.user_id == user_id)
                .order_by(Customer.id)  # type: ignore
            )
            return list(session.exec(statement).all())

    def list_loans(self, *, user_id: int, customer_id: Optional[int] = None) -> list[Loan]:
        """List loans oldest first, optionally for a single customer."""
        with self.session_factory() as session:
            statement = select(Loan).where(Loan.user_id == user_id)
            if customer_id is not None:
                statement = statement.where(Loan.customer_id == customer_id)
            statement = statement.order_by(Loan.loan_date, Loan.id)  # type: ignore
            return list(session.exec(statement).all())

    def list_loan_transactions(
        self, loan_ids: Iterable[int], *, user_id: int
    ) -> list[LoanTransaction]:
        """List repayments for the given loans in payment order."""
        ids = list(loan_ids)
        if not ids:
            return []
        with self.session_factory() as session:
            statement = (
                select(LoanTransaction)
                .join(Loan, LoanTransaction.loan_id == Loan.id)  # type: ignore
                .where(Loan.user_id == user_id)
                .where(LoanTransaction.loan_id.in_(ids))  # type: ignore
                .order_by(LoanTransaction.payment_date, LoanTransaction.id)  # type: ignore
            )
            return list(session.exec(statement).all())
