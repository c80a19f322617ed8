"""SQLModel implementation of the partner repository."""

from __future__ import annotations

from typing import Iterable, Optional

from sqlmodel import select

from ...models.partner import Partner, PartnerTransaction
from ..database import SessionFactory


class SQLModelPartnerRepository:
    def __init__(self, session_factory: SessionFactory):
        self.session_factory = session_factory

    def get_by_id(self, partner_id: int, *, user_id: int) -> Optional[Partner]:
        with self.session_factory() as session:
            return session.exec(
                select(Partner)
                .where(Partner.id == partner_id)
                .where(Partner.user_id == user_id)
            ).first()

    def list_transactions(self, partner_id: int, *, user_id: int) -> list[PartnerTransaction]:
        with self.session_factory() as session:
            statement = (
                select(PartnerTransaction)
                .join(Partner, PartnerTransaction.partner_id == Partner.id)  # type: ignore
                .where(Partner.user_id == user_id)
                .where(PartnerTransaction.partner_id == partner_id)
                .order_by(PartnerTransaction.payment_date, PartnerTransaction.id)  # type: ignore
            )
            return list(session.exec(statement).all())

    def add_transactions(
        self, transactions: Iterable[PartnerTransaction]
    ) -> list[PartnerTransaction]:
        """Insert all rows atomically (both legs of a transfer land together)."""
        rows = list(transactions)
        with self.session_factory() as session:
            for row in rows:
                session.add(row)
            session.commit()
            for row in rows:
                session.refresh(row)
            return rows
