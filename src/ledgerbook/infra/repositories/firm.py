"""SQLModel implementation of the firm account repository."""

from __future__ import annotations

from typing import Optional

from sqlmodel import select

from ...models.firm import FirmAccount, FirmTransaction
from ..database import SessionFactory


class SQLModelFirmAccountRepository:
    def __init__(self, session_factory: SessionFactory):
        self.session_factory = session_factory

    def get_by_id(self, account_id: int, *, user_id: int) -> Optional[FirmAccount]:
        with self.session_factory() as session:
            return session.exec(
                select(FirmAccount)
                .where(FirmAccount.id == account_id)
                .where(FirmAccount.user_id == user_id)
            ).first()

    def list_transactions(self, account_id: int, *, user_id: int) -> list[FirmTransaction]:
        with self.session_factory() as session:
            statement = (
                select(FirmTransaction)
                .join(FirmAccount, FirmTransaction.firm_account_id == FirmAccount.id)  # type: ignore
                .where(FirmAccount.user_id == user_id)
                .where(FirmTransaction.firm_account_id == account_id)
                .order_by(FirmTransaction.transaction_date, FirmTransaction.id)  # type: ignore
            )
            return list(session.exec(statement).all())
