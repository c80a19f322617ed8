"""SQLModel implementation of the cheque repository."""

from __future__ import annotations

from typing import Iterable, Optional

from sqlmodel import select

from ...models.cheque import Cheque
from ..database import SessionFactory


class SQLModelChequeRepository:
    def __init__(self, session_factory: SessionFactory):
        self.session_factory = session_factory

    def list_all(
        self, *, user_id: int, statuses: Optional[Iterable[str]] = None
    ) -> list[Cheque]:
        with self.session_factory() as session:
            statement = select(Cheque).where(Cheque.user_id == user_id)
            if statuses is not None:
                statement = statement.where(Cheque.status.in_(list(statuses)))  # type: ignore
            statement = statement.order_by(Cheque.cheque_date, Cheque.id)  # type: ignore
            return list(session.exec(statement).all())

    def update_status(self, cheque_id: int, status: str, *, user_id: int) -> Optional[Cheque]:
        """Write the new status directly; returns None when the cheque is not found."""
        with self.session_factory() as session:
            cheque = session.exec(
                select(Cheque).where(Cheque.id == cheque_id).where(Cheque.user_id == user_id)
            ).first()
            if cheque is None:
                return None
            cheque.status = status
            session.add(cheque)
            session.commit()
            session.refresh(cheque)
            return cheque
