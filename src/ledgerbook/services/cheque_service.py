"""Cheque status updates, breakdowns and reminders backed by the repository."""

from __future__ import annotations

from datetime import date
from typing import Any

from ..domain.repositories import ChequeRepository
from ..exceptions import HolderNotFound
from ..infra.database import SessionFactory
from ..infra.repositories import SQLModelChequeRepository
from ..logging_config import get_logger
from ..models.cheque import Cheque
from .cheques import (
    OPEN_STATUSES,
    ChequeReminder,
    ChequeStatus,
    StatusBucket,
    parse_status,
    pending_reminders,
    status_breakdown,
)

logger = get_logger(__name__)


class ChequeService:
    def __init__(
        self,
        session_factory: SessionFactory,
        *,
        user_id: int,
        cheques: ChequeRepository | None = None,
    ):
        self.user_id = user_id
        self.cheques = cheques or SQLModelChequeRepository(session_factory)

    def breakdown(self) -> dict[ChequeStatus, StatusBucket]:
        return status_breakdown(self.cheques.list_all(user_id=self.user_id))

    def reminders(self, *, as_of: date, threshold_days: int = 0) -> list[ChequeReminder]:
        open_cheques = self.cheques.list_all(
            user_id=self.user_id, statuses=[s.value for s in OPEN_STATUSES]
        )
        return pending_reminders(open_cheques, as_of=as_of, threshold_days=threshold_days)

    def update_status(self, cheque_id: int, status: Any) -> Cheque:
        """Write ``status`` directly; any status may follow any other."""

        new_status = parse_status(status)
        cheque = self.cheques.update_status(cheque_id, new_status.value, user_id=self.user_id)
        if cheque is None:
            raise HolderNotFound("cheque", cheque_id)
        logger.info(
            "Cheque status updated",
            extra={"cheque_id": cheque_id, "status": new_status.value},
        )
        return cheque


__all__ = ["ChequeService"]
