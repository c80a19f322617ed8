"""Mahajan/bill repository protocol."""

from __future__ import annotations

from datetime import date
from typing import Iterable, Optional, Protocol

from ...models.mahajan import Bill, BillTransaction, Mahajan


class MahajanRepository(Protocol):
    def get_by_id(self, mahajan_id: int, *, user_id: int) -> Optional[Mahajan]:
        ...

    def list_all(self, *, user_id: int) -> list[Mahajan]:
        ...

    def list_bills(
        self, mahajan_id: int, *, user_id: int, active_only: bool = False
    ) -> list[Bill]:
        ...

    def list_active_bills_due(self, as_of: date, *, user_id: int) -> list[Bill]:
        ...

    def list_bill_transactions(
        self, bill_ids: Iterable[int], *, user_id: int
    ) -> list[BillTransaction]:
        ...

    def record_payments(
        self,
        transactions: Iterable[BillTransaction],
        *,
        close_bill_ids: Iterable[int] = (),
        user_id: int,
    ) -> list[BillTransaction]:
        """Persist payments and close settled bills atomically."""
        ...
