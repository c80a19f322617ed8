"""Cheque repository protocol."""

from __future__ import annotations

from typing import Iterable, Optional, Protocol

from ...models.cheque import Cheque


class ChequeRepository(Protocol):
    def list_all(
        self, *, user_id: int, statuses: Optional[Iterable[str]] = None
    ) -> list[Cheque]:
        ...

    def update_status(self, cheque_id: int, status: str, *, user_id: int) -> Optional[Cheque]:
        ...
