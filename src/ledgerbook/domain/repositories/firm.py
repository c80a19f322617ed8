"""Firm account repository protocol."""

from __future__ import annotations

from typing import Optional, Protocol

from ...models.firm import FirmAccount, FirmTransaction


class FirmAccountRepository(Protocol):
    def get_by_id(self, account_id: int, *, user_id: int) -> Optional[FirmAccount]:
        ...

    def list_transactions(self, account_id: int, *, user_id: int) -> list[FirmTransaction]:
        ...
