"""Partner repository protocol."""

from __future__ import annotations

from typing import Iterable, Optional, Protocol

from ...models.partner import Partner, PartnerTransaction


class PartnerRepository(Protocol):
    def get_by_id(self, partner_id: int, *, user_id: int) -> Optional[Partner]:
        ...

    def list_transactions(self, partner_id: int, *, user_id: int) -> list[PartnerTransaction]:
        ...

    def add_transactions(
        self, transactions: Iterable[PartnerTransaction]
    ) -> list[PartnerTransaction]:
        ...
