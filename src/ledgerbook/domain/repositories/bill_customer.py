"""Bill customer/sale repository protocol."""

from __future__ import annotations

from typing import Iterable, Optional, Protocol

from ...models.bill_customer import BillCustomer, Sale, SaleTransaction


class BillCustomerRepository(Protocol):
    def get_by_id(self, bill_customer_id: int, *, user_id: int) -> Optional[BillCustomer]:
        ...

    def list_sales(self, bill_customer_id: int, *, user_id: int) -> list[Sale]:
        """Sales oldest first."""
        ...

    def list_sale_transactions(
        self, sale_ids: Iterable[int], *, user_id: int
    ) -> list[SaleTransaction]:
        ...
