"""Customer/loan repository protocol."""

from __future__ import annotations

from typing import Iterable, Optional, Protocol

from ...models.customer import Customer, Loan, LoanTransaction


class CustomerRepository(Protocol):
    """Read access to customers, their loans and repayments."""

    def get_by_id(self, customer_id: int, *, user_id: int) -> Optional[Customer]:
        ...

    def list_all(self, *, user_id: int) -> list[Customer]:
        ...

    def list_loans(self, *, user_id: int, customer_id: Optional[int] = None) -> list[Loan]:
        """Loans oldest first."""
        ...

    def list_loan_transactions(
        self, loan_ids: Iterable[int], *, user_id: int
    ) -> list[LoanTransaction]:
        """Repayments in payment-date order."""
        ...
