"""Exceptions raised by the ledger core and the services around it."""

from __future__ import annotations

from typing import Any, Sequence


class LedgerError(Exception):
    """Base exception for ledgerbook."""


class ValidationError(LedgerError, ValueError):
    """Source records or user input failed validation.

    ``rejected`` carries one entry per offending record (or input field) so the
    caller can report exactly what was refused.
    """

    def __init__(self, message: str, rejected: Sequence[Any] | None = None):
        super().__init__(message)
        self.rejected = list(rejected or [])

    @property
    def count(self) -> int:
        return len(self.rejected)


class LedgerContractError(LedgerError, RuntimeError):
    """Unvalidated data reached the reconstructor (programming error)."""


class HolderNotFound(LedgerError, LookupError):
    """Requested customer, mahajan, partner, account or cheque does not exist."""

    def __init__(self, kind: str, holder_id: int):
        super().__init__(f"{kind} {holder_id} not found")
        self.kind = kind
        self.holder_id = holder_id
