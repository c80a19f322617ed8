"""Service module exports."""

from . import (
    cache,
    cheque_service,
    cheques,
    collector,
    export_csv,
    import_csv,
    interest,
    ledger,
    ledger_service,
    reconstructor,
    reports,
    summary,
    window,
)
from .ledger import StatementResult, reconstruct

__all__ = [
    "StatementResult",
    "cache",
    "cheque_service",
    "cheques",
    "collector",
    "export_csv",
    "import_csv",
    "interest",
    "ledger",
    "ledger_service",
    "reconstruct",
    "reconstructor",
    "reports",
    "summary",
    "window",
]
