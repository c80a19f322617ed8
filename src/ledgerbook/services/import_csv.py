"""CSV ingestion of ledger events."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

import pandas as pd

from ..exceptions import ValidationError
from .collector import CollectionResult, SourceMapping, collect_events


@dataclass(slots=True)
class ColumnMapping:
    """Maps event fields to CSV headers (matched case-insensitively)."""

    date: str = "date"
    amount: str = "amount"
    kind: str = "kind"
    reference: str | None = "reference"
    description: str | None = "description"
    group: str | None = None
    status: str | None = None


def normalize_frame(*, file_path: Path, encoding: str = "utf-8") -> pd.DataFrame:
    """Load a CSV file into a DataFrame with consistent column casing."""

    frame = pd.read_csv(file_path, encoding=encoding, dtype=str, keep_default_na=True)
    frame.columns = [c.strip().lower() for c in frame.columns]
    return frame


def read_source_records(csv_path: Path, mapping: ColumnMapping | None = None) -> list[dict]:
    """Return one plain dict per CSV row; blank cells become None.

    Raises :class:`ValidationError` when a required mapped column is absent.
    """

    frame = normalize_frame(file_path=csv_path)
    if mapping is not None:
        required = [_column(mapping.date), _column(mapping.amount), _column(mapping.kind)]
        missing = [name for name in required if name not in frame.columns]
        if missing:
            raise ValidationError(
                f"CSV is missing required column(s): {', '.join(missing)}", rejected=missing
            )
    frame = frame.astype(object).where(pd.notna(frame), None)
    return frame.to_dict(orient="records")


def _column(name: str | None) -> str | None:
    return name.strip().lower() if name else None


def collect_csv_events(
    csv_path: Path, mapping: ColumnMapping | None = None, *, strict: bool = False
) -> CollectionResult:
    """Normalize a CSV of dated debit/credit rows into events.

    The kind column must read ``debit`` or ``credit``; any other value rejects
    the row like a bad date or amount would.
    """

    mapping = mapping or ColumnMapping()
    records = read_source_records(csv_path, mapping)
    source = SourceMapping(
        kind=None,
        kind_field=_column(mapping.kind),
        date_field=_column(mapping.date),
        amount_field=_column(mapping.amount),
        reference_field=_column(mapping.reference),
        description_field=_column(mapping.description),
        group_field=_column(mapping.group),
        status_field=_column(mapping.status),
    )
    return collect_events([(records, source)], strict=strict)


__all__ = ["ColumnMapping", "collect_csv_events", "normalize_frame", "read_source_records"]
