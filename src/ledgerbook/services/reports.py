"""Balance charts and printable statements rendered with matplotlib."""

from __future__ import annotations

from pathlib import Path
from typing import Protocol, Sequence

import matplotlib

matplotlib.use("Agg")
import matplotlib.pyplot as plt
from matplotlib.backends.backend_pdf import PdfPages
from matplotlib.figure import Figure

from .collector import EventKind
from .reconstructor import StatementEntry, format_amount
from .summary import AccountSummary

ROWS_PER_PAGE = 28
_COLUMNS = ["Date", "Reference", "Description", "Debit", "Credit", "Balance"]


class ReportRenderer(Protocol):
    """Protocol describing renderer behavior."""

    def render(self, figure: Figure, *, output_path: Path) -> None:  # pragma: no cover - interface
        ...


def build_balance_chart(
    statement: Sequence[StatementEntry], *, title: str = "Running Balance", currency: str = "INR"
) -> Figure:
    """Step chart of the running balance after each statement row."""

    fig, ax = plt.subplots(figsize=(10, 5))
    if statement:
        dates = [entry.date for entry in statement]
        balances = [float(entry.running_balance) for entry in statement]
        ax.step(dates, balances, where="post", color="#2563EB", linewidth=2)
        ax.fill_between(dates, balances, step="post", alpha=0.15, color="#2563EB")
        ax.axhline(0, color="#9CA3AF", linewidth=0.8)
        ax.set_ylabel(f"Balance ({currency})")
        ax.grid(True, axis="y", alpha=0.3)
        fig.autofmt_xdate()
    else:
        ax.text(0.5, 0.5, "No statement rows", ha="center", va="center", fontsize=14, color="#666")
        ax.axis("off")
    ax.set_title(title, fontsize=14, fontweight="bold")
    plt.tight_layout()
    return fig


def export_balance_png(
    *,
    statement: Sequence[StatementEntry],
    output_path: Path,
    renderer: ReportRenderer | None = None,
) -> Path:
    """Render the balance chart to PNG and return the path."""

    fig = build_balance_chart(statement)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    if renderer is not None:
        renderer.render(fig, output_path=output_path)
    else:
        fig.savefig(output_path, bbox_inches="tight", dpi=120)
    plt.close(fig)
    return output_path


def _table_rows(statement: Sequence[StatementEntry]) -> list[list[str]]:
    return [
        [
            entry.date.isoformat(),
            entry.reference,
            entry.description[:48],
            format_amount(entry.amount) if entry.kind is EventKind.DEBIT else "",
            format_amount(entry.amount) if entry.kind is EventKind.CREDIT else "",
            format_amount(entry.running_balance),
        ]
        for entry in statement
    ]


def _summary_lines(summary: AccountSummary, currency: str) -> list[str]:
    return [
        f"Total debits: {currency} {format_amount(summary.total_debits)}",
        f"Total credits: {currency} {format_amount(summary.total_credits)}",
        f"Outstanding: {currency} {format_amount(summary.outstanding_balance)}",
        f"Credits in period: {currency} {format_amount(summary.windowed_credit_total)}"
        f" ({summary.event_count_in_window})",
    ]


def export_statement_pdf(
    statement: Sequence[StatementEntry],
    summary: AccountSummary,
    *,
    title: str,
    output_path: Path,
    currency: str = "INR",
) -> Path:
    """Write a paginated statement table, rows in the order given, plus a summary block."""

    rows = _table_rows(statement)
    pages = [rows[i : i + ROWS_PER_PAGE] for i in range(0, len(rows), ROWS_PER_PAGE)] or [[]]
    output_path.parent.mkdir(parents=True, exist_ok=True)

    with PdfPages(output_path) as pdf:
        for number, page_rows in enumerate(pages, start=1):
            fig, ax = plt.subplots(figsize=(8.27, 11.69))  # A4 portrait
            ax.axis("off")
            ax.set_title(f"{title} (page {number}/{len(pages)})", fontsize=12, fontweight="bold")
            if page_rows:
                table = ax.table(
                    cellText=page_rows,
                    colLabels=_COLUMNS,
                    loc="upper center",
                    colWidths=[0.13, 0.13, 0.38, 0.12, 0.12, 0.12],
                )
                table.auto_set_font_size(False)
                table.set_fontsize(7)
            else:
                ax.text(0.5, 0.9, "No statement rows", ha="center", fontsize=10, color="#666")
            if number == len(pages):
                ax.text(
                    0.0,
                    0.02,
                    "\n".join(_summary_lines(summary, currency)),
                    transform=ax.transAxes,
                    fontsize=9,
                    va="bottom",
                )
            pdf.savefig(fig)
            plt.close(fig)
    return output_path


__all__ = [
    "ROWS_PER_PAGE",
    "build_balance_chart",
    "export_balance_png",
    "export_statement_pdf",
]
