"""Flask CLI commands for Ledgerbook."""

from __future__ import annotations

from pathlib import Path

import click
from flask import current_app


def init_app(app) -> None:
    """Register CLI commands on the Flask app."""

    @app.cli.command("ledgerbook-statement")
    @click.argument("customer_id", type=int)
    @click.option("--from", "from_value", default=None, help="First day (YYYY-MM-DD)")
    @click.option("--to", "to_value", default=None, help="Last day (YYYY-MM-DD)")
    @click.option("--status", default=None, help="Loan status: active, closed or all")
    @click.option("--user-id", type=int, default=None, help="Acting user (defaults to config)")
    @click.option(
        "--output",
        "output_path",
        type=click.Path(dir_okay=False, path_type=Path),
        required=True,
        help="CSV file, or PDF when the name ends in .pdf",
    )
    def ledgerbook_statement(
        customer_id: int,
        from_value: str | None,
        to_value: str | None,
        status: str | None,
        user_id: int | None,
        output_path: Path,
    ) -> None:
        """Export a customer statement."""

        # Import here to avoid circular imports at module import time
        from .exceptions import HolderNotFound, ValidationError
        from .extensions import get_session_factory
        from .services.export_csv import export_statement_csv
        from .services.ledger_service import StatementService
        from .services.reports import export_statement_pdf
        from .services.window import parse_filters

        config = current_app.config["LEDGERBOOK_CONFIG"]
        service = StatementService(
            get_session_factory(),
            user_id=user_id if user_id is not None else config.DEFAULT_USER_ID,
            cache_capacity=config.SUMMARY_CACHE_SIZE,
        )
        try:
            filters = parse_filters(from_value, to_value, status)
            result = service.customer_statement(customer_id, filters)
        except (HolderNotFound, ValidationError) as exc:
            raise click.ClickException(str(exc)) from exc

        if output_path.suffix.lower() == ".pdf":
            customer = service.customers.get_by_id(customer_id, user_id=service.user_id)
            export_statement_pdf(
                result.statement,
                result.summary,
                title=f"Statement - {customer.name}",
                output_path=output_path,
                currency=config.CURRENCY,
            )
        else:
            export_statement_csv(statement=result.statement, output_path=output_path)

        click.echo(f"Statement written: {output_path} ({len(result.statement)} rows)")
        if result.skipped:
            click.echo(f"Skipped {result.skipped} malformed record(s)", err=True)

    @app.cli.command("ledgerbook-preview-csv")
    @click.argument("csv_path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
    @click.option("--from", "from_value", default=None, help="First day (YYYY-MM-DD)")
    @click.option("--to", "to_value", default=None, help="Last day (YYYY-MM-DD)")
    def ledgerbook_preview_csv(
        csv_path: Path, from_value: str | None, to_value: str | None
    ) -> None:
        """Reconstruct a statement from a CSV of date,kind,amount rows."""

        from .exceptions import ValidationError
        from .services.import_csv import ColumnMapping, collect_csv_events
        from .services.ledger import reconstruct
        from .services.reconstructor import format_amount
        from .services.window import parse_filters

        try:
            filters = parse_filters(from_value, to_value)
            collected = collect_csv_events(csv_path, ColumnMapping())
        except ValidationError as exc:
            raise click.ClickException(str(exc)) from exc

        result = reconstruct(collected.events, filters, skipped=collected.skipped)
        for entry in result.statement:
            click.echo(
                f"{entry.date.isoformat()}  {entry.kind.value:<6}  "
                f"{format_amount(entry.amount):>12}  {format_amount(entry.running_balance):>12}  "
                f"{entry.description}"
            )
        click.echo(f"Outstanding: {format_amount(result.summary.outstanding_balance)}")
        click.echo(f"Skipped: {result.skipped}")
