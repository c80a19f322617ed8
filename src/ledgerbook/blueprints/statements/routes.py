"""Statement, summary and payment routes."""

from __future__ import annotations

from datetime import date

from flask import Response, jsonify, request

from ...exceptions import ValidationError
from ...extensions import current_user_id, get_session_factory, get_summary_cache
from ...services.export_csv import statement_csv_text, summary_csv_text
from ...services.ledger_service import StatementService
from ...services.window import StatementFilters, parse_filters
from ..serializers import (
    allocation_to_dict,
    bill_reminder_to_dict,
    date_arg,
    holder_to_dict,
    position_to_dict,
    statement_to_dict,
)
from . import bp


def _service() -> StatementService:
    user_id = current_user_id()
    return StatementService(
        get_session_factory(), user_id=user_id, cache=get_summary_cache(user_id)
    )


def _filters() -> StatementFilters:
    return parse_filters(
        request.args.get("from"), request.args.get("to"), request.args.get("status")
    )


def _json_body() -> dict:
    payload = request.get_json(silent=True)
    if not isinstance(payload, dict):
        raise ValidationError("request body must be a JSON object")
    return payload


def _refresh_arg() -> bool:
    return request.args.get("refresh", "").lower() in {"1", "true", "yes"}


def _csv_response(text: str, filename: str) -> Response:
    return Response(
        text,
        mimetype="text/csv",
        headers={"Content-Disposition": f"attachment; filename={filename}"},
    )


# Customers ----------------------------------------------------------------


@bp.get("/customers/<int:customer_id>/statement")
def customer_statement(customer_id: int):
    result = _service().customer_statement(customer_id, _filters())
    return jsonify(statement_to_dict(result))


@bp.get("/customers/<int:customer_id>/statement.csv")
def customer_statement_csv(customer_id: int):
    result = _service().customer_statement(customer_id, _filters())
    return _csv_response(
        statement_csv_text(result.statement), f"customer_{customer_id}_statement.csv"
    )


@bp.get("/customers/summary")
def customer_summary():
    """Per-customer summaries; ``refresh=1`` drops every cached entry first."""

    refresh = _refresh_arg()
    report = _service().customer_summaries(_filters(), refresh=refresh)
    return jsonify(
        {
            "customers": [holder_to_dict(row) for row in report.rows],
            "skipped": report.skipped,
        }
    )


@bp.get("/customers/summary.csv")
def customer_summary_csv():
    report = _service().customer_summaries(_filters())
    return _csv_response(summary_csv_text(report.rows), "customer_summary.csv")


@bp.get("/customers/<int:customer_id>/outstanding")
def customer_outstanding(customer_id: int):
    as_of = date_arg("as_of", default=date.today())
    positions = _service().customer_outstanding(customer_id, as_of=as_of)
    return jsonify(
        {"as_of": as_of.isoformat(), "loans": [position_to_dict(p) for p in positions]}
    )


# Mahajans -----------------------------------------------------------------


@bp.get("/mahajans/<int:mahajan_id>/statement")
def mahajan_statement(mahajan_id: int):
    result = _service().mahajan_statement(mahajan_id, _filters())
    return jsonify(statement_to_dict(result))


@bp.get("/mahajans/summary")
def mahajan_summary():
    report = _service().mahajan_summaries(_filters(), refresh=_refresh_arg())
    return jsonify(
        {
            "mahajans": [holder_to_dict(row) for row in report.rows],
            "skipped": report.skipped,
        }
    )


@bp.get("/mahajans/summary.csv")
def mahajan_summary_csv():
    report = _service().mahajan_summaries(_filters())
    return _csv_response(summary_csv_text(report.rows), "mahajan_summary.csv")


@bp.post("/mahajans/<int:mahajan_id>/payments")
def mahajan_payment(mahajan_id: int):
    payload = _json_body()
    allocation = _service().record_mahajan_payment(
        mahajan_id,
        payload.get("amount"),
        payment_date=date_arg("payment_date", default=date.today(), source=payload),
        payment_mode=payload.get("payment_mode") or "cash",
        notes=payload.get("notes"),
    )
    return jsonify(allocation_to_dict(allocation)), 201


@bp.get("/bills/reminders")
def bill_reminders():
    as_of = date_arg("as_of", default=date.today())
    reminders = _service().bill_reminders(as_of=as_of)
    return jsonify(
        {"as_of": as_of.isoformat(), "bills": [bill_reminder_to_dict(r) for r in reminders]}
    )


# Bill customers -----------------------------------------------------------


@bp.get("/bill-customers/<int:bill_customer_id>/statement")
def bill_customer_statement(bill_customer_id: int):
    result = _service().bill_customer_statement(bill_customer_id, _filters())
    return jsonify(statement_to_dict(result))


@bp.get("/bill-customers/<int:bill_customer_id>/statement.csv")
def bill_customer_statement_csv(bill_customer_id: int):
    result = _service().bill_customer_statement(bill_customer_id, _filters())
    return _csv_response(
        statement_csv_text(result.statement),
        f"bill_customer_{bill_customer_id}_statement.csv",
    )


# Partners and firm accounts -----------------------------------------------


@bp.get("/partners/<int:partner_id>/statement")
def partner_statement(partner_id: int):
    result = _service().partner_statement(partner_id, _filters())
    return jsonify(statement_to_dict(result))


@bp.post("/partners/transfers")
def partner_transfer():
    payload = _json_body()
    try:
        from_id = int(payload["from_partner_id"])
        to_id = int(payload["to_partner_id"])
    except (KeyError, TypeError, ValueError):
        raise ValidationError(
            "from_partner_id and to_partner_id are required integers",
            rejected=[
                {key: payload.get(key)} for key in ("from_partner_id", "to_partner_id")
            ],
        ) from None
    withdrawal, investment = _service().transfer_between_partners(
        from_id,
        to_id,
        payload.get("amount"),
        payment_date=date_arg("payment_date", default=date.today(), source=payload),
        payment_mode=payload.get("payment_mode") or "bank",
        notes=payload.get("notes"),
    )
    return (
        jsonify(
            {
                "reference": withdrawal.transfer_ref,
                "withdrawal_id": withdrawal.id,
                "investment_id": investment.id,
            }
        ),
        201,
    )


@bp.get("/firm-accounts/<int:account_id>/statement")
def firm_account_statement(account_id: int):
    result = _service().firm_account_statement(account_id, _filters())
    return jsonify(statement_to_dict(result))
