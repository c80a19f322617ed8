"""Cheque routes."""

from __future__ import annotations

from datetime import date

from flask import jsonify, request

from ...extensions import current_user_id, get_session_factory
from ...services.cheque_service import ChequeService
from ..serializers import bucket_to_dict, cheque_reminder_to_dict, date_arg, int_arg
from . import bp


def _service() -> ChequeService:
    return ChequeService(get_session_factory(), user_id=current_user_id())


@bp.get("/summary")
def summary():
    breakdown = _service().breakdown()
    return jsonify({status.value: bucket_to_dict(bucket) for status, bucket in breakdown.items()})


@bp.get("/reminders")
def reminders():
    as_of = date_arg("as_of", default=date.today())
    days = int_arg("days", default=0)
    rows = _service().reminders(as_of=as_of, threshold_days=days)
    return jsonify(
        {
            "as_of": as_of.isoformat(),
            "days": days,
            "cheques": [cheque_reminder_to_dict(r) for r in rows],
        }
    )


@bp.post("/<int:cheque_id>/status")
def update_status(cheque_id: int):
    payload = request.get_json(silent=True) or {}
    cheque = _service().update_status(cheque_id, payload.get("status"))
    return jsonify({"id": cheque.id, "status": cheque.status})
