"""Cheques blueprint package."""

from __future__ import annotations

from flask import Blueprint

bp = Blueprint("cheques", __name__, url_prefix="/api/cheques")

from . import routes  # noqa: E402,F401

__all__ = ["bp"]
