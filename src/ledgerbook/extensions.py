"""Database and per-user cache wiring for the Flask app."""

from __future__ import annotations

from flask import Flask, current_app, request

from .config import BaseConfig
from .exceptions import ValidationError
from .infra.database import SessionFactory, bootstrap_database
from .services.cache import SummaryCache

EXTENSION_KEY = "ledgerbook"


def init_db(app: Flask, config: BaseConfig) -> None:
    """Create the engine and schema and keep the session factory on the app."""

    engine, session_factory = bootstrap_database(config)
    app.extensions[EXTENSION_KEY] = {
        "engine": engine,
        "session_factory": session_factory,
        "caches": SummaryCache(config.SUMMARY_CACHE_USERS),
    }


def get_session_factory() -> SessionFactory:
    try:
        return current_app.extensions[EXTENSION_KEY]["session_factory"]
    except KeyError:  # pragma: no cover - exercised in integration tests
        raise RuntimeError("Database engine not initialized") from None


def get_summary_cache(user_id: int) -> SummaryCache:
    """Return the summary cache for ``user_id``; users never share entries.

    Per-user caches are themselves held in a bounded cache, so only the
    ``SUMMARY_CACHE_USERS`` most recently created users keep cached summaries.
    """

    caches: SummaryCache[SummaryCache] = current_app.extensions[EXTENSION_KEY]["caches"]
    cache = caches.get(user_id)
    if cache is None:
        config: BaseConfig = current_app.config["LEDGERBOOK_CONFIG"]
        cache = caches.put(user_id, SummaryCache(config.SUMMARY_CACHE_SIZE))
    return cache


def current_user_id() -> int:
    """Acting user from the ``X-User-Id`` header, else the configured default."""

    raw = request.headers.get("X-User-Id", "").strip()
    if raw:
        try:
            return int(raw)
        except ValueError:
            raise ValidationError("X-User-Id must be an integer", rejected=[raw]) from None
    config: BaseConfig = current_app.config["LEDGERBOOK_CONFIG"]
    return config.DEFAULT_USER_ID
