"""Ledgerbook application factory."""

from __future__ import annotations

from importlib import import_module
from typing import Iterable

from flask import Flask, jsonify

from . import cli as _cli
from .config import BaseConfig, DevConfig, TestConfig
from .exceptions import HolderNotFound, ValidationError

_CONFIG_MAP = {
    "development": DevConfig,
    "testing": TestConfig,
    "default": BaseConfig,
}


def _resolve_config(name: str | None) -> type[BaseConfig]:
    """Return the config class for the provided environment name."""

    if not name:
        return BaseConfig
    return _CONFIG_MAP.get(name.lower(), BaseConfig)


def _blueprint_paths() -> Iterable[str]:
    yield "ledgerbook.blueprints.statements"
    yield "ledgerbook.blueprints.cheques"


def create_app(config_name: str | None = None, *, config: BaseConfig | None = None) -> Flask:
    """Create and configure the Flask application instance."""

    app = Flask(__name__, instance_relative_config=True)
    config_obj = config or _resolve_config(config_name)()
    app.config.from_object(config_obj)
    app.config["LEDGERBOOK_CONFIG"] = config_obj

    from .logging_config import setup_logging

    setup_logging(config_obj)

    # Import init_db lazily so importing the package does not build mappers.
    from .extensions import init_db

    init_db(app, config_obj)
    _register_blueprints(app)
    _register_error_handlers(app)
    _cli.init_app(app)
    return app


def _register_blueprints(app: Flask) -> None:
    """Import and register all blueprints declared in `_blueprint_paths`."""

    for dotted_path in _blueprint_paths():
        module = import_module(dotted_path)
        blueprint = getattr(module, "bp")
        app.register_blueprint(blueprint)


def _register_error_handlers(app: Flask) -> None:
    @app.errorhandler(ValidationError)
    def _validation_error(exc: ValidationError):
        details = [
            item if isinstance(item, (dict, str, int, float)) or item is None else str(item)
            for item in exc.rejected
        ]
        return jsonify({"error": str(exc), "details": details}), 400

    @app.errorhandler(HolderNotFound)
    def _not_found(exc: HolderNotFound):
        return jsonify({"error": str(exc), "kind": exc.kind, "id": exc.holder_id}), 404


__all__ = ["BaseConfig", "DevConfig", "TestConfig", "create_app"]
