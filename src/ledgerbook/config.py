"""Application configuration objects and helpers."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

from dotenv import load_dotenv
from sqlalchemy.pool import StaticPool

load_dotenv()


def _env_bool(name: str, default: bool = False) -> bool:
    """Interpret environment variable values as booleans."""

    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _env_int(name: str, default: int) -> int:
    """Interpret environment variable values as integers, falling back on junk."""

    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    try:
        return int(value)
    except ValueError:
        return default


class BaseConfig:
    """Base configuration shared across environments."""

    APP_NAME = "Ledgerbook"
    DB_FILENAME = "ledgerbook.db"
    EXPORT_DIRNAME = "exports"
    TESTING = False
    DEBUG = False

    def __init__(self) -> None:
        self.SECRET_KEY = os.getenv("LEDGERBOOK_SECRET_KEY", "replace-me")
        self.DEV_MODE = _env_bool("LEDGERBOOK_DEV_MODE", default=True)
        self.DATA_DIR = self._resolve_data_dir()
        self.DATABASE_URL = os.getenv("LEDGERBOOK_DATABASE_URL", self._build_sqlite_url())
        self.SUMMARY_CACHE_SIZE = max(1, _env_int("LEDGERBOOK_SUMMARY_CACHE_SIZE", 10))
        self.SUMMARY_CACHE_USERS = max(1, _env_int("LEDGERBOOK_SUMMARY_CACHE_USERS", 100))
        self.DEFAULT_USER_ID = _env_int("LEDGERBOOK_DEFAULT_USER_ID", 1)
        self.CURRENCY = os.getenv("LEDGERBOOK_CURRENCY", "INR").strip().upper()[:3] or "INR"
        if not self.DEV_MODE and self.SECRET_KEY == "replace-me":
            raise ValueError("LEDGERBOOK_SECRET_KEY must be set in non-dev mode.")

    def _resolve_data_dir(self) -> Path:
        """Return the directory where the SQLite file, logs and exports live."""

        data_root = os.getenv("LEDGERBOOK_DATA_DIR", "instance")
        path = Path(data_root).expanduser().resolve()
        path.mkdir(parents=True, exist_ok=True)
        return path

    def _build_sqlite_url(self) -> str:
        db_path = self.DATA_DIR / self.DB_FILENAME
        return f"sqlite:///{db_path}"

    @property
    def export_dir(self) -> Path:
        return self.DATA_DIR / self.EXPORT_DIRNAME

    def sqlalchemy_engine_options(self) -> dict[str, Any]:
        """Expose engine kwargs for SQLModel to consume."""

        if self.DATABASE_URL.startswith("sqlite"):
            return {"connect_args": {"check_same_thread": False}}
        return {}


class DevConfig(BaseConfig):
    """Development configuration using local SQLite."""

    DEBUG = True


class TestConfig(BaseConfig):
    """In-memory database shared across connections for test runs."""

    TESTING = True

    def __init__(self) -> None:
        super().__init__()
        self.DATABASE_URL = "sqlite://"

    def sqlalchemy_engine_options(self) -> dict[str, Any]:
        return {"connect_args": {"check_same_thread": False}, "poolclass": StaticPool}
