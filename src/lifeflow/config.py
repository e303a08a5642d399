"""Application configuration objects and helpers."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

from dotenv import load_dotenv

load_dotenv()


def _env_bool(name: str, default: bool = False) -> bool:
    """Interpret environment variable values as booleans."""

    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _env_int(name: str, default: int) -> int:
    """Read an integer environment variable, failing loudly on junk."""

    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    try:
        return int(value.strip())
    except ValueError as exc:
        raise ValueError(f"{name} must be an integer, got {value!r}") from exc


class BaseConfig:
    """Base configuration shared across environments."""

    APP_NAME = "LifeFlow"
    DB_FILENAME = "lifeflow.db"
    DEFAULT_ROLLOVER_HOUR = 4
    DEFAULT_WEEK_START_DAY = 1  # Monday (Sunday = 0)
    DEFAULT_SCORE_WINDOW_DAYS = 30

    def __init__(self) -> None:
        self.DATA_DIR = self._resolve_data_dir()
        self.DEV_MODE = _env_bool("LIFEFLOW_DEV_MODE", default=True)
        self.DATABASE_URL = os.getenv("LIFEFLOW_DATABASE_URL", self._build_sqlite_url())
        self.ROLLOVER_HOUR = _env_int("LIFEFLOW_ROLLOVER_HOUR", self.DEFAULT_ROLLOVER_HOUR)
        self.WEEK_START_DAY = _env_int("LIFEFLOW_WEEK_START_DAY", self.DEFAULT_WEEK_START_DAY)
        self.SCORE_WINDOW_DAYS = _env_int(
            "LIFEFLOW_SCORE_WINDOW_DAYS", self.DEFAULT_SCORE_WINDOW_DAYS
        )
        self._validate_engine_settings()

    def _validate_engine_settings(self) -> None:
        """Reject day-boundary settings the habit engine cannot honour."""

        if not 0 <= self.ROLLOVER_HOUR <= 23:
            raise ValueError(f"LIFEFLOW_ROLLOVER_HOUR must be 0-23, got {self.ROLLOVER_HOUR}")
        if not 0 <= self.WEEK_START_DAY <= 6:
            raise ValueError(f"LIFEFLOW_WEEK_START_DAY must be 0-6, got {self.WEEK_START_DAY}")
        if self.SCORE_WINDOW_DAYS < 1:
            raise ValueError(
                f"LIFEFLOW_SCORE_WINDOW_DAYS must be at least 1, got {self.SCORE_WINDOW_DAYS}"
            )

    def _resolve_data_dir(self) -> Path:
        """Return the directory where the SQLite file and logs live."""

        data_root = os.getenv("LIFEFLOW_DATA_DIR", "instance")
        base_path = Path(data_root).expanduser()
        try:
            path = base_path.resolve()
            path.mkdir(parents=True, exist_ok=True)
            return path
        except PermissionError:
            # Protected install locations fall back to per-user storage.
            fallback_path = Path.home() / ".local" / "share" / self.APP_NAME.lower()
            fallback_path.mkdir(parents=True, exist_ok=True)
            return fallback_path.resolve()

    def _build_sqlite_url(self) -> str:
        """Construct the default SQLite URL inside the data directory."""

        db_path = self.DATA_DIR / self.DB_FILENAME
        return f"sqlite:///{db_path}"

    def sqlalchemy_engine_options(self) -> dict[str, Any]:
        """Expose engine kwargs for SQLModel to consume."""

        connect_args: dict[str, Any] = {}
        if self.DATABASE_URL.startswith("sqlite"):
            connect_args["check_same_thread"] = False
        return {"connect_args": connect_args}
