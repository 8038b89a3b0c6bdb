from __future__ import annotations

import os
from dataclasses import dataclass
from datetime import date, time
from typing import List, Optional

from .dates import to_calendar_date


@dataclass(frozen=True)
class Settings:
    """
    Application settings loaded from environment variables.

    Env vars:
    - PERSISTENCE_BACKEND: 'memory' (default) or 'sqlite'
    - SQLITE_DB_PATH: path to sqlite db file. Default './data/tasks.db'
    - CORS_ALLOW_ORIGINS: comma-separated list of allowed origins; '*' by default
    - LOG_LEVEL: logging level name. Default 'INFO'
    - DDAY_FIXED_TODAY: optional 'YYYY-MM-DD' that pins the clock's "today"
    - DEFAULT_NOTIFICATION_TIME: 'HH:MM' used when a task omits one. Default '09:00'
    """

    persistence_backend: str
    sqlite_db_path: str
    cors_allow_origins: List[str]
    log_level: str
    fixed_today: Optional[date]
    default_notification_time: time


def _get_env(name: str, default: str) -> str:
    value = os.getenv(name, default)
    if value is None or value == "":
        return default
    return value


def _parse_origins(origins_value: str) -> List[str]:
    """
    Parse CORS origins from env. Supports:
    - '*' to allow all origins
    - Comma-separated list of origins
    """
    value = origins_value.strip()
    if value == "*":
        return ["*"]
    return [o.strip() for o in value.split(",") if o.strip()]


def _parse_time(value: str, default: time) -> time:
    try:
        parsed = time.fromisoformat(value.strip())
    except ValueError:
        return default
    return parsed.replace(second=0, microsecond=0)


# PUBLIC_INTERFACE
def get_settings() -> Settings:
    """Return application settings loaded from environment variables."""
    backend = _get_env("PERSISTENCE_BACKEND", "memory").strip().lower()
    if backend not in {"memory", "sqlite"}:
        # Fallback to memory if unsupported
        backend = "memory"

    sqlite_path = _get_env("SQLITE_DB_PATH", "./data/tasks.db").strip()
    origins = _parse_origins(_get_env("CORS_ALLOW_ORIGINS", "*"))
    log_level = _get_env("LOG_LEVEL", "INFO").strip().upper()

    # An unparseable pinned date is a configuration error and raises InvalidDate
    fixed_raw = os.getenv("DDAY_FIXED_TODAY", "").strip()
    fixed_today = to_calendar_date(fixed_raw) if fixed_raw else None

    default_time = _parse_time(_get_env("DEFAULT_NOTIFICATION_TIME", "09:00"), time(9, 0))

    return Settings(
        persistence_backend=backend,
        sqlite_db_path=sqlite_path,
        cors_allow_origins=origins,
        log_level=log_level,
        fixed_today=fixed_today,
        default_notification_time=default_time,
    )
