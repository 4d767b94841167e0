# src/reeflynk_reminders/config.py

"""Centralized settings loaded from environment variables (+ optional .env).

Design goals:
- One Settings object for the whole app.
- No secrets required at import time (no API key => dry-run delivery).
- Unprefixed RESEND_API_KEY / FROM_EMAIL are accepted for hosted deployments.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

ENV_PREFIX = "REEF"

MS_PER_MINUTE = 60 * 1000


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


def _load_dotenv_if_available() -> None:
    """Load .env locally if python-dotenv is installed. Safe no-op otherwise."""
    try:
        from dotenv import load_dotenv  # type: ignore
    except Exception:
        return
    load_dotenv(override=False)


_load_dotenv_if_available()


def _env(name: str, default: str = "") -> str:
    v = os.getenv(name)
    return default if v is None else v


def _first_env(*names: str, default: str | None = None) -> str | None:
    for n in names:
        v = os.getenv(n)
        if v is not None and v.strip() != "":
            return v
    return default


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _env_path(name: str, default: Path) -> Path:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return Path(raw).expanduser()


@dataclass(frozen=True, slots=True)
class Settings:
    # ---- App / logging ----
    app_name: str
    log_level: str

    # ---- Local data paths (ignored by git) ----
    data_dir: Path
    db_path: Path

    # ---- E-mail delivery (Resend) ----
    resend_api_key: str | None
    resend_base_url: str
    from_email: str
    http_timeout_seconds: float

    # ---- Reminder tuning ----
    lookahead_minutes: int
    suppression_minutes: int
    scheduler_interval_seconds: float

    @property
    def lookahead_ms(self) -> int:
        return self.lookahead_minutes * MS_PER_MINUTE

    @property
    def suppression_window_ms(self) -> int:
        return self.suppression_minutes * MS_PER_MINUTE

    @staticmethod
    def from_env() -> "Settings":
        app_name = _env(_k("APP_NAME"), "ReefLynk")
        log_level = _env(_k("LOG_LEVEL"), "INFO")

        data_dir = _env_path(_k("DATA_DIR"), Path(".local/reeflynk"))
        db_path = _env_path(_k("DB_PATH"), data_dir / "reminders.sqlite3")

        resend_api_key = _first_env(_k("RESEND_API_KEY"), "RESEND_API_KEY", default=None)
        resend_base_url = _env(_k("RESEND_BASE_URL"), "https://api.resend.com").rstrip("/")
        from_email = (
            _first_env(_k("FROM_EMAIL"), "FROM_EMAIL", default="notifications@reeflynk.com")
            or "notifications@reeflynk.com"
        ).strip()
        http_timeout_seconds = _env_float(_k("HTTP_TIMEOUT_SECONDS"), 10.0)

        lookahead_minutes = _env_int(_k("LOOKAHEAD_MINUTES"), 60)
        suppression_minutes = _env_int(_k("SUPPRESSION_MINUTES"), 120)
        scheduler_interval_seconds = _env_float(_k("SCHEDULER_INTERVAL_SECONDS"), 300.0)

        return Settings(
            app_name=app_name,
            log_level=log_level,
            data_dir=data_dir,
            db_path=db_path,
            resend_api_key=resend_api_key,
            resend_base_url=resend_base_url,
            from_email=from_email,
            http_timeout_seconds=http_timeout_seconds,
            lookahead_minutes=lookahead_minutes,
            suppression_minutes=suppression_minutes,
            scheduler_interval_seconds=scheduler_interval_seconds,
        )


_SETTINGS: Settings | None = None


def get_settings() -> Settings:
    global _SETTINGS
    if _SETTINGS is None:
        _SETTINGS = Settings.from_env()
    return _SETTINGS
