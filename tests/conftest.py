# tests/conftest.py

from __future__ import annotations

from pathlib import Path

import pytest

from reeflynk_reminders.config import Settings
from reeflynk_reminders.reminders.store import ReminderStore

# 2023-11-14T22:13:20Z, a fixed reference instant for deterministic runs.
NOW_MS = 1_700_000_000_000


@pytest.fixture()
def settings(tmp_path: Path) -> Settings:
    """
    Settings built directly rather than from the environment,
    to keep unit tests isolated and deterministic.
    """
    return Settings(
        app_name="ReefLynk",
        log_level="DEBUG",
        data_dir=tmp_path,
        db_path=tmp_path / "reminders.sqlite3",
        resend_api_key=None,
        resend_base_url="https://api.resend.test",
        from_email="notifications@reeflynk.test",
        http_timeout_seconds=5.0,
        lookahead_minutes=60,
        suppression_minutes=120,
        scheduler_interval_seconds=0.01,
    )


@pytest.fixture()
def store(settings: Settings) -> ReminderStore:
    """Real SQLite store in tmp_path; its queries are part of what we test."""
    return ReminderStore(settings.db_path)
