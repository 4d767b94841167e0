# src/reeflynk_reminders/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures local (gitignored) directories exist,
- wires the SQLite store and the e-mail sender into an AppContext.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from ..config import Settings, get_settings
from ..core.ports import NotificationSender
from ..mail.resend_sender import ResendSender
from ..reminders.store import ReminderStore

logger = logging.getLogger(__name__)


@dataclass
class AppContext:
    settings: Any
    store: ReminderStore
    sender: NotificationSender | None

    def run_kwargs(self) -> dict[str, Any]:
        """Keyword arguments for run_reminders() derived from settings."""
        return {
            "lookahead_ms": self.settings.lookahead_ms,
            "suppression_window_ms": self.settings.suppression_window_ms,
            "app_name": self.settings.app_name,
        }


def _ensure_local_dirs(settings: Settings) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    settings.db_path.parent.mkdir(parents=True, exist_ok=True)


def build_sender(settings: Settings) -> NotificationSender | None:
    """ResendSender when an API key is configured; None selects dry-run delivery."""
    if not settings.resend_api_key:
        logger.warning("No Resend API key configured: reminders run in DRY RUN mode")
        return None
    return ResendSender(
        settings.resend_api_key,
        from_email=settings.from_email,
        base_url=settings.resend_base_url,
        timeout_seconds=settings.http_timeout_seconds,
    )


def create_app_context(*, settings: Settings | None = None, dry_run: bool = False) -> AppContext:
    """
    Create AppContext from the provided settings.

    If settings is None, falls back to get_settings().
    dry_run=True forces the dry-run sender even when an API key is set.
    """
    if settings is None:
        settings = get_settings()

    _ensure_local_dirs(settings)

    return AppContext(
        settings=settings,
        store=ReminderStore(settings.db_path),
        sender=None if dry_run else build_sender(settings),
    )
