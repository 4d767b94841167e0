# reminders/engine.py

from __future__ import annotations

"""
Reminder run pipeline.

One pass:
- snapshot recipients, active tasks, latest completions and recent log entries
- compute the due set, drop recently notified tasks, group by address
- dispatch one message per address and log what was delivered

Store read failures propagate out of run_reminders(); handle_invocation()
turns them into an error payload for the invoking boundary.
"""

import logging
import time
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any

from ..core.ports import NotificationSender, PreferenceRepo, TaskRepo
from .dispatch import dispatch_groups
from .due import (
    DEFAULT_LOOKAHEAD_MS,
    DEFAULT_SUPPRESSION_WINDOW_MS,
    compute_due,
    filter_recently_notified,
    group_by_recipient,
)
from .models import EMAIL_CHANNEL, RecipientPreference, RecipientResult

logger = logging.getLogger(__name__)


class RunStatus(StrEnum):
    NO_RECIPIENTS = "no_recipients"
    NO_ACTIVE_TASKS = "no_active_tasks"
    NOTHING_DUE = "nothing_due"
    SENT = "sent"
    ERROR = "error"


@dataclass(slots=True)
class RunSummary:
    status: RunStatus
    message: str
    sent_count: int = 0
    results: list[RecipientResult] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.status != RunStatus.ERROR

    @property
    def status_code(self) -> int:
        return 200 if self.ok else 500

    def to_payload(self) -> dict[str, Any]:
        if self.ok:
            return {"message": self.message}
        return {"error": self.message}


def now_ms() -> int:
    return int(time.time() * 1000)


def address_by_user(prefs: list[RecipientPreference]) -> dict[str, str]:
    """First enabled, non-empty address per user wins."""
    out: dict[str, str] = {}
    for p in prefs:
        if not p.email_enabled:
            continue
        address = (p.email_address or "").strip()
        if address and p.user_id not in out:
            out[p.user_id] = address
    return out


async def run_reminders(
        task_repo: TaskRepo,
        preference_repo: PreferenceRepo,
        sender: NotificationSender | None,
        *,
        now: int | None = None,
        lookahead_ms: int = DEFAULT_LOOKAHEAD_MS,
        suppression_window_ms: int = DEFAULT_SUPPRESSION_WINDOW_MS,
        app_name: str = "ReefLynk",
        channel: str = EMAIL_CHANNEL,
) -> RunSummary:
    """
    Execute one reminder pass and return its summary.

    sender=None selects the dry-run path: messages are composed and logged
    to the application log, but no notification log entries are written.
    """
    ts = now_ms() if now is None else int(now)

    emails = address_by_user(preference_repo.list_enabled_recipients())
    if not emails:
        logger.info("No users with email enabled")
        return RunSummary(status=RunStatus.NO_RECIPIENTS, message="No users with email enabled")

    tasks = task_repo.list_active_tasks(list(emails))
    if not tasks:
        logger.info("No active tasks for %d recipient(s)", len(emails))
        return RunSummary(status=RunStatus.NO_ACTIVE_TASKS, message="No active tasks")

    task_ids = [t.id for t in tasks]
    latest = task_repo.latest_completion_per_task(task_ids)
    recent_logs = task_repo.recent_log_entries(
        task_ids,
        channel=channel,
        since_ms=ts - suppression_window_ms,
    )

    due = compute_due(tasks, latest, ts, lookahead_ms)
    fresh = filter_recently_notified(due, recent_logs, ts, suppression_window_ms, channel=channel)
    groups = group_by_recipient(fresh, emails)

    logger.debug(
        "Reminder pass tasks=%d due=%d after_dedup=%d recipients=%d",
        len(tasks),
        len(due),
        len(fresh),
        len(groups),
    )

    if not groups:
        return RunSummary(status=RunStatus.NOTHING_DUE, message="No tasks due")

    report = await dispatch_groups(
        groups,
        sender=sender,
        task_repo=task_repo,
        now_ms=ts,
        app_name=app_name,
        channel=channel,
    )
    sent = report.logged_count
    logger.info("Reminder pass done: %d notification(s) logged for %d recipient(s)", sent, len(groups))

    return RunSummary(
        status=RunStatus.SENT,
        message=f"Sent {sent} email notification(s)",
        sent_count=sent,
        results=report.results,
    )


async def handle_invocation(
        task_repo: TaskRepo,
        preference_repo: PreferenceRepo,
        sender: NotificationSender | None,
        **kwargs: Any,
) -> tuple[dict[str, Any], int]:
    """Boundary wrapper: (payload, http_status) for one scheduled invocation."""
    try:
        summary = await run_reminders(task_repo, preference_repo, sender, **kwargs)
    except Exception as e:
        logger.exception("Reminder run failed")
        summary = RunSummary(status=RunStatus.ERROR, message=str(e) or e.__class__.__name__)
    return summary.to_payload(), summary.status_code
