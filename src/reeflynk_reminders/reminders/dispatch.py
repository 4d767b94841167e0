# reminders/dispatch.py

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass

from ..core.ports import NotificationSender, TaskRepo
from .models import (
    EMAIL_CHANNEL,
    DeliveryOutcome,
    DispatchReport,
    GroupedTask,
    NotificationLogEntry,
    RecipientResult,
)

logger = logging.getLogger(__name__)


@dataclass(slots=True, frozen=True)
class ReminderMessage:
    subject: str
    body: str


def compose_message(tasks: list[GroupedTask], *, app_name: str = "ReefLynk") -> ReminderMessage:
    """One message per recipient; the subject names a lone task or counts several."""
    if len(tasks) == 1:
        subject = f"{app_name} Reminder: {tasks[0].name}"
    else:
        subject = f"{app_name}: {len(tasks)} maintenance tasks due"

    task_list = "\n".join(f"- {t.name}" for t in tasks)
    body = (
        "Hi there,\n\n"
        "The following maintenance tasks are due:\n\n"
        f"{task_list}\n\n"
        f"Open {app_name} to mark them complete.\n\n"
        f"-- {app_name}"
    )
    return ReminderMessage(subject=subject, body=body)


async def _deliver(
        sender: NotificationSender | None,
        address: str,
        message: ReminderMessage,
) -> DeliveryOutcome:
    if sender is None:
        logger.info(
            "[DRY RUN] Would send to %s: subject=%r\n%s", address, message.subject, message.body
        )
        return DeliveryOutcome.DRY_RUN

    try:
        ok = await sender.send(to=address, subject=message.subject, body=message.body)
    except Exception:
        logger.exception("Failed to send reminder to %s", address)
        return DeliveryOutcome.FAILED

    if not ok:
        logger.error("Failed to send reminder to %s (rejected by provider)", address)
        return DeliveryOutcome.FAILED
    return DeliveryOutcome.SENT


def _record_sent(
        task_repo: TaskRepo,
        address: str,
        tasks: list[GroupedTask],
        now_ms: int,
        channel: str,
) -> int:
    entries = [
        NotificationLogEntry(task_id=t.task_id, user_id=t.user_id, sent_at_ms=now_ms, channel=channel)
        for t in tasks
    ]
    try:
        ok = task_repo.append_log_entries(entries)
    except Exception:
        logger.exception("append_log_entries failed address=%s tasks=%d", address, len(entries))
        return 0

    if not ok:
        logger.error("append_log_entries rejected address=%s tasks=%d", address, len(entries))
        return 0
    return len(entries)


async def dispatch_groups(
        groups: Mapping[str, list[GroupedTask]],
        *,
        sender: NotificationSender | None,
        task_repo: TaskRepo,
        now_ms: int,
        app_name: str = "ReefLynk",
        channel: str = EMAIL_CHANNEL,
) -> DispatchReport:
    """
    Send one message per address and log what was delivered.

    Outcome per address:
    - SENT    -> one log entry per task (sent_at = now_ms)
    - DRY_RUN -> no sender configured; nothing is logged
    - FAILED  -> nothing is logged; remaining addresses are still processed

    DispatchReport.logged_count counts tasks whose log entry was written.
    """
    report = DispatchReport()

    for address, tasks in groups.items():
        if not tasks:
            continue

        message = compose_message(tasks, app_name=app_name)
        outcome = await _deliver(sender, address, message)
        result = RecipientResult(address=address, tasks=list(tasks), outcome=outcome)

        if outcome == DeliveryOutcome.SENT:
            result.logged = _record_sent(task_repo, address, tasks, now_ms, channel)
            logger.info("Reminder sent to %s tasks=%d logged=%d", address, len(tasks), result.logged)

        report.results.append(result)

    return report
