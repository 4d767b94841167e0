# reminders/due.py

from __future__ import annotations

"""
Pure reminder selection: no I/O happens here.

Pipeline pieces, applied in this order by the engine:
- compute_due: which active tasks fall inside the lookahead horizon
- filter_recently_notified: drop tasks logged within the suppression window
- group_by_recipient: bucket the remaining tasks by destination address
"""

from collections.abc import Iterable, Mapping

from .duration import MS_PER_HOUR, to_duration_ms
from .models import (
    EMAIL_CHANNEL,
    EPOCH_START_MS,
    DueTask,
    GroupedTask,
    MaintenanceTask,
    NotificationLogEntry,
)

DEFAULT_LOOKAHEAD_MS = MS_PER_HOUR
DEFAULT_SUPPRESSION_WINDOW_MS = 2 * MS_PER_HOUR


def due_at_ms(task: MaintenanceTask, last_completed_ms: int | None) -> int | float:
    """Next due instant; a task never completed is due at epoch start."""
    if last_completed_ms is None:
        return EPOCH_START_MS
    return last_completed_ms + to_duration_ms(task.frequency_value, task.frequency_unit)


def compute_due(
        tasks: Iterable[MaintenanceTask],
        latest_completion_by_task: Mapping[int, int],
        now_ms: int,
        lookahead_ms: int = DEFAULT_LOOKAHEAD_MS,
) -> list[DueTask]:
    """
    Return active tasks with due_at <= now + lookahead, sorted by task id.

    Overdue tasks are included once, however far in the past they fell due.
    """
    horizon = now_ms + lookahead_ms
    seen: set[int] = set()
    out: list[DueTask] = []

    for task in tasks:
        if not task.is_active or task.id in seen:
            continue
        seen.add(task.id)

        at = due_at_ms(task, latest_completion_by_task.get(task.id))
        if at <= horizon:
            out.append(DueTask(task=task, due_at_ms=at))

    out.sort(key=lambda d: d.task.id)
    return out


def filter_recently_notified(
        due: Iterable[DueTask],
        log_entries: Iterable[NotificationLogEntry],
        now_ms: int,
        suppression_window_ms: int = DEFAULT_SUPPRESSION_WINDOW_MS,
        *,
        channel: str = EMAIL_CHANNEL,
) -> list[DueTask]:
    since = now_ms - suppression_window_ms
    suppressed = {
        e.task_id
        for e in log_entries
        if e.channel == channel and e.sent_at_ms >= since
    }
    return [d for d in due if d.task.id not in suppressed]


def group_by_recipient(
        due: Iterable[DueTask],
        address_by_user: Mapping[str, str],
) -> dict[str, list[GroupedTask]]:
    """
    Bucket due tasks by the owner's address.

    Tasks whose owner has no enabled address are dropped. The key is the raw
    address, so two users sharing one address end up in the same group.
    """
    groups: dict[str, list[GroupedTask]] = {}
    placed: set[int] = set()

    for d in due:
        task = d.task
        address = address_by_user.get(task.user_id)
        if not address or task.id in placed:
            continue
        placed.add(task.id)
        groups.setdefault(address, []).append(
            GroupedTask(task_id=task.id, name=task.name, user_id=task.user_id)
        )

    return groups
