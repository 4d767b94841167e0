# reminders/scheduler.py

from __future__ import annotations

"""
Reminder scheduler.

A small polling loop that runs one reminder pass per tick. Overlapping
passes are not prevented here; the notification log's suppression window is
the only guard against re-sending within a short period.
"""

import asyncio
import logging
from typing import Any

from ..core.ports import NotificationSender, PreferenceRepo, TaskRepo
from .engine import run_reminders

logger = logging.getLogger(__name__)


async def run_reminder_scheduler(
        task_repo: TaskRepo,
        preference_repo: PreferenceRepo,
        sender: NotificationSender | None,
        *,
        interval_seconds: float = 300.0,
        **run_kwargs: Any,
) -> None:
    """
    Every interval_seconds:
    - run one reminder pass (run_reminders)
    - log its summary, or log the failure and keep going

    To stop the scheduler, cancel the coroutine/task.
    """
    sleep_s = max(0.5, float(interval_seconds))

    while True:
        try:
            summary = await run_reminders(task_repo, preference_repo, sender, **run_kwargs)
            logger.info("Reminder tick: %s", summary.message)
        except Exception:
            logger.exception("Reminder tick failed")

        await asyncio.sleep(sleep_s)
