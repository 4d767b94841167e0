# tests/test_scheduler.py

from __future__ import annotations

import asyncio

import pytest

from reeflynk_reminders.reminders.models import MaintenanceTask, RecipientPreference
from reeflynk_reminders.reminders.scheduler import run_reminder_scheduler

from .fakes import FakeReminderRepo, FakeSender


@pytest.mark.asyncio
async def test_scheduler_sends_due_task_once_across_ticks() -> None:
    repo = FakeReminderRepo(
        tasks=[MaintenanceTask(id=1, user_id="u1", name="Dose", frequency_value=1, frequency_unit="days")],
        prefs=[RecipientPreference("u1", "u1@example.com")],
    )
    sender = FakeSender()

    runner = asyncio.create_task(
        run_reminder_scheduler(repo, repo, sender, interval_seconds=0.01)
    )

    # Interval is clamped to 0.5s, so this window covers several ticks.
    await asyncio.sleep(1.2)
    runner.cancel()
    with pytest.raises(asyncio.CancelledError):
        await runner

    assert len(sender.sent) == 1
    assert sender.sent[0].to == "u1@example.com"
    assert [e.task_id for e in repo.log] == [1]


@pytest.mark.asyncio
async def test_scheduler_survives_failing_tick() -> None:
    repo = FakeReminderRepo(prefs=[RecipientPreference("u1", "u1@example.com")])
    repo.fail_reads = True

    runner = asyncio.create_task(run_reminder_scheduler(repo, repo, FakeSender(), interval_seconds=0.01))
    await asyncio.sleep(0.05)

    assert not runner.done()
    runner.cancel()
    with pytest.raises(asyncio.CancelledError):
        await runner
