# tests/test_dispatch.py

from __future__ import annotations

import pytest

from reeflynk_reminders.reminders.dispatch import compose_message, dispatch_groups
from reeflynk_reminders.reminders.models import DeliveryOutcome, GroupedTask

from .conftest import NOW_MS
from .fakes import FakeReminderRepo, FakeSender


def _g(task_id: int, name: str, user: str = "u1") -> GroupedTask:
    return GroupedTask(task_id=task_id, name=name, user_id=user)


def test_single_task_subject_names_the_task() -> None:
    msg = compose_message([_g(1, "Water change")], app_name="ReefLynk")
    assert msg.subject == "ReefLynk Reminder: Water change"
    assert "- Water change" in msg.body


def test_multi_task_subject_states_the_count() -> None:
    msg = compose_message([_g(1, "Water change"), _g(2, "Clean skimmer")], app_name="ReefLynk")
    assert msg.subject == "ReefLynk: 2 maintenance tasks due"
    assert "- Water change\n- Clean skimmer" in msg.body
    assert "Open ReefLynk to mark them complete." in msg.body


@pytest.mark.asyncio
async def test_sent_outcome_logs_one_entry_per_task() -> None:
    repo = FakeReminderRepo()
    sender = FakeSender()
    groups = {"a@example.com": [_g(4, "Dose"), _g(5, "Test pH")]}

    report = await dispatch_groups(groups, sender=sender, task_repo=repo, now_ms=NOW_MS)

    assert report.logged_count == 2
    assert report.results[0].outcome == DeliveryOutcome.SENT
    assert len(sender.sent) == 1
    assert {(e.task_id, e.sent_at_ms, e.channel) for e in repo.log} == {
        (4, NOW_MS, "email"),
        (5, NOW_MS, "email"),
    }


@pytest.mark.asyncio
async def test_dry_run_sends_nothing_and_logs_nothing() -> None:
    repo = FakeReminderRepo()
    groups = {"a@example.com": [_g(1, "Dose")]}

    report = await dispatch_groups(groups, sender=None, task_repo=repo, now_ms=NOW_MS)

    assert report.results[0].outcome == DeliveryOutcome.DRY_RUN
    assert report.logged_count == 0
    assert repo.log == []


@pytest.mark.asyncio
async def test_failed_recipient_does_not_stop_others() -> None:
    repo = FakeReminderRepo()
    sender = FakeSender(reject={"a@example.com"}, explode={"b@example.com"})
    groups = {
        "a@example.com": [_g(1, "Dose", "a")],
        "b@example.com": [_g(2, "Dose", "b")],
        "c@example.com": [_g(3, "Dose", "c")],
    }

    report = await dispatch_groups(groups, sender=sender, task_repo=repo, now_ms=NOW_MS)

    outcomes = {r.address: r.outcome for r in report.results}
    assert outcomes == {
        "a@example.com": DeliveryOutcome.FAILED,
        "b@example.com": DeliveryOutcome.FAILED,
        "c@example.com": DeliveryOutcome.SENT,
    }
    assert [e.task_id for e in repo.log] == [3]
    assert report.logged_count == 1


@pytest.mark.asyncio
async def test_rejected_log_append_is_not_counted() -> None:
    repo = FakeReminderRepo()
    repo.fail_appends = True
    sender = FakeSender()

    report = await dispatch_groups(
        {"a@example.com": [_g(1, "Dose")]}, sender=sender, task_repo=repo, now_ms=NOW_MS
    )

    assert len(sender.sent) == 1
    assert report.results[0].outcome == DeliveryOutcome.SENT
    assert report.logged_count == 0
