# tests/fakes.py

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field

from reeflynk_reminders.reminders.errors import StoreError
from reeflynk_reminders.reminders.models import (
    CompletionRecord,
    MaintenanceTask,
    NotificationLogEntry,
    RecipientPreference,
)


@dataclass(slots=True)
class SentEmail:
    to: str
    subject: str
    body: str


@dataclass(slots=True)
class FakeSender:
    """
    Recording NotificationSender.

    - reject: addresses for which send() returns False
    - explode: addresses for which send() raises
    """

    sent: list[SentEmail] = field(default_factory=list)
    reject: set[str] = field(default_factory=set)
    explode: set[str] = field(default_factory=set)

    async def send(self, *, to: str, subject: str, body: str) -> bool:
        if to in self.explode:
            raise ConnectionError(f"network down for {to}")
        if to in self.reject:
            return False
        self.sent.append(SentEmail(to=to, subject=subject, body=body))
        return True


class FakeReminderRepo:
    """
    In-memory TaskRepo + PreferenceRepo used for engine unit tests.

    This avoids SQLite and makes tests purely about reminder logic:
    due calculation, suppression, grouping and log writes.
    """

    def __init__(
        self,
        *,
        tasks: list[MaintenanceTask] | None = None,
        completions: list[CompletionRecord] | None = None,
        log: list[NotificationLogEntry] | None = None,
        prefs: list[RecipientPreference] | None = None,
    ) -> None:
        self.tasks = list(tasks or [])
        self.completions = list(completions or [])
        self.log = list(log or [])
        self.prefs = list(prefs or [])
        self.fail_reads = False
        self.fail_appends = False

    def _check(self) -> None:
        if self.fail_reads:
            raise StoreError("task store unavailable")

    def list_enabled_recipients(self) -> list[RecipientPreference]:
        self._check()
        return [p for p in self.prefs if p.email_enabled]

    def list_active_tasks(self, user_ids: Iterable[str]) -> list[MaintenanceTask]:
        self._check()
        wanted = set(user_ids)
        return [t for t in self.tasks if t.is_active and t.user_id in wanted]

    def latest_completion_per_task(self, task_ids: Iterable[int]) -> dict[int, int]:
        self._check()
        wanted = set(task_ids)
        out: dict[int, int] = {}
        for c in self.completions:
            if c.task_id in wanted:
                out[c.task_id] = max(out.get(c.task_id, c.completed_at_ms), c.completed_at_ms)
        return out

    def recent_log_entries(
        self, task_ids: Iterable[int], *, channel: str, since_ms: int
    ) -> list[NotificationLogEntry]:
        self._check()
        wanted = set(task_ids)
        return [
            e for e in self.log
            if e.task_id in wanted and e.channel == channel and e.sent_at_ms >= since_ms
        ]

    def append_log_entries(self, entries: Iterable[NotificationLogEntry]) -> bool:
        if self.fail_appends:
            return False
        self.log.extend(entries)
        return True
