# src/reeflynk_reminders/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the reminder engine.

The engine depends on Protocols instead of concrete implementations.
This keeps storage and e-mail providers swappable and makes testing easier.
"""

from typing import Awaitable, Iterable, Mapping, Protocol

from ..reminders.models import MaintenanceTask, NotificationLogEntry, RecipientPreference


class TaskRepo(Protocol):
    def list_active_tasks(self, user_ids: Iterable[str]) -> list[MaintenanceTask]: ...

    def latest_completion_per_task(self, task_ids: Iterable[int]) -> Mapping[int, int]: ...

    def recent_log_entries(
            self,
            task_ids: Iterable[int],
            *,
            channel: str,
            since_ms: int,
    ) -> list[NotificationLogEntry]: ...

    def append_log_entries(self, entries: Iterable[NotificationLogEntry]) -> bool: ...


class PreferenceRepo(Protocol):
    def list_enabled_recipients(self) -> list[RecipientPreference]: ...


class NotificationSender(Protocol):
    """
    Outbound e-mail port.

    Returns True when the provider accepted the message. Implementations may
    also raise on transport errors; the dispatcher treats both as a failure.
    """

    def send(self, *, to: str, subject: str, body: str) -> Awaitable[bool]: ...
