# reminders/models.py

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum

EMAIL_CHANNEL = "email"

# Lowest possible due timestamp: "never completed" tasks are due right away.
EPOCH_START_MS = 0


class FrequencyUnit(StrEnum):
    """
    Recurrence unit of a maintenance task.

    Unrecognized strings from storage are treated as DAYS.
    """

    HOURS = "hours"
    DAYS = "days"
    WEEKS = "weeks"
    MONTHS = "months"

    @classmethod
    def from_db(cls, raw: str | None) -> FrequencyUnit:
        if not raw:
            return cls.DAYS
        try:
            return cls(raw)
        except ValueError:
            return cls.DAYS


class DeliveryOutcome(StrEnum):
    """
    Per-recipient result of a dispatch attempt.

    Only SENT is followed by notification log writes.
    """

    SENT = "sent"
    DRY_RUN = "dry_run"
    FAILED = "failed"


@dataclass(slots=True, frozen=True)
class MaintenanceTask:
    id: int
    user_id: str
    name: str
    frequency_value: float
    frequency_unit: str
    is_active: bool = True


@dataclass(slots=True, frozen=True)
class CompletionRecord:
    task_id: int
    completed_at_ms: int


@dataclass(slots=True, frozen=True)
class NotificationLogEntry:
    task_id: int
    user_id: str
    sent_at_ms: int
    channel: str = EMAIL_CHANNEL


@dataclass(slots=True, frozen=True)
class RecipientPreference:
    user_id: str
    email_address: str
    email_enabled: bool = True


@dataclass(slots=True, frozen=True)
class DueTask:
    """A task that fell inside the lookahead horizon during one run."""

    task: MaintenanceTask
    due_at_ms: int | float


@dataclass(slots=True, frozen=True)
class GroupedTask:
    task_id: int
    name: str
    user_id: str


@dataclass(slots=True)
class RecipientResult:
    address: str
    tasks: list[GroupedTask]
    outcome: DeliveryOutcome
    logged: int = 0


@dataclass(slots=True)
class DispatchReport:
    results: list[RecipientResult] = field(default_factory=list)

    @property
    def logged_count(self) -> int:
        return sum(r.logged for r in self.results)
