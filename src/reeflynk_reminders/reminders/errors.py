# reminders/errors.py

from __future__ import annotations


class ReminderError(Exception):
    """Base class for errors raised by the reminder engine."""


class StoreError(ReminderError):
    """A store read or write failed; fatal for the current run."""
