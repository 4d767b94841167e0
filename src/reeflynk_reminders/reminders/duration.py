# reminders/duration.py

from __future__ import annotations

from .models import FrequencyUnit

MS_PER_HOUR = 60 * 60 * 1000
MS_PER_DAY = 24 * MS_PER_HOUR
MS_PER_WEEK = 7 * MS_PER_DAY
# Fixed 30-day month; not calendar-aware.
MS_PER_MONTH = 30 * MS_PER_DAY

_UNIT_MS: dict[FrequencyUnit, int] = {
    FrequencyUnit.HOURS: MS_PER_HOUR,
    FrequencyUnit.DAYS: MS_PER_DAY,
    FrequencyUnit.WEEKS: MS_PER_WEEK,
    FrequencyUnit.MONTHS: MS_PER_MONTH,
}


def to_duration_ms(value: float, unit: str | None) -> int | float:
    """
    Convert a recurrence (value, unit) into a fixed duration in milliseconds.

    Unknown units count as days. The value is not validated: zero or negative
    values are multiplied through as given.
    """
    return value * _UNIT_MS[FrequencyUnit.from_db(unit)]
