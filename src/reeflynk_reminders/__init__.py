"""ReefLynk maintenance reminders: due-date engine, SQLite store and e-mail delivery."""

__version__ = "0.1.0"
