"""
Reminder subsystem.

Components:
- models.py: data structures (MaintenanceTask, NotificationLogEntry, DeliveryOutcome, ...)
- duration.py: recurrence (value, unit) -> fixed millisecond duration
- due.py: due-set calculation, suppression filter, grouping by recipient
- dispatch.py: message composition and per-recipient delivery + logging
- engine.py: one full reminder pass and its summary
- scheduler.py: polling loop that runs a pass per tick
- store.py: SQLite-backed task/preference store
"""
