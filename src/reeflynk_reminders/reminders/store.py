# reminders/store.py

from __future__ import annotations

import contextlib
import logging
import sqlite3
import time
from collections.abc import Iterable, Iterator
from pathlib import Path

from .errors import StoreError
from .models import (
    EMAIL_CHANNEL,
    MaintenanceTask,
    NotificationLogEntry,
    RecipientPreference,
)

logger = logging.getLogger(__name__)


def _now_ms() -> int:
    return int(time.time() * 1000)


class ReminderStore:
    """
    SQLite store for maintenance tasks, completions, the notification log and
    e-mail preferences. Implements both TaskRepo and PreferenceRepo.

    The schema is intentionally simple and migration-safe:
    - create tables if missing
    - use PRAGMA table_info to detect missing columns
    - add columns with ALTER TABLE only when needed

    Read failures are raised as StoreError; the notification log is
    append-only (nothing here updates or deletes log rows).

    Thread-safety:
    - each method opens its own SQLite connection
    """

    def __init__(self, db_path: str | Path = "reminders.sqlite3") -> None:
        self._db_path = Path(db_path)
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        self._ensure_schema()
        logger.info("ReminderStore ready db=%s", self._db_path)

    # ---- low-level helpers ----

    def _get_conn(self) -> sqlite3.Connection:
        conn = sqlite3.connect(str(self._db_path), timeout=30.0)
        conn.row_factory = sqlite3.Row
        self._configure_conn(conn)
        return conn

    @staticmethod
    def _configure_conn(conn: sqlite3.Connection) -> None:
        with contextlib.suppress(Exception):
            conn.execute("PRAGMA journal_mode=WAL")

    @contextlib.contextmanager
    def _reading(self, what: str) -> Iterator[sqlite3.Connection]:
        conn = self._get_conn()
        try:
            yield conn
        except sqlite3.Error as e:
            raise StoreError(f"{what} failed: {e}") from e
        finally:
            conn.close()

    def _ensure_schema(self) -> None:
        conn = self._get_conn()
        try:
            cur = conn.cursor()

            cur.execute(
                """
                CREATE TABLE IF NOT EXISTS maintenance_tasks (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    user_id TEXT NOT NULL,
                    name TEXT NOT NULL,
                    frequency_value REAL NOT NULL,
                    frequency_unit TEXT NOT NULL DEFAULT 'days',
                    is_active INTEGER NOT NULL DEFAULT 1,
                    created_at INTEGER NOT NULL DEFAULT 0
                )
                """
            )
            cur.execute(
                """
                CREATE TABLE IF NOT EXISTS maintenance_completions (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    task_id INTEGER NOT NULL,
                    completed_at INTEGER NOT NULL
                )
                """
            )
            cur.execute(
                """
                CREATE TABLE IF NOT EXISTS notification_log (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    task_id INTEGER NOT NULL,
                    user_id TEXT NOT NULL,
                    channel TEXT NOT NULL DEFAULT 'email',
                    sent_at INTEGER NOT NULL
                )
                """
            )
            cur.execute(
                """
                CREATE TABLE IF NOT EXISTS user_notification_preferences (
                    user_id TEXT PRIMARY KEY,
                    email_address TEXT NOT NULL,
                    email_enabled INTEGER NOT NULL DEFAULT 1,
                    updated_at INTEGER NOT NULL DEFAULT 0
                )
                """
            )

            # Migrations (safe): add missing columns to older task tables.
            cur.execute("PRAGMA table_info(maintenance_tasks)")
            cols = {row["name"] for row in cur.fetchall()}

            def add_col(name: str, decl: str) -> None:
                if name in cols:
                    return
                cur.execute(f"ALTER TABLE maintenance_tasks ADD COLUMN {name} {decl}")
                logger.info("ReminderStore migration: added column %s", name)

            add_col("frequency_unit", "TEXT NOT NULL DEFAULT 'days'")
            add_col("is_active", "INTEGER NOT NULL DEFAULT 1")
            add_col("created_at", "INTEGER NOT NULL DEFAULT 0")

            cur.execute(
                "CREATE INDEX IF NOT EXISTS idx_tasks_user_active ON maintenance_tasks(user_id, is_active)"
            )
            cur.execute(
                "CREATE INDEX IF NOT EXISTS idx_completions_task "
                "ON maintenance_completions(task_id, completed_at)"
            )
            cur.execute(
                "CREATE INDEX IF NOT EXISTS idx_log_task_channel "
                "ON notification_log(task_id, channel, sent_at)"
            )

            conn.commit()
        finally:
            conn.close()

    @staticmethod
    def _row_to_task(row: sqlite3.Row) -> MaintenanceTask:
        return MaintenanceTask(
            id=int(row["id"]),
            user_id=str(row["user_id"]),
            name=str(row["name"] or ""),
            frequency_value=float(row["frequency_value"]),
            frequency_unit=str(row["frequency_unit"] or "days"),
            is_active=bool(row["is_active"]),
        )

    @staticmethod
    def _placeholders(values: list) -> str:
        return ",".join("?" for _ in values)

    # ---- TaskRepo ----

    def list_active_tasks(self, user_ids: Iterable[str]) -> list[MaintenanceTask]:
        ids = [str(u) for u in user_ids]
        if not ids:
            return []

        with self._reading("list_active_tasks") as conn:
            cur = conn.execute(
                f"""
                SELECT *
                FROM maintenance_tasks
                WHERE is_active = 1
                  AND user_id IN ({self._placeholders(ids)})
                ORDER BY id ASC
                """,
                ids,
            )
            return [self._row_to_task(r) for r in cur.fetchall()]

    def latest_completion_per_task(self, task_ids: Iterable[int]) -> dict[int, int]:
        ids = [int(t) for t in task_ids]
        if not ids:
            return {}

        with self._reading("latest_completion_per_task") as conn:
            cur = conn.execute(
                f"""
                SELECT task_id, MAX(completed_at) AS last_done
                FROM maintenance_completions
                WHERE task_id IN ({self._placeholders(ids)})
                GROUP BY task_id
                """,
                ids,
            )
            return {int(r["task_id"]): int(r["last_done"]) for r in cur.fetchall()}

    def recent_log_entries(
        self,
        task_ids: Iterable[int],
        *,
        channel: str = EMAIL_CHANNEL,
        since_ms: int,
    ) -> list[NotificationLogEntry]:
        ids = [int(t) for t in task_ids]
        if not ids:
            return []

        with self._reading("recent_log_entries") as conn:
            cur = conn.execute(
                f"""
                SELECT task_id, user_id, channel, sent_at
                FROM notification_log
                WHERE task_id IN ({self._placeholders(ids)})
                  AND channel = ?
                  AND sent_at >= ?
                """,
                (*ids, channel, int(since_ms)),
            )
            return [
                NotificationLogEntry(
                    task_id=int(r["task_id"]),
                    user_id=str(r["user_id"]),
                    channel=str(r["channel"]),
                    sent_at_ms=int(r["sent_at"]),
                )
                for r in cur.fetchall()
            ]

    def append_log_entries(self, entries: Iterable[NotificationLogEntry]) -> bool:
        rows = [(e.task_id, e.user_id, e.channel, int(e.sent_at_ms)) for e in entries]
        if not rows:
            return True

        conn = self._get_conn()
        try:
            conn.executemany(
                "INSERT INTO notification_log(task_id, user_id, channel, sent_at) VALUES (?, ?, ?, ?)",
                rows,
            )
            conn.commit()
            logger.debug("Notification log appended rows=%d", len(rows))
            return True
        except sqlite3.Error:
            logger.exception("Notification log insert failed rows=%d", len(rows))
            return False
        finally:
            conn.close()

    def list_log_entries(self, task_id: int | None = None) -> list[NotificationLogEntry]:
        """Full log, oldest first (diagnostics / tests)."""
        sql = "SELECT task_id, user_id, channel, sent_at FROM notification_log"
        params: tuple = ()
        if task_id is not None:
            sql += " WHERE task_id = ?"
            params = (int(task_id),)
        sql += " ORDER BY sent_at ASC, id ASC"

        with self._reading("list_log_entries") as conn:
            return [
                NotificationLogEntry(
                    task_id=int(r["task_id"]),
                    user_id=str(r["user_id"]),
                    channel=str(r["channel"]),
                    sent_at_ms=int(r["sent_at"]),
                )
                for r in conn.execute(sql, params).fetchall()
            ]

    # ---- PreferenceRepo ----

    def list_enabled_recipients(self) -> list[RecipientPreference]:
        with self._reading("list_enabled_recipients") as conn:
            cur = conn.execute(
                """
                SELECT user_id, email_address, email_enabled
                FROM user_notification_preferences
                WHERE email_enabled = 1
                ORDER BY user_id ASC
                """
            )
            return [
                RecipientPreference(
                    user_id=str(r["user_id"]),
                    email_address=str(r["email_address"] or ""),
                    email_enabled=bool(r["email_enabled"]),
                )
                for r in cur.fetchall()
            ]

    # ---- write helpers (CLI / seeding) ----

    def add_task(
        self,
        *,
        user_id: str,
        name: str,
        frequency_value: float,
        frequency_unit: str = "days",
        is_active: bool = True,
    ) -> int:
        if not user_id or not user_id.strip():
            raise ValueError("user_id is required")
        if not name or not name.strip():
            raise ValueError("name is required")

        conn = self._get_conn()
        try:
            cur = conn.cursor()
            cur.execute(
                """
                INSERT INTO maintenance_tasks(user_id, name, frequency_value, frequency_unit, is_active, created_at)
                VALUES (?, ?, ?, ?, ?, ?)
                """,
                (
                    user_id.strip(),
                    name.strip(),
                    float(frequency_value),
                    (frequency_unit or "days").strip(),
                    1 if is_active else 0,
                    _now_ms(),
                ),
            )
            conn.commit()
            rowid = cur.lastrowid
            if rowid is None:
                raise RuntimeError("SQLite did not return lastrowid for maintenance_tasks insert")
            task_id = int(rowid)
            logger.debug(
                "Task added id=%s user=%s every %s %s", task_id, user_id, frequency_value, frequency_unit
            )
            return task_id
        finally:
            conn.close()

    def set_task_active(self, task_id: int, is_active: bool) -> None:
        conn = self._get_conn()
        try:
            conn.execute(
                "UPDATE maintenance_tasks SET is_active = ? WHERE id = ?",
                (1 if is_active else 0, int(task_id)),
            )
            conn.commit()
        finally:
            conn.close()

    def record_completion(self, task_id: int, completed_at_ms: int | None = None) -> None:
        if completed_at_ms is None:
            completed_at_ms = _now_ms()

        conn = self._get_conn()
        try:
            conn.execute(
                "INSERT INTO maintenance_completions(task_id, completed_at) VALUES (?, ?)",
                (int(task_id), int(completed_at_ms)),
            )
            conn.commit()
        finally:
            conn.close()

    def set_preference(self, user_id: str, email_address: str, *, enabled: bool = True) -> None:
        if not user_id or not user_id.strip():
            raise ValueError("user_id is required")

        conn = self._get_conn()
        try:
            conn.execute(
                """
                INSERT INTO user_notification_preferences(user_id, email_address, email_enabled, updated_at)
                VALUES (?, ?, ?, ?)
                ON CONFLICT(user_id) DO UPDATE SET
                    email_address = excluded.email_address,
                    email_enabled = excluded.email_enabled,
                    updated_at = excluded.updated_at
                """,
                (user_id.strip(), (email_address or "").strip(), 1 if enabled else 0, _now_ms()),
            )
            conn.commit()
        finally:
            conn.close()

    def counts(self) -> dict[str, int]:
        with self._reading("counts") as conn:
            out: dict[str, int] = {}
            for table in (
                "maintenance_tasks",
                "maintenance_completions",
                "notification_log",
                "user_notification_preferences",
            ):
                (n,) = conn.execute(f"SELECT COUNT(*) FROM {table}").fetchone()
                out[table] = int(n)
            return out
