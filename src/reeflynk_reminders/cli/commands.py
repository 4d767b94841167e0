# src/reeflynk_reminders/cli/commands.py

from __future__ import annotations

import argparse
import asyncio
import contextlib
import json
import logging
from datetime import UTC, datetime

from ..reminders.engine import handle_invocation
from ..reminders.models import FrequencyUnit
from ..reminders.scheduler import run_reminder_scheduler
from .bootstrap import AppContext

logger = logging.getLogger(__name__)


def _parse_when_ms(raw: str | None) -> int | None:
    """ISO-8601 timestamp (naive = UTC) -> epoch ms. None means 'now'."""
    if not raw:
        return None
    dt = datetime.fromisoformat(raw)
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=UTC)
    return int(dt.timestamp() * 1000)


def cmd_run_once(ctx: AppContext, args: argparse.Namespace) -> int:
    """Run one reminder pass; print the JSON payload; exit 0 on success, 1 on failure."""
    payload, status = asyncio.run(
        handle_invocation(ctx.store, ctx.store, ctx.sender, **ctx.run_kwargs())
    )
    print(json.dumps(payload))
    return 0 if status < 400 else 1


def cmd_serve(ctx: AppContext, args: argparse.Namespace) -> int:
    interval = args.interval if args.interval is not None else ctx.settings.scheduler_interval_seconds
    logger.info("Reminder scheduler started (interval=%ss). Press Ctrl+C to stop.", interval)
    with contextlib.suppress(KeyboardInterrupt):
        asyncio.run(
            run_reminder_scheduler(
                ctx.store,
                ctx.store,
                ctx.sender,
                interval_seconds=interval,
                **ctx.run_kwargs(),
            )
        )
    logger.info("Reminder scheduler stopped.")
    return 0


def cmd_add_task(ctx: AppContext, args: argparse.Namespace) -> int:
    unit = args.unit
    if unit not in {u.value for u in FrequencyUnit}:
        logger.warning("Unknown frequency unit %r; it will be treated as days", unit)
    task_id = ctx.store.add_task(
        user_id=args.user,
        name=args.name,
        frequency_value=args.every,
        frequency_unit=unit,
    )
    print(f"Added task {task_id}: {args.name} (every {args.every:g} {unit})")
    return 0


def cmd_complete(ctx: AppContext, args: argparse.Namespace) -> int:
    ctx.store.record_completion(args.task_id, _parse_when_ms(args.at))
    print(f"Recorded completion for task {args.task_id}")
    return 0


def cmd_set_email(ctx: AppContext, args: argparse.Namespace) -> int:
    ctx.store.set_preference(args.user, args.address, enabled=not args.disable)
    state = "disabled" if args.disable else "enabled"
    print(f"E-mail reminders {state} for {args.user} <{args.address}>")
    return 0


def cmd_status(ctx: AppContext, args: argparse.Namespace) -> int:
    s = ctx.settings
    counts = ctx.store.counts()
    mode = "DRY RUN" if ctx.sender is None else f"Resend as {s.from_email}"
    print(
        "Status:\n"
        f"  Database: {s.db_path}\n"
        f"  Delivery: {mode}\n"
        f"  Lookahead: {s.lookahead_minutes} min, suppression: {s.suppression_minutes} min\n"
        f"  Tasks: {counts['maintenance_tasks']}, completions: {counts['maintenance_completions']}\n"
        f"  Recipients: {counts['user_notification_preferences']}, "
        f"log entries: {counts['notification_log']}"
    )
    return 0
