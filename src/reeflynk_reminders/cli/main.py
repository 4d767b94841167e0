# src/reeflynk_reminders/cli/main.py

"""
CLI entrypoint.

Initializes logging, builds the AppContext, then runs one subcommand:
- run-once: a single reminder pass (what an external scheduler triggers),
- serve: the in-process polling scheduler,
- add-task / complete / set-email / status: local data management.
"""

from __future__ import annotations

import argparse
import logging
from collections.abc import Sequence

from ..config import get_settings
from ..logging_setup import setup_logging
from . import commands
from .bootstrap import create_app_context

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="reeflynk-reminders",
        description="Maintenance reminder e-mails for ReefLynk.",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("run-once", help="Run one reminder pass and print the result.")
    p.add_argument("--dry-run", action="store_true", help="Do not send or log anything.")
    p.set_defaults(handler=commands.cmd_run_once)

    p = sub.add_parser("serve", help="Run reminder passes on a fixed interval.")
    p.add_argument("--interval", type=float, default=None, help="Seconds between passes.")
    p.add_argument("--dry-run", action="store_true", help="Do not send or log anything.")
    p.set_defaults(handler=commands.cmd_serve)

    p = sub.add_parser("add-task", help="Add a recurring maintenance task.")
    p.add_argument("--user", required=True)
    p.add_argument("--name", required=True)
    p.add_argument("--every", type=float, required=True, help="Recurrence value.")
    p.add_argument("--unit", default="days", help="hours | days | weeks | months")
    p.set_defaults(handler=commands.cmd_add_task)

    p = sub.add_parser("complete", help="Record a task completion.")
    p.add_argument("task_id", type=int)
    p.add_argument("--at", default=None, help="ISO-8601 timestamp (default: now).")
    p.set_defaults(handler=commands.cmd_complete)

    p = sub.add_parser("set-email", help="Set a user's reminder address.")
    p.add_argument("--user", required=True)
    p.add_argument("--address", required=True)
    p.add_argument("--disable", action="store_true")
    p.set_defaults(handler=commands.cmd_set_email)

    p = sub.add_parser("status", help="Show settings and store counts.")
    p.set_defaults(handler=commands.cmd_status)

    return parser


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    settings = get_settings()

    level_name = str(getattr(settings, "log_level", "INFO")).upper()
    console_level = getattr(logging, level_name, logging.INFO)
    setup_logging(log_dir=settings.data_dir, console_level=console_level)

    ctx = create_app_context(settings=settings, dry_run=getattr(args, "dry_run", False))
    logger.debug("Running command %s", args.command)
    return int(args.handler(ctx, args))


if __name__ == "__main__":
    raise SystemExit(main())
