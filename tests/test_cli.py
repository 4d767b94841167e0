# tests/test_cli.py

from __future__ import annotations

import json

from reeflynk_reminders.cli import commands
from reeflynk_reminders.cli.bootstrap import build_sender, create_app_context
from reeflynk_reminders.cli.main import build_parser
from reeflynk_reminders.mail.resend_sender import ResendSender


def _run(ctx, argv: list[str]) -> int:
    args = build_parser().parse_args(argv)
    return args.handler(ctx, args)


def test_build_sender_without_key_is_dry_run(settings) -> None:
    assert build_sender(settings) is None


def test_build_sender_with_key(settings) -> None:
    from dataclasses import replace

    sender = build_sender(replace(settings, resend_api_key="re_key"))
    assert isinstance(sender, ResendSender)


def test_add_task_set_email_and_dry_run_once(settings, capsys) -> None:
    ctx = create_app_context(settings=settings)

    assert _run(ctx, ["set-email", "--user", "u1", "--address", "u1@example.com"]) == 0
    assert _run(ctx, ["add-task", "--user", "u1", "--name", "Water change", "--every", "1", "--unit", "weeks"]) == 0
    assert _run(ctx, ["complete", "1", "--at", "2020-01-01T00:00:00"]) == 0
    capsys.readouterr()

    assert _run(ctx, ["run-once", "--dry-run"]) == 0
    out = capsys.readouterr().out.strip().splitlines()[-1]
    assert json.loads(out) == {"message": "Sent 0 email notification(s)"}
    assert ctx.store.list_log_entries() == []


def test_complete_parses_naive_timestamp_as_utc() -> None:
    assert commands._parse_when_ms("1970-01-01T00:00:01") == 1000
    assert commands._parse_when_ms(None) is None


def test_status_prints_counts(settings, capsys) -> None:
    ctx = create_app_context(settings=settings)
    ctx.store.add_task(user_id="u1", name="Dose", frequency_value=1)

    assert _run(ctx, ["status"]) == 0
    out = capsys.readouterr().out
    assert "Delivery: DRY RUN" in out
    assert "Tasks: 1" in out
