# config.example.py

"""
Documentation-only module (safe to commit).

The real configuration is loaded from environment variables (optionally via a local .env file).
Do NOT commit real secrets; keep them in .env (local, gitignored).

This file exists to make the repo self-documenting even without opening .env.example.
"""

ENV_VARS = {
    # App / logging
    "REEF_APP_NAME": "Product name used in e-mail subjects and bodies (default: ReefLynk).",
    "REEF_LOG_LEVEL": "Console logging level (default: INFO).",
    # Paths (gitignored)
    "REEF_DATA_DIR": "Local data + log directory (default: .local/reeflynk).",
    "REEF_DB_PATH": "SQLite store path (default: <data_dir>/reminders.sqlite3).",
    # E-mail delivery
    "REEF_RESEND_API_KEY": "Resend API key; RESEND_API_KEY is accepted too. Unset => dry run.",
    "REEF_RESEND_BASE_URL": "Resend API base URL (default: https://api.resend.com).",
    "REEF_FROM_EMAIL": "Sender address; FROM_EMAIL is accepted too (default: notifications@reeflynk.com).",
    "REEF_HTTP_TIMEOUT_SECONDS": "Timeout for one send request (default: 10).",
    # Reminder tuning
    "REEF_LOOKAHEAD_MINUTES": "Remind about tasks due within this many minutes (default: 60).",
    "REEF_SUPPRESSION_MINUTES": "Do not re-notify a task within this many minutes (default: 120).",
    "REEF_SCHEDULER_INTERVAL_SECONDS": "Pause between passes for `serve` (default: 300).",
}
