# config.example.py

"""
Documentation-only module (safe to commit).

The real configuration is loaded from environment variables (optionally via a local .env file).
This file exists to make the repo self-documenting even without opening .env.example.
"""

ENV_VARS = {
    # App / logging
    "TASK_LEDGER_APP_NAME": "App display name (default: task-ledger).",
    "TASK_LEDGER_LOG_LEVEL": "Console logging level (default: INFO). The log file always gets DEBUG.",
    # Storage (gitignored)
    "TASK_LEDGER_STORAGE": "sqlite (default) or memory (nothing persisted).",
    "TASK_LEDGER_DATA_DIR": "Local data directory (default: .local/task_ledger).",
    "TASK_LEDGER_TASKS_DB_PATH": "TaskStore SQLite path (default: <data_dir>/tasks.sqlite3).",
    # Console
    "TASK_LEDGER_CONSOLE_ENABLED": "Run the console REPL (true/false, default: true).",
    "TASK_LEDGER_DEFAULT_CALLER": "Identity the console starts as (default: local).",
    "TASK_LEDGER_MANUAL_CLOCK": "Use a manual clock driven by /advance instead of wall time (true/false).",
}
