# src/task_ledger/config.py

"""Centralized settings loaded from environment variables (+ optional .env).

Design goals:
- One Settings object for the whole app.
- Nothing required at import time: every field has a local default.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

ENV_PREFIX = "TASK_LEDGER"

STORAGE_BACKENDS = ("sqlite", "memory")

load_dotenv(override=False)


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


def _env(name: str, default: str = "") -> str:
    v = os.getenv(name)
    return default if v is None else v


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _env_path(name: str, default: Path) -> Path:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return Path(raw).expanduser()


@dataclass(frozen=True, slots=True)
class Settings:
    # ---- App / logging ----
    app_name: str
    log_level: str

    # ---- Storage ----
    storage: str
    data_dir: Path
    tasks_db_path: Path

    # ---- Console ----
    console_enabled: bool
    default_caller: str
    manual_clock: bool

    @staticmethod
    def from_env() -> "Settings":
        app_name = _env(_k("APP_NAME"), "task-ledger").strip() or "task-ledger"
        log_level = _env(_k("LOG_LEVEL"), "INFO").strip().upper() or "INFO"

        # Validated in bootstrap so the warning lands in the configured log.
        storage = _env(_k("STORAGE"), "sqlite").strip().lower()

        data_dir = _env_path(_k("DATA_DIR"), Path(".local/task_ledger"))
        tasks_db_path = _env_path(_k("TASKS_DB_PATH"), data_dir / "tasks.sqlite3")

        console_enabled = _env_bool(_k("CONSOLE_ENABLED"), True)
        default_caller = _env(_k("DEFAULT_CALLER"), "local").strip() or "local"
        manual_clock = _env_bool(_k("MANUAL_CLOCK"), False)

        return Settings(
            app_name=app_name,
            log_level=log_level,
            storage=storage,
            data_dir=data_dir,
            tasks_db_path=tasks_db_path,
            console_enabled=console_enabled,
            default_caller=default_caller,
            manual_clock=manual_clock,
        )


SETTINGS = Settings.from_env()


def get_settings() -> Settings:
    return SETTINGS
