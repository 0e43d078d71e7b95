# src/task_ledger/logging_setup.py

from __future__ import annotations

import logging
import re
import sys
from pathlib import Path

# Registry/store DEBUG lines (rejected calls, row inserts) repeat what the
# console already prints as "Error (<kind>): ..." replies.
_PER_CALL_LOGGERS = ("task_ledger.tasks.",)


class _ConsoleFilter(logging.Filter):
    """
    Console view of the logs:
    - task_ledger records pass, except per-call DEBUG chatter from the task subsystem
    - everything else (third-party, py.warnings) only at ERROR+
    """

    def filter(self, record: logging.LogRecord) -> bool:
        name = record.name
        if not name.startswith("task_ledger."):
            return record.levelno >= logging.ERROR
        if name.startswith(_PER_CALL_LOGGERS):
            return record.levelno >= logging.INFO
        return True


def log_file_name(app_name: str) -> str:
    """'Task Ledger (dev)' -> 'task_ledger_dev.log'"""
    slug = re.sub(r"[^a-z0-9]+", "_", app_name.lower()).strip("_")
    return f"{slug or 'task_ledger'}.log"


def setup_logging(
    *,
    app_name: str = "task-ledger",
    log_dir: str | Path = ".local/task_ledger",
    console_level: int = logging.INFO,
    file_level: int = logging.DEBUG,
) -> Path:
    """
    Console handler (filtered) + full DEBUG file under log_dir, named after app_name.

    Call once, before the first log line. Returns the log file path.
    """
    log_dir = Path(log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / log_file_name(app_name)

    root = logging.getLogger()
    root.setLevel(logging.DEBUG)

    # Remove any pre-existing handlers to avoid duplicates.
    for h in list(root.handlers):
        root.removeHandler(h)

    fmt = logging.Formatter(
        fmt="%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    ch = logging.StreamHandler(sys.stderr)
    ch.setLevel(console_level)
    ch.setFormatter(fmt)
    ch.addFilter(_ConsoleFilter())
    root.addHandler(ch)

    fh = logging.FileHandler(str(log_file), encoding="utf-8")
    fh.setLevel(file_level)
    fh.setFormatter(fmt)
    root.addHandler(fh)

    logging.captureWarnings(True)
    return log_file
