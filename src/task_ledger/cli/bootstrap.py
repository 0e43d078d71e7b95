# src/task_ledger/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures local (gitignored) directories exist,
- wires the concrete store and clock into a TaskRegistry inside AppState.
"""

from __future__ import annotations

import logging

from ..config import STORAGE_BACKENDS, get_settings
from ..core.clock import ManualClock, SystemClock
from ..core.ports import Clock, TaskRepo
from ..core.state import AppState
from ..tasks.task_registry import TaskRegistry
from ..tasks.task_store import MemoryTaskStore, TaskStore

logger = logging.getLogger(__name__)


def _ensure_local_dirs(settings) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    settings.tasks_db_path.parent.mkdir(parents=True, exist_ok=True)


def build_store(settings) -> TaskRepo:
    backend = str(getattr(settings, "storage", "sqlite")).lower()
    if backend not in STORAGE_BACKENDS:
        logger.warning("Unknown storage backend %r, using sqlite.", backend)
        backend = "sqlite"

    if backend == "memory":
        logger.info("Using in-memory task store (nothing is persisted).")
        return MemoryTaskStore()
    return TaskStore(settings.tasks_db_path)


def build_clock(settings) -> Clock:
    if getattr(settings, "manual_clock", False):
        return ManualClock()
    return SystemClock()


def create_initial_state(*, settings=None) -> AppState:
    """
    Create AppState from the provided settings.

    Keeping settings injectable makes the app easier to test and avoids hidden global config reads.
    If settings is None, falls back to get_settings().
    """
    if settings is None:
        settings = get_settings()

    _ensure_local_dirs(settings)

    store = build_store(settings)
    clock = build_clock(settings)

    return AppState(
        settings=settings,
        registry=TaskRegistry(store, clock),
        store=store,
        clock=clock,
        caller=str(getattr(settings, "default_caller", "local")),
    )
