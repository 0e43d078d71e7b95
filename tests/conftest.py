# tests/conftest.py

from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace

import pytest

from task_ledger.cli.bootstrap import create_initial_state
from task_ledger.core.clock import ManualClock
from task_ledger.core.state import AppState
from task_ledger.tasks.task_registry import TaskRegistry
from task_ledger.tasks.task_store import MemoryTaskStore, TaskStore

from .fakes import DAY, T0


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with bootstrap and the CLI.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated and deterministic.
    """
    return SimpleNamespace(
        app_name="task-ledger-test",
        log_level="DEBUG",
        storage="memory",
        data_dir=tmp_path / "data",
        tasks_db_path=tmp_path / "data" / "tasks.sqlite3",
        console_enabled=False,
        default_caller="alice",
        manual_clock=True,
    )


@pytest.fixture()
def clock() -> ManualClock:
    return ManualClock(start=T0)


@pytest.fixture(params=["memory", "sqlite"])
def store(request, tmp_path: Path):
    if request.param == "memory":
        return MemoryTaskStore()
    return TaskStore(tmp_path / "tasks.sqlite3")


@pytest.fixture()
def registry(store, clock: ManualClock) -> TaskRegistry:
    """Registry over both store implementations (every test runs twice)."""
    return TaskRegistry(store, clock)


@pytest.fixture()
def seeded(registry: TaskRegistry) -> TaskRegistry:
    """
    Alice: #0 due today, #1 due tomorrow.
    Bob:   #2, #3, #4 due tomorrow.
    """
    registry.add_task("alice", T0, "Title task 1 Alice", "Description task 1 from Alice", 1)
    registry.add_task("alice", T0 + DAY, "Title task 2 Alice", "Description task 2 from Alice", 1)
    for n in (1, 2, 3):
        registry.add_task("bob", T0 + DAY, f"Title task {n} Bob", f"Description task {n} from Bob", 1)
    return registry


@pytest.fixture()
def state(settings: SimpleNamespace) -> AppState:
    """AppState wired through the real bootstrap (memory store, manual clock)."""
    return create_initial_state(settings=settings)
