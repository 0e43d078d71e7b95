# src/task_ledger/core/state.py

from __future__ import annotations

import threading
from dataclasses import dataclass, field

from ..tasks.task_registry import TaskRegistry
from .ports import Clock, TaskRepo


@dataclass
class AppState:
    # Settings object (Settings or a test SimpleNamespace).
    settings: object

    registry: TaskRegistry
    store: TaskRepo
    clock: Clock

    # Identity the console is currently acting as.
    caller: str = "local"

    lock: threading.Lock = field(default_factory=threading.Lock)
