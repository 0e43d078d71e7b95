# src/task_ledger/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the core.

The registry depends on Protocols instead of concrete implementations.
This keeps storage and the time source swappable and makes testing easier.
"""

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from ..tasks.task_models import Task


class Clock(Protocol):
    """Call-time "now" in whole seconds. Never goes backwards."""

    def now(self) -> int: ...


class TaskRepo(Protocol):
    """
    Record sequence + owner index.

    Implementations store what they are given; validation, ownership and
    status rules live in TaskRegistry.
    """

    def count_tasks(self) -> int: ...

    # Appends the record at id == count_tasks() and indexes it under its owner.
    def append_task(self, task: Task) -> int: ...

    def get_task(self, task_id: int) -> Task | None: ...
    def save_task(self, task: Task) -> None: ...
    def list_owner_ids(self, owner: str) -> list[int]: ...
    def close(self) -> None: ...
