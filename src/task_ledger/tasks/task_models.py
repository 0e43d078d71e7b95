# src/task_ledger/tasks/task_models.py

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum

DAY_SECONDS = 86400

MIN_PRIORITY = 1
MAX_PRIORITY = 3

# Due dates are stored as SQLite INTEGER (signed 64-bit).
MIN_DUE_DATE = -(2**63)
MAX_DUE_DATE = 2**63 - 1


class TaskStatus(IntEnum):
    """
    Task lifecycle status.

    Values are persisted as integers and must stay stable:
    OPEN=0, COMPLETED=1, DELETED=2.
    """

    OPEN = 0
    COMPLETED = 1
    DELETED = 2

    @classmethod
    def from_db(cls, raw: int | str | None) -> TaskStatus:
        if raw is None:
            return cls.OPEN
        try:
            return cls(int(raw))
        except (TypeError, ValueError) as e:
            raise ValueError(f"unknown task status in storage: {raw!r}") from e

    def can_become(self, target: TaskStatus) -> bool:
        return target in _TRANSITIONS[self]


_TRANSITIONS: dict[TaskStatus, frozenset[TaskStatus]] = {
    TaskStatus.OPEN: frozenset({TaskStatus.COMPLETED, TaskStatus.DELETED}),
    TaskStatus.COMPLETED: frozenset({TaskStatus.COMPLETED, TaskStatus.DELETED}),
    TaskStatus.DELETED: frozenset(),
}


@dataclass(slots=True)
class Task:
    id: int
    due_date: int
    title: str
    description: str
    owner: str
    status: TaskStatus
    priority: int

    def as_tuple(self) -> tuple[int, str, str, str, TaskStatus, int]:
        return (
            self.due_date,
            self.title,
            self.description,
            self.owner,
            self.status,
            self.priority,
        )


def day_index(ts: int) -> int:
    """Calendar-day bucket of a timestamp (floored, so negatives bucket correctly)."""
    return int(ts) // DAY_SECONDS


def is_valid_priority(priority: object) -> bool:
    if isinstance(priority, bool) or not isinstance(priority, int):
        return False
    return MIN_PRIORITY <= priority <= MAX_PRIORITY


def is_valid_due_date(due_date: object) -> bool:
    if isinstance(due_date, bool) or not isinstance(due_date, int):
        return False
    return MIN_DUE_DATE <= due_date <= MAX_DUE_DATE
