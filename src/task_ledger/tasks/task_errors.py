# src/task_ledger/tasks/task_errors.py

"""
Registry failures.

Every rejected call raises one of these before anything is written.
Callers tell them apart by class or by the stable `kind` string.
"""

from __future__ import annotations


class TaskRegistryError(Exception):
    kind = "task_error"
    message = "task registry error"

    def __init__(self, task_id: int | None = None, message: str | None = None) -> None:
        self.task_id = task_id
        super().__init__(message or self.message)


class InvalidPriority(TaskRegistryError):
    kind = "invalid_priority"
    message = "priority must be between 1 and 3"


class InvalidIndex(TaskRegistryError):
    kind = "invalid_index"
    message = "not a valid index"


class NotOwner(TaskRegistryError):
    kind = "not_owner"
    message = "only owner of the task"


class TaskDeleted(TaskRegistryError):
    kind = "task_deleted"
    message = "task deleted"


class InvalidDueDate(TaskRegistryError):
    kind = "invalid_due_date"
    message = "due date must be an integer timestamp in the int64 range"
