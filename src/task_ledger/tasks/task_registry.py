# src/task_ledger/tasks/task_registry.py

from __future__ import annotations

"""
Task registry.

Owns the rules on top of a TaskRepo:
- priority bounds and due-date range,
- ownership (only the creator may edit/remove/complete),
- soft delete (DELETED is terminal and hidden from reads),
- day-bucketed "today" filtering against the call-time clock.

Caller identity is always an explicit argument. Every call runs under one
lock and checks all preconditions before writing, so a rejected call leaves
the store untouched.
"""

import logging
import threading

from ..core.ports import Clock, TaskRepo
from .task_errors import (
    InvalidDueDate,
    InvalidIndex,
    InvalidPriority,
    NotOwner,
    TaskDeleted,
    TaskRegistryError,
)
from .task_models import Task, TaskStatus, day_index, is_valid_due_date, is_valid_priority

logger = logging.getLogger(__name__)


class TaskRegistry:
    def __init__(self, store: TaskRepo, clock: Clock) -> None:
        self._store = store
        self._clock = clock
        self._lock = threading.RLock()

    @property
    def clock(self) -> Clock:
        return self._clock

    # ---- guards ----

    def _load(self, task_id: int) -> Task:
        if isinstance(task_id, bool) or not isinstance(task_id, int):
            raise InvalidIndex(None)
        # Range check first: ids past the end (or past int64) never reach the store.
        if not 0 <= task_id < self._store.count_tasks():
            raise InvalidIndex(task_id)
        task = self._store.get_task(task_id)
        if task is None:
            raise InvalidIndex(task_id)
        return task

    def _load_owned(self, caller: str, task_id: int) -> Task:
        """Existence, then ownership, then the terminal-state guard."""
        task = self._load(task_id)
        if task.owner != caller:
            raise NotOwner(task_id)
        if task.status == TaskStatus.DELETED:
            raise TaskDeleted(task_id)
        return task

    @staticmethod
    def _check_priority(priority: int, task_id: int | None = None) -> None:
        if not is_valid_priority(priority):
            raise InvalidPriority(task_id)

    @staticmethod
    def _check_due_date(due_date: int, task_id: int | None = None) -> None:
        if not is_valid_due_date(due_date):
            raise InvalidDueDate(task_id)

    def _transition(self, task: Task, target: TaskStatus) -> None:
        if not task.status.can_become(target):
            # Only DELETED has no way out, and _load_owned already rejects it.
            raise TaskDeleted(task.id)
        task.status = target
        self._store.save_task(task)

    # ---- mutations ----

    def add_task(
        self,
        caller: str,
        due_date: int,
        title: str,
        description: str,
        priority: int,
    ) -> int:
        with self._lock:
            try:
                self._check_priority(priority)
                self._check_due_date(due_date)
            except TaskRegistryError as e:
                logger.debug("add_task rejected caller=%s kind=%s", caller, e.kind)
                raise

            task_id = self._store.append_task(
                Task(
                    id=-1,  # assigned by the store
                    due_date=due_date,
                    title=title,
                    description=description,
                    owner=caller,
                    status=TaskStatus.OPEN,
                    priority=priority,
                )
            )
            logger.info("Task added id=%s owner=%s due=%s priority=%s", task_id, caller, due_date, priority)
            return task_id

    def edit_task(
        self,
        caller: str,
        task_id: int,
        due_date: int,
        title: str,
        description: str,
        priority: int,
    ) -> None:
        with self._lock:
            try:
                task = self._load_owned(caller, task_id)
                self._check_priority(priority, task_id)
                self._check_due_date(due_date, task_id)
            except TaskRegistryError as e:
                logger.debug("edit_task rejected id=%s caller=%s kind=%s", task_id, caller, e.kind)
                raise

            task.due_date = due_date
            task.title = title
            task.description = description
            task.priority = priority
            self._store.save_task(task)
            logger.info("Task edited id=%s owner=%s status=%s", task_id, caller, task.status.name)

    def remove_task(self, caller: str, task_id: int) -> None:
        with self._lock:
            try:
                task = self._load_owned(caller, task_id)
            except TaskRegistryError as e:
                logger.debug("remove_task rejected id=%s caller=%s kind=%s", task_id, caller, e.kind)
                raise

            self._transition(task, TaskStatus.DELETED)
            logger.info("Task removed id=%s owner=%s", task_id, caller)

    def set_task_as_complete(self, caller: str, task_id: int) -> None:
        with self._lock:
            try:
                task = self._load_owned(caller, task_id)
            except TaskRegistryError as e:
                logger.debug("set_task_as_complete rejected id=%s caller=%s kind=%s", task_id, caller, e.kind)
                raise

            if task.status == TaskStatus.COMPLETED:
                logger.debug("Task already completed id=%s", task_id)
                return
            self._transition(task, TaskStatus.COMPLETED)
            logger.info("Task completed id=%s owner=%s", task_id, caller)

    # ---- reads ----

    def get_record(self, task_id: int) -> Task:
        """Any caller may read any live task. Deleted ones raise TaskDeleted."""
        with self._lock:
            task = self._load(task_id)
            if task.status == TaskStatus.DELETED:
                raise TaskDeleted(task_id)
            return task

    def get_task(self, task_id: int) -> tuple[int, str, str, str, TaskStatus, int]:
        """(due_date, title, description, owner, status, priority)"""
        return self.get_record(task_id).as_tuple()

    def list_my_tasks(self, caller: str) -> list[Task]:
        with self._lock:
            out: list[Task] = []
            for task_id in self._store.list_owner_ids(caller):
                task = self._store.get_task(task_id)
                if task is None or task.status == TaskStatus.DELETED:
                    continue
                out.append(task)
            return out

    def list_my_today_tasks(self, caller: str) -> list[Task]:
        """Live tasks due on the same UTC day as the clock reading taken now."""
        with self._lock:
            today = day_index(self._clock.now())
            return [t for t in self.list_my_tasks(caller) if day_index(t.due_date) == today]

    def task_count(self) -> int:
        """Records ever created (deleted included), i.e. the next id."""
        with self._lock:
            return self._store.count_tasks()
