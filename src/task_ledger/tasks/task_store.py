# src/task_ledger/tasks/task_store.py

from __future__ import annotations

import contextlib
import logging
import sqlite3
from dataclasses import replace
from pathlib import Path

from .task_models import Task, TaskStatus

logger = logging.getLogger(__name__)


class TaskStore:
    """
    SQLite task store.

    Two tables:
    - tasks: one row per record, id is the dense position (0, 1, 2, ...)
    - owner_index: (owner, seq) -> task_id, seq is the owner's insertion order

    The schema is intentionally simple and migration-safe:
    - create table if missing
    - use PRAGMA table_info to detect missing columns
    - add columns with ALTER TABLE only when needed

    Rows are never deleted; soft delete is a status update.
    Each method opens its own SQLite connection.
    """

    def __init__(self, db_path: str | Path = "tasks.sqlite3") -> None:
        self._db_path = Path(db_path)
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        self._ensure_schema()
        logger.info("TaskStore ready db=%s total=%s", self._db_path, self.count_tasks())

    def close(self) -> None:
        """Compatibility hook for shutdown (no persistent connections to close)."""
        return

    # ---- low-level helpers ----

    def _get_conn(self) -> sqlite3.Connection:
        conn = sqlite3.connect(str(self._db_path), timeout=30.0)
        conn.row_factory = sqlite3.Row
        self._configure_conn(conn)
        return conn

    @staticmethod
    def _configure_conn(conn: sqlite3.Connection) -> None:
        with contextlib.suppress(sqlite3.DatabaseError):
            conn.execute("PRAGMA journal_mode=WAL")

    def _ensure_schema(self) -> None:
        conn = self._get_conn()
        try:
            cur = conn.cursor()

            cur.execute(
                """
                CREATE TABLE IF NOT EXISTS tasks (
                    id INTEGER PRIMARY KEY,
                    due_date INTEGER NOT NULL,
                    title TEXT NOT NULL,
                    description TEXT NOT NULL,
                    owner TEXT NOT NULL,
                    status INTEGER NOT NULL DEFAULT 0,
                    priority INTEGER NOT NULL
                )
                """
            )
            cur.execute(
                """
                CREATE TABLE IF NOT EXISTS owner_index (
                    owner TEXT NOT NULL,
                    seq INTEGER NOT NULL,
                    task_id INTEGER NOT NULL,
                    PRIMARY KEY (owner, seq)
                )
                """
            )

            # Migrations (safe): add missing columns.
            cur.execute("PRAGMA table_info(tasks)")
            cols = {row["name"] for row in cur.fetchall()}

            def add_col(name: str, decl: str) -> None:
                if name in cols:
                    return
                cur.execute(f"ALTER TABLE tasks ADD COLUMN {name} {decl}")
                logger.info("TaskStore migration: added column %s", name)

            add_col("due_date", "INTEGER NOT NULL DEFAULT 0")
            add_col("title", "TEXT NOT NULL DEFAULT ''")
            add_col("description", "TEXT NOT NULL DEFAULT ''")
            add_col("owner", "TEXT NOT NULL DEFAULT ''")
            add_col("status", "INTEGER NOT NULL DEFAULT 0")
            add_col("priority", "INTEGER NOT NULL DEFAULT 1")

            cur.execute("CREATE INDEX IF NOT EXISTS idx_tasks_owner ON tasks(owner)")

            conn.commit()
        finally:
            conn.close()

    @staticmethod
    def _row_to_task(row: sqlite3.Row) -> Task:
        return Task(
            id=int(row["id"]),
            due_date=int(row["due_date"]),
            title=str(row["title"] or ""),
            description=str(row["description"] or ""),
            owner=str(row["owner"]),
            status=TaskStatus.from_db(row["status"]),
            priority=int(row["priority"]),
        )

    # ---- public API ----

    def count_tasks(self) -> int:
        conn = self._get_conn()
        try:
            cur = conn.cursor()
            cur.execute("SELECT COUNT(*) FROM tasks")
            (n,) = cur.fetchone()
            return int(n)
        finally:
            conn.close()

    def append_task(self, task: Task) -> int:
        """
        Insert the record at the next dense id and index it under its owner.

        Both inserts commit in one transaction; task.id is ignored.
        """
        conn = self._get_conn()
        try:
            cur = conn.cursor()
            cur.execute(
                """
                INSERT INTO tasks(id, due_date, title, description, owner, status, priority)
                VALUES ((SELECT COUNT(*) FROM tasks), ?, ?, ?, ?, ?, ?)
                """,
                (
                    int(task.due_date),
                    task.title,
                    task.description,
                    task.owner,
                    int(task.status),
                    int(task.priority),
                ),
            )
            rowid = cur.lastrowid
            if rowid is None:
                raise RuntimeError("SQLite did not return lastrowid for tasks insert")
            task_id = int(rowid)
            cur.execute(
                """
                INSERT INTO owner_index(owner, seq, task_id)
                VALUES (?, (SELECT COUNT(*) FROM owner_index WHERE owner = ?), ?)
                """,
                (task.owner, task.owner, task_id),
            )
            conn.commit()
            logger.debug("Task row inserted id=%s owner=%s", task_id, task.owner)
            return task_id
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()

    def get_task(self, task_id: int) -> Task | None:
        conn = self._get_conn()
        try:
            cur = conn.cursor()
            cur.execute("SELECT * FROM tasks WHERE id = ?", (int(task_id),))
            row = cur.fetchone()
            return self._row_to_task(row) if row else None
        finally:
            conn.close()

    def save_task(self, task: Task) -> None:
        """Overwrite the mutable fields of an existing row. Owner is never rewritten."""
        conn = self._get_conn()
        try:
            cur = conn.cursor()
            cur.execute(
                """
                UPDATE tasks
                SET due_date = ?,
                    title = ?,
                    description = ?,
                    status = ?,
                    priority = ?
                WHERE id = ?
                """,
                (
                    int(task.due_date),
                    task.title,
                    task.description,
                    int(task.status),
                    int(task.priority),
                    int(task.id),
                ),
            )
            if cur.rowcount != 1:
                conn.rollback()
                raise KeyError(task.id)
            conn.commit()
        finally:
            conn.close()

    def list_owner_ids(self, owner: str) -> list[int]:
        conn = self._get_conn()
        try:
            cur = conn.cursor()
            cur.execute(
                "SELECT task_id FROM owner_index WHERE owner = ? ORDER BY seq ASC",
                (owner,),
            )
            return [int(r["task_id"]) for r in cur.fetchall()]
        finally:
            conn.close()


class MemoryTaskStore:
    """
    In-process store: a list addressed by id plus an owner -> ids mapping.

    Hands out copies so callers can only change records through save_task().
    """

    def __init__(self) -> None:
        self._tasks: list[Task] = []
        self._by_owner: dict[str, list[int]] = {}

    def close(self) -> None:
        return

    def count_tasks(self) -> int:
        return len(self._tasks)

    def append_task(self, task: Task) -> int:
        task_id = len(self._tasks)
        self._tasks.append(replace(task, id=task_id))
        self._by_owner.setdefault(task.owner, []).append(task_id)
        return task_id

    def get_task(self, task_id: int) -> Task | None:
        if task_id < 0 or task_id >= len(self._tasks):
            return None
        return replace(self._tasks[task_id])

    def save_task(self, task: Task) -> None:
        if not 0 <= task.id < len(self._tasks):
            raise KeyError(task.id)
        current = self._tasks[task.id]
        self._tasks[task.id] = replace(task, owner=current.owner)

    def list_owner_ids(self, owner: str) -> list[int]:
        return list(self._by_owner.get(owner, ()))
