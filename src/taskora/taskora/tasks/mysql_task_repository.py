from __future__ import annotations

from datetime import date
from typing import Dict, Optional, Sequence

from ..core.enums import TaskPriority, TaskStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Task
from .repository import TaskRepository

_COLUMNS = "task_id, title, description, status, priority, due_date, created_by, created_at, updated_at"


def _to_task(r: dict) -> Task:
    return Task(
        task_id=int(r["task_id"]),
        title=r["title"],
        description=r.get("description"),
        status=TaskStatus(r["status"]),
        priority=TaskPriority(r["priority"]),
        due_date=r.get("due_date"),
        created_by=r.get("created_by"),
        created_at=r.get("created_at"),
        updated_at=r.get("updated_at"),
    )


class MySQLTaskRepository(TaskRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_all(self) -> Sequence[Task]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM tasks ORDER BY created_at DESC, task_id DESC")
            return [_to_task(r) for r in fetchall(cur)]

    def get(self, task_id: int) -> Optional[Task]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM tasks WHERE task_id=%s", (task_id,))
            r = fetchone(cur)
            return _to_task(r) if r else None

    def create(
        self,
        *,
        title: str,
        description: Optional[str],
        priority: TaskPriority,
        due_date: Optional[date],
        created_by: str,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO tasks(title, description, status, priority, due_date, created_by)
                VALUES(%s,%s,'todo',%s,%s,%s)
                """,
                (title, description, priority.value, due_date, created_by),
            )
            return int(cur.lastrowid)

    def update_status(self, task_id: int, status: TaskStatus) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE tasks SET status=%s WHERE task_id=%s", (status.value, task_id))
            return cur.rowcount > 0

    def delete(self, task_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM tasks WHERE task_id=%s", (task_id,))
            return cur.rowcount > 0

    def count_by_status(self, created_by: Sequence[str]) -> Dict[str, int]:
        counts = {s.value: 0 for s in TaskStatus}
        if not created_by:
            return counts
        placeholders = ",".join(["%s"] * len(created_by))
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT status, COUNT(*) AS n FROM tasks WHERE created_by IN ({placeholders}) GROUP BY status",
                tuple(created_by),
            )
            for r in fetchall(cur):
                counts[r["status"]] = int(r["n"])
        return counts
