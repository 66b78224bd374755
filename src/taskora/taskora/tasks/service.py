from __future__ import annotations

import logging
from dataclasses import replace
from datetime import date
from typing import Dict, List, Optional, Sequence

from ..common.validators import require_non_empty
from ..core.enums import TaskPriority, TaskStatus
from ..core.exceptions import AuthorizationError, DomainError, ServiceError, ValidationError
from .model import Task
from .repository import TaskRepository

logger = logging.getLogger(__name__)

COLUMNS = (
    (TaskStatus.TODO, "To Do"),
    (TaskStatus.IN_PROGRESS, "In Progress"),
    (TaskStatus.DONE, "Done"),
)


def parse_status(value: str) -> TaskStatus:
    try:
        return TaskStatus(value)
    except ValueError:
        raise ValidationError("Unknown task status") from None


def parse_priority(value: Optional[str]) -> TaskPriority:
    try:
        return TaskPriority(value or TaskPriority.MEDIUM.value)
    except ValueError:
        raise ValidationError("Unknown priority") from None


class TaskService:
    def __init__(self, tasks: TaskRepository):
        self._tasks = tasks

    def list_tasks(self) -> List[Task]:
        return list(self._tasks.list_all())

    def create_task(
        self,
        *,
        created_by: str,
        title: str,
        description: Optional[str] = None,
        priority: Optional[str] = None,
        due_date: Optional[date] = None,
    ) -> int:
        title = require_non_empty(title, "Title")
        description = (description or "").strip() or None
        return self._tasks.create(
            title=title,
            description=description,
            priority=parse_priority(priority),
            due_date=due_date,
            created_by=created_by,
        )

    def change_status(self, task_id: int, status: TaskStatus) -> None:
        if not self._tasks.update_status(task_id, status):
            raise ValidationError("Task not found")

    def delete_task(self, *, current_user_id: str, task_id: int) -> None:
        task = self._tasks.get(task_id)
        if not task:
            raise ValidationError("Task not found")
        if task.created_by != current_user_id:
            raise AuthorizationError("Only the creator can delete this task")
        self._tasks.delete(task_id)

    def counts_for(self, user_ids: Sequence[str]) -> Dict[str, int]:
        return self._tasks.count_by_status(list(user_ids))


class TaskBoard:
    """Kanban board with optimistic moves.

    ``move`` changes the local copy first and then writes to the store. If
    the write fails the whole board is re-read; no partial rollback.
    """

    def __init__(self, service: TaskService, tasks: Sequence[Task]):
        self._service = service
        self._tasks: List[Task] = list(tasks)

    @classmethod
    def load(cls, service: TaskService) -> "TaskBoard":
        return cls(service, service.list_tasks())

    @property
    def tasks(self) -> List[Task]:
        return list(self._tasks)

    def columns(self) -> List[dict]:
        return [
            {"status": s.value, "title": title, "tasks": [t for t in self._tasks if t.status == s]}
            for s, title in COLUMNS
        ]

    def reload(self) -> None:
        self._tasks = list(self._service.list_tasks())

    def move(self, task_id: int, status: str) -> Task:
        new_status = parse_status(status)
        index = next((i for i, t in enumerate(self._tasks) if t.task_id == task_id), None)
        if index is None:
            raise ValidationError("Task not found")

        if self._tasks[index].status is new_status:
            # dropped back into its own column
            return self._tasks[index]

        moved = replace(self._tasks[index], status=new_status)
        self._tasks[index] = moved
        try:
            self._service.change_status(task_id, new_status)
        except DomainError as e:
            logger.warning("moving task %s failed (%s); reloading board", task_id, e)
            try:
                self.reload()
            except DomainError:
                logger.exception("board reload failed")
            raise ServiceError("Could not update the task. The board was refreshed.") from e
        return moved
