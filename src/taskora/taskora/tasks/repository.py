from __future__ import annotations

from datetime import date
from typing import Dict, Optional, Protocol, Sequence

from ..core.enums import TaskPriority, TaskStatus
from .model import Task


class TaskRepository(Protocol):
    def list_all(self) -> Sequence[Task]:
        raise NotImplementedError

    def get(self, task_id: int) -> Optional[Task]:
        raise NotImplementedError

    def create(
        self,
        *,
        title: str,
        description: Optional[str],
        priority: TaskPriority,
        due_date: Optional[date],
        created_by: str,
    ) -> int:
        raise NotImplementedError

    def update_status(self, task_id: int, status: TaskStatus) -> bool:
        raise NotImplementedError

    def delete(self, task_id: int) -> bool:
        raise NotImplementedError

    def count_by_status(self, created_by: Sequence[str]) -> Dict[str, int]:
        """Status counts for tasks created by any of ``created_by``."""

        raise NotImplementedError
