from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Dict, List, Optional

from ..attendance.model import AttendanceRecord, DayState
from ..attendance.repository import AttendanceRepository
from ..attendance.service import day_state
from ..common.datetime_utils import now_local
from ..core.enums import TaskStatus
from ..files.repository import FileRepository
from ..tasks.service import TaskService
from ..users.model import StaffMember
from ..users.service import UserService


@dataclass(frozen=True)
class AdminOverview:
    members: List[StaffMember]
    role_counts: Dict[str, int]
    active_today: int


@dataclass(frozen=True)
class ManagerOverview:
    team: List[StaffMember]
    active_today: int
    task_counts: Dict[str, int]

    @property
    def pending_tasks(self) -> int:
        return self.task_counts.get(TaskStatus.TODO.value, 0) + self.task_counts.get(TaskStatus.IN_PROGRESS.value, 0)


@dataclass(frozen=True)
class StaffOverview:
    today: Optional[AttendanceRecord]
    state: DayState
    task_counts: Dict[str, int]
    files_uploaded: int

    @property
    def my_tasks(self) -> int:
        return sum(self.task_counts.values())


class DashboardService:
    """Read-only figures for the three role landing pages."""

    def __init__(
        self,
        users: UserService,
        tasks: TaskService,
        attendance: AttendanceRepository,
        files: FileRepository,
        *,
        clock: Callable[[], datetime] = now_local,
    ):
        self._users = users
        self._tasks = tasks
        self._attendance = attendance
        self._files = files
        self._clock = clock

    def _checked_in_today(self) -> set:
        today = self._clock().date()
        return {r.user_id for r in self._attendance.list_for_date(today) if r.check_in_time is not None}

    def admin_overview(self) -> AdminOverview:
        return AdminOverview(
            members=self._users.directory(),
            role_counts=self._users.role_counts(),
            active_today=len(self._checked_in_today()),
        )

    def manager_overview(self, manager_id: str) -> ManagerOverview:
        team = self._users.team_for(manager_id)
        team_ids = [m.user_id for m in team]
        active = self._checked_in_today()
        return ManagerOverview(
            team=team,
            active_today=sum(1 for uid in team_ids if uid in active),
            task_counts=self._tasks.counts_for(team_ids + [manager_id]),
        )

    def staff_overview(self, user_id: str) -> StaffOverview:
        record = self._attendance.get_for_user_and_date(user_id, self._clock().date())
        return StaffOverview(
            today=record,
            state=day_state(record),
            task_counts=self._tasks.counts_for([user_id]),
            files_uploaded=len(self._files.list_by_owner(user_id)),
        )
