from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Application roles used for authorization and navigation."""

    SUPER_ADMIN = "super_admin"
    MANAGER = "manager"
    STAFF = "staff"


class AttendanceStatus(str, Enum):
    """Attendance status stored per (user, day)."""

    PRESENT = "present"
    LATE = "late"
    ABSENT = "absent"
    LEAVE = "leave"


class TaskStatus(str, Enum):
    TODO = "todo"
    IN_PROGRESS = "in_progress"
    DONE = "done"


class TaskPriority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class NotificationCategory(str, Enum):
    TASK = "task"
    USER = "user"
    FILE = "file"
    MESSAGE = "message"
