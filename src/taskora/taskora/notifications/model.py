from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import NotificationCategory


@dataclass(frozen=True)
class Notification:
    notification_id: int
    recipient_id: str
    category: NotificationCategory
    title: str
    description: Optional[str]
    is_read: bool
    created_at: Optional[datetime] = None
