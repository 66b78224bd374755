from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..core.enums import NotificationCategory
from .model import Notification


class NotificationRepository(Protocol):
    """Every call is scoped to the recipient; other users' rows are never touched."""

    def list_for(self, recipient_id: str, *, unread_only: bool = False) -> Sequence[Notification]:
        raise NotImplementedError

    def create(
        self,
        *,
        recipient_id: str,
        category: NotificationCategory,
        title: str,
        description: Optional[str],
    ) -> int:
        raise NotImplementedError

    def mark_read(self, recipient_id: str, notification_id: int) -> bool:
        raise NotImplementedError

    def mark_all_read(self, recipient_id: str) -> int:
        raise NotImplementedError

    def delete(self, recipient_id: str, notification_id: int) -> bool:
        raise NotImplementedError
