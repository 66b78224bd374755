from __future__ import annotations

import logging
from typing import List, Optional

from ..common.validators import require_non_empty
from ..core.enums import NotificationCategory
from ..core.exceptions import DomainError, ValidationError
from .model import Notification
from .repository import NotificationRepository

logger = logging.getLogger(__name__)


class NotificationService:
    def __init__(self, notifications: NotificationRepository):
        self._notifications = notifications

    def list_for(self, recipient_id: str, *, unread_only: bool = False) -> List[Notification]:
        return list(self._notifications.list_for(recipient_id, unread_only=unread_only))

    def unread_count(self, recipient_id: str) -> int:
        return len(self._notifications.list_for(recipient_id, unread_only=True))

    def mark_read(self, recipient_id: str, notification_id: int) -> None:
        if not self._notifications.mark_read(recipient_id, notification_id):
            raise ValidationError("Notification not found")

    def mark_all_read(self, recipient_id: str) -> int:
        return self._notifications.mark_all_read(recipient_id)

    def delete(self, recipient_id: str, notification_id: int) -> None:
        if not self._notifications.delete(recipient_id, notification_id):
            raise ValidationError("Notification not found")

    def notify(
        self,
        recipient_id: str,
        category: NotificationCategory,
        title: str,
        description: Optional[str] = None,
    ) -> Optional[int]:
        """Server-side producer. Best effort: a failure is logged, never raised."""
        title = require_non_empty(title, "Title")
        try:
            return self._notifications.create(
                recipient_id=recipient_id,
                category=category,
                title=title,
                description=description,
            )
        except DomainError:
            logger.warning("could not notify %s", recipient_id, exc_info=True)
            return None
