from __future__ import annotations

from typing import Optional, Sequence

from ..core.enums import NotificationCategory
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall
from .model import Notification
from .repository import NotificationRepository


class MySQLNotificationRepository(NotificationRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_for(self, recipient_id: str, *, unread_only: bool = False) -> Sequence[Notification]:
        sql = """
            SELECT notification_id, recipient_id, category, title, description, is_read, created_at
            FROM notifications
            WHERE recipient_id=%s
        """
        if unread_only:
            sql += " AND is_read=0"
        sql += " ORDER BY created_at DESC, notification_id DESC"
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, (recipient_id,))
            return [
                Notification(
                    notification_id=int(r["notification_id"]),
                    recipient_id=r["recipient_id"],
                    category=NotificationCategory(r["category"]),
                    title=r["title"],
                    description=r.get("description"),
                    is_read=bool(r["is_read"]),
                    created_at=r.get("created_at"),
                )
                for r in fetchall(cur)
            ]

    def create(
        self,
        *,
        recipient_id: str,
        category: NotificationCategory,
        title: str,
        description: Optional[str],
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "INSERT INTO notifications(recipient_id, category, title, description) VALUES(%s,%s,%s,%s)",
                (recipient_id, category.value, title, description),
            )
            return int(cur.lastrowid)

    def mark_read(self, recipient_id: str, notification_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE notifications SET is_read=1 WHERE notification_id=%s AND recipient_id=%s",
                (notification_id, recipient_id),
            )
            return cur.rowcount > 0

    def mark_all_read(self, recipient_id: str) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE notifications SET is_read=1 WHERE recipient_id=%s AND is_read=0", (recipient_id,))
            return cur.rowcount

    def delete(self, recipient_id: str, notification_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "DELETE FROM notifications WHERE notification_id=%s AND recipient_id=%s",
                (notification_id, recipient_id),
            )
            return cur.rowcount > 0
