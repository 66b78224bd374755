from __future__ import annotations

from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import FileRecord
from .repository import FileRepository

_COLUMNS = "file_id, owner_id, name, mime_type, size_bytes, storage_path, subject, created_at"


def _to_record(r: dict) -> FileRecord:
    return FileRecord(
        file_id=int(r["file_id"]),
        owner_id=r["owner_id"],
        name=r["name"],
        mime_type=r["mime_type"],
        size_bytes=int(r["size_bytes"]),
        storage_path=r["storage_path"],
        subject=r.get("subject"),
        created_at=r.get("created_at"),
    )


class MySQLFileRepository(FileRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_all(self) -> Sequence[FileRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM file_metadata ORDER BY created_at DESC, file_id DESC")
            return [_to_record(r) for r in fetchall(cur)]

    def list_by_owner(self, owner_id: str) -> Sequence[FileRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM file_metadata WHERE owner_id=%s", (owner_id,))
            return [_to_record(r) for r in fetchall(cur)]

    def get(self, file_id: int) -> Optional[FileRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM file_metadata WHERE file_id=%s", (file_id,))
            r = fetchone(cur)
            return _to_record(r) if r else None

    def get_by_path(self, storage_path: str) -> Optional[FileRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM file_metadata WHERE storage_path=%s", (storage_path,))
            r = fetchone(cur)
            return _to_record(r) if r else None

    def create(
        self,
        *,
        owner_id: str,
        name: str,
        mime_type: str,
        size_bytes: int,
        storage_path: str,
        subject: Optional[str],
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO file_metadata(owner_id, name, mime_type, size_bytes, storage_path, subject)
                VALUES(%s,%s,%s,%s,%s,%s)
                """,
                (owner_id, name, mime_type, int(size_bytes), storage_path, subject),
            )
            return int(cur.lastrowid)

    def delete(self, file_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM file_metadata WHERE file_id=%s", (file_id,))
            return cur.rowcount > 0
