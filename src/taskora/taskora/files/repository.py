from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import FileRecord


class FileRepository(Protocol):
    def list_all(self) -> Sequence[FileRecord]:
        raise NotImplementedError

    def list_by_owner(self, owner_id: str) -> Sequence[FileRecord]:
        raise NotImplementedError

    def get(self, file_id: int) -> Optional[FileRecord]:
        raise NotImplementedError

    def get_by_path(self, storage_path: str) -> Optional[FileRecord]:
        raise NotImplementedError

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
        raise NotImplementedError

    def delete(self, file_id: int) -> bool:
        raise NotImplementedError
