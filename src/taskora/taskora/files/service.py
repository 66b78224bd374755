from __future__ import annotations

import logging
from typing import List, Optional, Tuple

from werkzeug.utils import secure_filename

from ..core.constants import DEFAULT_MAX_UPLOAD_BYTES
from ..core.enums import Role
from ..core.exceptions import AuthorizationError, DomainError, ValidationError
from .model import FileRecord
from .repository import FileRepository
from .storage import LocalObjectStorage, build_object_name

logger = logging.getLogger(__name__)


class FileService:
    def __init__(
        self,
        files: FileRepository,
        storage: LocalObjectStorage,
        *,
        max_upload_bytes: int = DEFAULT_MAX_UPLOAD_BYTES,
        signed_url_ttl: Optional[int] = None,
    ):
        self._files = files
        self._storage = storage
        self._max_upload_bytes = int(max_upload_bytes)
        self._signed_url_ttl = signed_url_ttl

    def list_files(self, term: str = "") -> List[FileRecord]:
        records = list(self._files.list_all())
        needle = (term or "").strip().lower()
        if not needle:
            return records
        return [r for r in records if needle in r.name.lower() or needle in (r.subject or "").lower()]

    def upload(
        self,
        *,
        owner_id: str,
        filename: str,
        data: bytes,
        mime_type: Optional[str] = None,
        subject: Optional[str] = None,
    ) -> int:
        """Store the object, then its metadata; the object is removed again if the row fails."""
        name = (filename or "").strip()
        if not name:
            raise ValidationError("Choose a file to upload")
        if not data:
            raise ValidationError("The file is empty")
        if len(data) > self._max_upload_bytes:
            raise ValidationError(f"Files are limited to {self._max_upload_bytes // (1024 * 1024)} MB")

        path = build_object_name(owner_id, secure_filename(name) or "file.bin")
        self._storage.upload(path, data)
        try:
            file_id = self._files.create(
                owner_id=owner_id,
                name=name,
                mime_type=mime_type or "application/octet-stream",
                size_bytes=len(data),
                storage_path=path,
                subject=(subject or "").strip() or None,
            )
        except DomainError:
            self._storage.remove([path])
            raise
        logger.info("file %s uploaded by %s (%d bytes)", file_id, owner_id, len(data))
        return file_id

    def _get(self, file_id: int) -> FileRecord:
        record = self._files.get(file_id)
        if not record:
            raise ValidationError("File not found")
        return record

    def delete(self, *, current_user_id: str, current_role: Optional[Role], file_id: int) -> None:
        record = self._get(file_id)
        if record.owner_id != current_user_id and current_role != Role.SUPER_ADMIN:
            raise AuthorizationError("Only the owner can delete this file")
        self._files.delete(file_id)
        try:
            self._storage.remove([record.storage_path])
        except DomainError:
            logger.warning("object %s left behind after deleting file %s", record.storage_path, file_id)

    def signed_url(self, file_id: int) -> str:
        return self._storage.create_signed_url(self._get(file_id).storage_path, self._signed_url_ttl)

    def download(self, file_id: int) -> Tuple[FileRecord, bytes]:
        record = self._get(file_id)
        return record, self._storage.download(record.storage_path)

    def open_signed(self, path: str, expires: str, signature: str) -> Tuple[FileRecord, bytes]:
        if not self._storage.verify_signed(path, expires, signature):
            raise AuthorizationError("This link is invalid or has expired")
        record = self._files.get_by_path(path)
        if not record:
            raise ValidationError("File not found")
        return record, self._storage.download(path)

    def storage_paths_of(self, owner_id: str) -> List[str]:
        return [r.storage_path for r in self._files.list_by_owner(owner_id)]

    def purge_objects(self, paths: List[str]) -> None:
        """Best-effort removal of objects whose rows are already gone."""
        try:
            self._storage.remove(paths)
        except DomainError:
            logger.warning("could not remove %d stored objects", len(paths), exc_info=True)
