from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class FileRecord:
    """Metadata row; the payload lives in object storage under ``storage_path``."""

    file_id: int
    owner_id: str
    name: str
    mime_type: str
    size_bytes: int
    storage_path: str
    subject: Optional[str] = None
    created_at: Optional[datetime] = None

    @property
    def size_label(self) -> str:
        size = float(self.size_bytes)
        for unit in ("B", "KB", "MB"):
            if size < 1024:
                return f"{size:.0f} {unit}" if unit == "B" else f"{size:.1f} {unit}"
            size /= 1024
        return f"{size:.1f} GB"
