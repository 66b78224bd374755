from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class Whiteboard:
    board_id: int
    owner_id: str
    name: str
    snapshot: Optional[str]
    is_shared: bool = False
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def to_dict(self) -> dict:
        return {
            "id": self.board_id,
            "owner_id": self.owner_id,
            "name": self.name,
            "snapshot": self.snapshot,
            "is_shared": self.is_shared,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }
