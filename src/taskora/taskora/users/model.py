from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import Role


@dataclass(frozen=True)
class Profile:
    """One per principal; ``manager_id`` points at the profile this one reports to."""

    user_id: str
    full_name: str
    email: str
    company_name: Optional[str] = None
    manager_id: Optional[str] = None
    is_active: bool = True
    created_at: Optional[datetime] = None


@dataclass(frozen=True)
class RoleAssignment:
    user_id: str
    role: Role


@dataclass(frozen=True)
class StaffMember:
    """Directory row: profile joined with its role (None when unresolved)."""

    profile: Profile
    role: Optional[Role]

    @property
    def user_id(self) -> str:
        return self.profile.user_id
