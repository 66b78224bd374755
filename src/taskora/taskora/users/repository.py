from __future__ import annotations

from typing import Dict, Optional, Protocol, Sequence

from ..core.enums import Role
from .model import Profile


class ProfileRepository(Protocol):
    def get(self, user_id: str) -> Optional[Profile]:
        raise NotImplementedError

    def list_all(self) -> Sequence[Profile]:
        raise NotImplementedError

    def list_by_manager(self, manager_id: str) -> Sequence[Profile]:
        raise NotImplementedError

    def create(
        self,
        *,
        user_id: str,
        full_name: str,
        email: str,
        company_name: Optional[str] = None,
        manager_id: Optional[str] = None,
    ) -> None:
        raise NotImplementedError

    def update(self, user_id: str, *, full_name: str, company_name: Optional[str]) -> bool:
        raise NotImplementedError

    def set_active(self, user_id: str, *, is_active: bool) -> bool:
        raise NotImplementedError


class RoleRepository(Protocol):
    """Role rows. The store allows a single ``super_admin`` row."""

    def get_role(self, user_id: str) -> Optional[str]:
        """Raw stored value; callers parse it so unknown values degrade to None."""

        raise NotImplementedError

    def assign(self, user_id: str, role: Role) -> None:
        """Insert the role row.

        Raises ConflictError when the user already has a role or a second
        super admin would be created.
        """

        raise NotImplementedError

    def super_admin_exists(self) -> bool:
        raise NotImplementedError

    def list_all(self) -> Dict[str, str]:
        raise NotImplementedError
