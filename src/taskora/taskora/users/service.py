from __future__ import annotations

import logging
from typing import Dict, List, Optional

from ..common.validators import require_non_empty
from ..core.enums import Role
from ..core.exceptions import AuthorizationError, ValidationError
from ..core.roles import parse_role
from .model import Profile, StaffMember
from .repository import ProfileRepository, RoleRepository

logger = logging.getLogger(__name__)


class UserService:
    """Use case: staff directory, own profile and account activation."""

    def __init__(self, profiles: ProfileRepository, roles: RoleRepository):
        self._profiles = profiles
        self._roles = roles

    def _join(self, profiles) -> List[StaffMember]:
        roles = self._roles.list_all()
        return [StaffMember(profile=p, role=parse_role(roles.get(p.user_id))) for p in profiles]

    def get_profile(self, user_id: str) -> Optional[Profile]:
        return self._profiles.get(user_id)

    def directory(self, term: str = "") -> List[StaffMember]:
        members = self._join(self._profiles.list_all())
        needle = (term or "").strip().lower()
        if not needle:
            return members
        return [
            m for m in members
            if needle in m.profile.full_name.lower() or needle in m.profile.email.lower()
        ]

    def team_for(self, manager_id: str) -> List[StaffMember]:
        return self._join(self._profiles.list_by_manager(manager_id))

    def managers(self) -> List[StaffMember]:
        return [m for m in self.directory() if m.role == Role.MANAGER]

    def role_counts(self) -> Dict[str, int]:
        counts = {r.value: 0 for r in Role}
        for m in self.directory():
            key = m.role.value if m.role else "unassigned"
            counts[key] = counts.get(key, 0) + 1
        return counts

    def update_profile(self, user_id: str, *, full_name: str, company_name: Optional[str]) -> None:
        full_name = require_non_empty(full_name, "Full name")
        company_name = (company_name or "").strip() or None
        if not self._profiles.update(user_id, full_name=full_name, company_name=company_name):
            raise ValidationError("Profile not found")

    def set_active(self, *, current_role: Optional[Role], current_user_id: str, user_id: str, is_active: bool) -> None:
        if current_role != Role.SUPER_ADMIN:
            raise AuthorizationError("Only the super admin can change account status")
        if user_id == current_user_id:
            raise ValidationError("You cannot deactivate your own account")
        if not self._profiles.set_active(user_id, is_active=is_active):
            raise ValidationError("Staff member not found")
        logger.info("user %s active=%s", user_id, is_active)
