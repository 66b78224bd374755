from __future__ import annotations

import logging
from typing import Optional

from ..auth.model import Principal
from ..auth.service import IdentityService
from ..common.validators import require_email, require_non_empty, require_password
from ..core.enums import NotificationCategory, Role
from ..core.exceptions import AuthenticationError, AuthorizationError, DomainError, ValidationError
from ..core.roles import parse_role
from ..files.service import FileService
from ..notifications.service import NotificationService
from ..users.repository import ProfileRepository, RoleRepository

logger = logging.getLogger(__name__)

PROVISIONABLE_ROLES = (Role.MANAGER, Role.STAFF)


class AdminFunctions:
    """Privileged account provisioning.

    Each call re-checks the caller from its bearer token against the role
    table; nothing the browser claims about its role is trusted.
    """

    def __init__(
        self,
        identity: IdentityService,
        profiles: ProfileRepository,
        roles: RoleRepository,
        files: Optional[FileService] = None,
        notifications: Optional[NotificationService] = None,
    ):
        self._identity = identity
        self._profiles = profiles
        self._roles = roles
        self._files = files
        self._notifications = notifications

    def _require_super_admin(self, access_token: Optional[str], action: str) -> Principal:
        caller = self._identity.get_user(access_token)
        if not caller:
            raise AuthenticationError("Unauthorized")
        if parse_role(self._roles.get_role(caller.user_id)) != Role.SUPER_ADMIN:
            raise AuthorizationError(f"Only Super Admins can {action} users")
        return caller

    def create_user(
        self,
        access_token: Optional[str],
        *,
        email: str,
        password: str,
        full_name: str,
        role: str,
        manager_id: Optional[str] = None,
    ) -> Principal:
        self._require_super_admin(access_token, "create")

        if not email or not password or not full_name or not role:
            raise ValidationError("Missing required fields")
        email = require_email(email)
        require_password(password)
        full_name = require_non_empty(full_name, "Full name")
        new_role = parse_role(role)
        if new_role not in PROVISIONABLE_ROLES:
            raise ValidationError("Invalid role. Must be 'manager' or 'staff'")
        manager_id = (manager_id or "").strip() or None
        if manager_id and not self._profiles.get(manager_id):
            raise ValidationError("Manager not found")

        principal = self._identity.create_account(email, password)
        try:
            self._profiles.create(
                user_id=principal.user_id,
                full_name=full_name,
                email=email,
                manager_id=manager_id,
            )
            self._roles.assign(principal.user_id, new_role)
        except DomainError:
            logger.error("provisioning %s failed; removing account", principal.user_id)
            try:
                self._identity.delete_account(principal.user_id)
            except DomainError:
                logger.exception("could not remove orphaned account %s", principal.user_id)
            raise

        logger.info("created %s user %s", new_role.value, principal.user_id)
        if self._notifications is not None:
            self._notifications.notify(
                principal.user_id,
                NotificationCategory.USER,
                "Welcome to Taskora",
                "Your account is ready. Check in from the Attendance page.",
            )
        return principal

    def delete_user(self, access_token: Optional[str], user_id: str) -> None:
        caller = self._require_super_admin(access_token, "delete")

        user_id = (user_id or "").strip()
        if not user_id:
            raise ValidationError("Missing user ID")
        if user_id == caller.user_id:
            raise ValidationError("Cannot delete your own account")
        if parse_role(self._roles.get_role(user_id)) == Role.SUPER_ADMIN:
            raise ValidationError("Cannot delete another Super Admin")

        # rows cascade with the account; objects go only once that succeeded
        paths = self._files.storage_paths_of(user_id) if self._files is not None else []
        if not self._identity.delete_account(user_id):
            raise ValidationError("User not found")
        logger.info("deleted user %s", user_id)
        if paths:
            self._files.purge_objects(paths)
