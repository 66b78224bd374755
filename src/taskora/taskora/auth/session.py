from __future__ import annotations

import logging
from typing import Optional

from ..common.validators import require_email, require_non_empty, require_password
from ..core.enums import Role
from ..core.exceptions import ConflictError, DomainError, ServiceError, SignupClosedError
from ..core.roles import parse_role
from ..users.model import Profile
from ..users.repository import ProfileRepository, RoleRepository
from .model import AuthSession, Principal
from .service import IdentityService

logger = logging.getLogger(__name__)

SIGNUP_CLOSED_MESSAGE = (
    "Registration is closed: this workspace already has a super admin. "
    "Ask your administrator to create an account for you."
)


class SessionProvider:
    """Current principal, its profile and its resolved role.

    One provider is built per request. ``loading`` stays True until
    ``restore`` has run; views must not decide anything before that. When the
    identity store cannot be reached ``restore_failed`` is set and the
    provider stays loading, so the stored token is kept for a retry.
    State changes only through the methods below.
    """

    def __init__(self, identity: IdentityService, profiles: ProfileRepository, roles: RoleRepository):
        self._identity = identity
        self._profiles = profiles
        self._roles = roles

        self.loading = True
        self.restore_failed = False
        self.user: Optional[Principal] = None
        self.access_token: Optional[str] = None
        self.profile: Optional[Profile] = None
        self.role: Optional[Role] = None

    @property
    def is_authenticated(self) -> bool:
        return self.user is not None

    @property
    def user_id(self) -> Optional[str]:
        return self.user.user_id if self.user else None

    def restore(self, access_token: Optional[str]) -> None:
        try:
            user = self._identity.get_user(access_token) if access_token else None
        except ServiceError:
            logger.warning("session restore failed", exc_info=True)
            self.restore_failed = True
            return
        try:
            if user:
                self.user = user
                self.access_token = access_token
                self._load_identity()
        finally:
            self.loading = False

    def _load_identity(self) -> None:
        # a failed lookup leaves role None, which the gate never grants
        self.profile = None
        self.role = None
        try:
            self.profile = self._profiles.get(self.user.user_id)
            self.role = parse_role(self._roles.get_role(self.user.user_id))
        except DomainError:
            logger.warning("could not load profile/role for %s", self.user.user_id, exc_info=True)

    def sign_in(self, email: str, password: str) -> AuthSession:
        session = self._identity.sign_in(email, password)
        self.user = Principal(user_id=session.user_id, email=session.email)
        self.access_token = session.access_token
        self.loading = False
        self._load_identity()
        return session

    def super_admin_exists(self) -> bool:
        return self._roles.super_admin_exists()

    def sign_up(self, email: str, password: str, full_name: str, company_name: str) -> AuthSession:
        """Register the workspace owner.

        Only the first account may sign up; it becomes the super admin. The
        existence check runs before any account is created. The role table
        itself rejects a second super admin, so a lost race removes the new
        account again and reports the same closed-registration error.
        """
        email = require_email(email)
        require_password(password)
        full_name = require_non_empty(full_name, "Full name")
        company_name = require_non_empty(company_name, "Company name")

        if self.super_admin_exists():
            raise SignupClosedError(SIGNUP_CLOSED_MESSAGE)

        principal = self._identity.sign_up(email, password)
        try:
            self._profiles.create(
                user_id=principal.user_id,
                full_name=full_name,
                email=email,
                company_name=company_name,
            )
            self._roles.assign(principal.user_id, Role.SUPER_ADMIN)
        except ConflictError as e:
            logger.warning("super admin already taken; removing account %s", principal.user_id)
            self._identity.delete_account(principal.user_id)
            raise SignupClosedError(SIGNUP_CLOSED_MESSAGE) from e
        except DomainError:
            self._identity.delete_account(principal.user_id)
            raise

        return self.sign_in(email, password)

    def sign_out(self) -> None:
        token = self.access_token
        try:
            self._identity.sign_out(token)
        except DomainError:
            logger.warning("session revoke failed", exc_info=True)
        finally:
            self.user = None
            self.access_token = None
            self.profile = None
            self.role = None
            self.loading = False
