"""Role table shared by the authorization gate and the navigation menu.

Every route the application protects is declared once in ``ROUTES``. The gate
reads ``allowed_roles`` from here and the sidebar is derived from the same
rows, so a menu entry always points at a page the gate accepts.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .enums import Role

ALL_ROLES: frozenset[Role] = frozenset(Role)
ADMINS: frozenset[Role] = frozenset({Role.SUPER_ADMIN})
MANAGEMENT: frozenset[Role] = frozenset({Role.SUPER_ADMIN, Role.MANAGER})

DEFAULT_LANDING_ROUTE = "/staff-dashboard"

LANDING_ROUTES: dict[Role, str] = {
    Role.SUPER_ADMIN: "/admin",
    Role.MANAGER: "/manager",
    Role.STAFF: DEFAULT_LANDING_ROUTE,
}


@dataclass(frozen=True)
class RouteSpec:
    key: str
    path: str
    label: str
    icon: str
    allowed_roles: frozenset[Role]
    in_menu: bool = True
    coming_soon: bool = False


@dataclass(frozen=True)
class NavEntry:
    icon: str
    label: str
    path: str
    coming_soon: bool = False


ROUTES: tuple[RouteSpec, ...] = (
    RouteSpec("admin", "/admin", "Dashboard", "layout-dashboard", ADMINS),
    RouteSpec("manager", "/manager", "Dashboard", "layout-dashboard", frozenset({Role.MANAGER})),
    RouteSpec("staff_dashboard", "/staff-dashboard", "Dashboard", "layout-dashboard", frozenset({Role.STAFF})),
    RouteSpec("staff", "/staff", "Staff", "users", MANAGEMENT),
    RouteSpec("tasks", "/tasks", "Tasks", "check-square", ALL_ROLES),
    RouteSpec("attendance", "/attendance", "Attendance", "clock", ALL_ROLES),
    RouteSpec("files", "/files", "Files", "folder-open", ALL_ROLES),
    RouteSpec("whiteboard", "/whiteboard", "Whiteboard", "palette", ALL_ROLES),
    RouteSpec("assistant", "/assistant", "AI Assistant", "bot", ALL_ROLES),
    RouteSpec("chat", "/chat", "Chat", "message-circle", ALL_ROLES, coming_soon=True),
    RouteSpec("notifications", "/notifications", "Notifications", "bell", ALL_ROLES),
    RouteSpec("settings", "/settings", "Settings", "settings", ALL_ROLES),
)

_BY_KEY: dict[str, RouteSpec] = {r.key: r for r in ROUTES}
_BY_PATH: dict[str, RouteSpec] = {r.path: r for r in ROUTES}

if set(LANDING_ROUTES) != set(Role):
    raise RuntimeError("LANDING_ROUTES must cover every role")
for _role, _path in LANDING_ROUTES.items():
    if _role not in _BY_PATH[_path].allowed_roles:
        raise RuntimeError(f"Landing route {_path} rejects its own role {_role.value}")


def parse_role(value: Optional[str]) -> Optional[Role]:
    """Return the Role for a stored value, or None when unknown/missing."""
    if not value:
        return None
    try:
        return Role(value)
    except ValueError:
        return None


def landing_route(role: Optional[Role]) -> str:
    if role is None:
        return DEFAULT_LANDING_ROUTE
    return LANDING_ROUTES[role]


def route(key: str) -> RouteSpec:
    return _BY_KEY[key]


def allowed_roles_for(path: str) -> Optional[frozenset[Role]]:
    spec = _BY_PATH.get(path)
    return spec.allowed_roles if spec else None


def can_access(role: Optional[Role], path: str) -> bool:
    allowed = allowed_roles_for(path)
    if allowed is None:
        return role is not None
    return role is not None and role in allowed


def navigation_for(role: Optional[Role]) -> list[NavEntry]:
    """Sidebar entries for a role, in menu order.

    An unresolved role gets an empty menu.
    """
    if role is None:
        return []
    return [
        NavEntry(icon=r.icon, label=r.label, path=r.path, coming_soon=r.coming_soon)
        for r in ROUTES
        if r.in_menu and role in r.allowed_roles
    ]
