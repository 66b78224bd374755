from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from functools import wraps
from typing import Iterable, Optional, Union

from flask import flash, g, jsonify, redirect, render_template, request

from ..core.constants import LOGIN_PATH
from ..core.enums import Role
from ..core.roles import landing_route, route
from .session import SessionProvider


class GateState(str, Enum):
    LOADING = "loading"
    UNAUTHENTICATED = "unauthenticated"
    AUTHORIZED = "authorized"
    FORBIDDEN = "forbidden"


@dataclass(frozen=True)
class GateDecision:
    state: GateState
    redirect_to: Optional[str] = None
    render: bool = False


class AuthorizationGate:
    """Decide whether a request may see a protected page."""

    def __init__(self, provider: SessionProvider):
        self._provider = provider

    def evaluate(self, path: str, allowed_roles: Optional[Iterable[Role]] = None) -> GateDecision:
        provider = self._provider
        if provider.loading:
            return GateDecision(GateState.LOADING)
        if not provider.is_authenticated:
            return GateDecision(GateState.UNAUTHENTICATED, redirect_to=LOGIN_PATH)

        role = provider.role
        if allowed_roles is not None and (role is None or role not in frozenset(allowed_roles)):
            target = landing_route(role)
            if target == path:
                # unresolved role on its own fallback page
                return GateDecision(GateState.FORBIDDEN)
            return GateDecision(GateState.AUTHORIZED, redirect_to=target)

        return GateDecision(GateState.AUTHORIZED, render=True)


def protected(route_or_roles: Union[str, Iterable[Role], None] = None, *, api: bool = False):
    """Guard a Flask view with the gate.

    ``route_or_roles`` is a key of the role table (``"tasks"``), an explicit
    role collection, or None for "any signed-in user". ``api`` views answer
    JSON instead of redirecting.
    """
    if isinstance(route_or_roles, str):
        allowed = route(route_or_roles).allowed_roles
    elif route_or_roles is None:
        allowed = None
    else:
        allowed = frozenset(route_or_roles)

    def decorator(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            decision = AuthorizationGate(g.auth).evaluate(request.path, allowed)

            if decision.render:
                return view(*args, **kwargs)

            if api:
                if decision.state is GateState.LOADING:
                    return jsonify({"error": "Session service unavailable. Please try again."}), 503
                if decision.state is GateState.UNAUTHENTICATED:
                    return jsonify({"error": "Not authenticated"}), 401
                return jsonify({"error": "Not allowed"}), 403

            if decision.state is GateState.LOADING:
                return render_template("loading.html"), 503
            if decision.state is GateState.UNAUTHENTICATED:
                flash("Please sign in to continue.", "warning")
                return redirect(decision.redirect_to)
            if decision.state is GateState.FORBIDDEN:
                return render_template("403.html"), 403
            return redirect(decision.redirect_to)

        return wrapper

    return decorator
