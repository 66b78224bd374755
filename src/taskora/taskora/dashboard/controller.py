from __future__ import annotations

import logging

from flask import Flask, flash, g, render_template

from ..auth.gate import protected
from ..core.exceptions import ServiceError
from ..container import Container

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    service = container.dashboard_service

    def _render(template: str, page: str, load):
        try:
            overview = load()
        except ServiceError:
            logger.exception("loading %s failed", page)
            flash("Could not load the dashboard.", "danger")
            overview = None
        return render_template(template, active_page=page, overview=overview, profile=g.auth.profile)

    @app.route("/admin", endpoint="admin_dashboard")
    @protected("admin")
    def admin_dashboard():
        return _render("admin.html", "admin", service.admin_overview)

    @app.route("/manager", endpoint="manager_dashboard")
    @protected("manager")
    def manager_dashboard():
        return _render("manager.html", "manager", lambda: service.manager_overview(g.auth.user_id))

    @app.route("/staff-dashboard", endpoint="staff_dashboard")
    @protected("staff_dashboard")
    def staff_dashboard():
        return _render("staff_dashboard.html", "staff_dashboard", lambda: service.staff_overview(g.auth.user_id))
