from __future__ import annotations

import logging

from flask import Flask, flash, g, redirect, render_template, request, session, url_for

from ..auth.gate import protected
from ..core.enums import Role
from ..core.exceptions import AuthenticationError, AuthorizationError, ServiceError, ValidationError
from ..container import Container

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    users = container.user_service
    admin = container.admin_functions

    @app.route("/staff", endpoint="staff")
    @protected("staff")
    def staff():
        term = request.args.get("q", "")
        try:
            members = users.directory(term)
            managers = users.managers()
        except ServiceError:
            logger.exception("loading staff failed")
            flash("Could not load the staff directory.", "danger")
            members, managers = [], []
        return render_template(
            "staff.html",
            active_page="staff",
            members=members,
            managers=managers,
            term=term,
            is_super_admin=g.auth.role == Role.SUPER_ADMIN,
        )

    @app.route("/staff/create", methods=["POST"], endpoint="staff_create")
    @protected([Role.SUPER_ADMIN])
    def staff_create():
        form = request.form
        try:
            admin.create_user(
                session.get("access_token"),
                email=form.get("email", ""),
                password=form.get("password", ""),
                full_name=form.get("full_name", ""),
                role=form.get("role", ""),
                manager_id=form.get("manager_id"),
            )
            flash("Account created.", "success")
        except (ValidationError, AuthorizationError, AuthenticationError) as e:
            flash(str(e), "warning")
        except ServiceError:
            logger.exception("create user failed")
            flash("Could not create the account.", "danger")
        return redirect(url_for("staff"))

    @app.route("/staff/<user_id>/delete", methods=["POST"], endpoint="staff_delete")
    @protected([Role.SUPER_ADMIN])
    def staff_delete(user_id: str):
        try:
            admin.delete_user(session.get("access_token"), user_id)
            flash("Account removed.", "success")
        except (ValidationError, AuthorizationError, AuthenticationError) as e:
            flash(str(e), "warning")
        except ServiceError:
            logger.exception("delete user failed")
            flash("Could not remove the account.", "danger")
        return redirect(url_for("staff"))

    @app.route("/staff/<user_id>/active", methods=["POST"], endpoint="staff_active")
    @protected([Role.SUPER_ADMIN])
    def staff_active(user_id: str):
        is_active = request.form.get("is_active") == "1"
        try:
            users.set_active(
                current_role=g.auth.role,
                current_user_id=g.auth.user_id,
                user_id=user_id,
                is_active=is_active,
            )
            flash("Account activated." if is_active else "Account deactivated.", "success")
        except (ValidationError, AuthorizationError) as e:
            flash(str(e), "warning")
        except ServiceError:
            logger.exception("set active failed")
            flash("Could not update the account.", "danger")
        return redirect(url_for("staff"))
