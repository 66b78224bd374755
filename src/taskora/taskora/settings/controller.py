from __future__ import annotations

import logging

from flask import Flask, flash, g, redirect, render_template, request, url_for

from ..auth.gate import protected
from ..core.exceptions import ServiceError, ValidationError
from ..container import Container

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    @app.route("/settings", endpoint="settings")
    @protected("settings")
    def settings():
        return render_template("settings.html", active_page="settings", profile=g.auth.profile)

    @app.route("/settings/profile", methods=["POST"], endpoint="settings_profile")
    @protected("settings")
    def settings_profile():
        try:
            container.user_service.update_profile(
                g.auth.user_id,
                full_name=request.form.get("full_name", ""),
                company_name=request.form.get("company_name", ""),
            )
            flash("Profile updated.", "success")
        except ValidationError as e:
            flash(str(e), "warning")
        except ServiceError:
            logger.exception("profile update failed")
            flash("Could not update your profile.", "danger")
        return redirect(url_for("settings"))

    @app.route("/settings/password", methods=["POST"], endpoint="settings_password")
    @protected("settings")
    def settings_password():
        new_password = request.form.get("new_password", "")
        try:
            if new_password != request.form.get("confirm_password", ""):
                raise ValidationError("Passwords do not match")
            container.identity_service.update_password(g.auth.user_id, new_password)
            flash("Password changed.", "success")
        except ValidationError as e:
            flash(str(e), "warning")
        except ServiceError:
            logger.exception("password change failed")
            flash("Could not change your password.", "danger")
        return redirect(url_for("settings"))
