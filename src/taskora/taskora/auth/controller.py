from __future__ import annotations

import logging

from flask import Flask, flash, g, redirect, render_template, request, session, url_for

from ..core.exceptions import AuthenticationError, ServiceError, SignupClosedError, ValidationError
from ..core.roles import landing_route, navigation_for
from ..container import Container
from .gate import protected

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    @app.before_request
    def load_session():
        if request.endpoint == "static":
            return None
        g.auth = container.new_session_provider()
        g.auth.restore(session.get("access_token"))
        if session.get("access_token") and not g.auth.is_authenticated and not g.auth.restore_failed:
            session.pop("access_token", None)
        return None

    @app.context_processor
    def inject_identity():
        auth = getattr(g, "auth", None)
        role = auth.role if auth else None
        return {
            "auth": auth,
            "current_role": role,
            "nav_items": navigation_for(role) if auth and auth.is_authenticated else [],
        }

    @app.route("/", endpoint="landing")
    def landing():
        if g.auth.is_authenticated:
            return redirect(landing_route(g.auth.role))
        return render_template("landing.html")

    @app.route("/login", methods=["GET", "POST"], endpoint="login")
    def login():
        if g.auth.is_authenticated:
            return redirect(landing_route(g.auth.role))

        if request.method == "POST":
            email = request.form.get("email", "")
            password = request.form.get("password", "")
            try:
                auth_session = g.auth.sign_in(email, password)
                session.permanent = True
                session["access_token"] = auth_session.access_token
                flash("Signed in successfully.", "success")
                return redirect(landing_route(g.auth.role))
            except AuthenticationError as e:
                flash(str(e), "danger")
            except ServiceError:
                logger.exception("sign-in failed")
                flash("The sign-in service is unavailable. Please try again.", "danger")

        return render_template("login.html")

    @app.route("/signup", methods=["GET", "POST"], endpoint="signup")
    def signup():
        if g.auth.is_authenticated:
            return redirect(landing_route(g.auth.role))

        try:
            closed = g.auth.super_admin_exists()
        except ServiceError:
            logger.exception("super admin check failed")
            flash("Registration is temporarily unavailable.", "danger")
            return render_template("signup.html", signup_closed=True)

        if closed:
            return render_template("signup.html", signup_closed=True)

        if request.method == "POST":
            form = request.form
            try:
                auth_session = g.auth.sign_up(
                    form.get("email", ""),
                    form.get("password", ""),
                    form.get("full_name", ""),
                    form.get("company_name", ""),
                )
                session.permanent = True
                session["access_token"] = auth_session.access_token
                flash("Workspace created. Welcome to Taskora!", "success")
                return redirect(landing_route(g.auth.role))
            except SignupClosedError as e:
                flash(str(e), "info")
                return render_template("signup.html", signup_closed=True)
            except ValidationError as e:
                flash(str(e), "warning")
            except (AuthenticationError, ServiceError):
                logger.exception("sign-up failed")
                flash("Registration failed. Please try again.", "danger")

        return render_template("signup.html", signup_closed=False)

    @app.route("/logout", endpoint="logout")
    def logout():
        g.auth.sign_out()
        session.clear()
        flash("You have been signed out.", "info")
        return redirect(url_for("login"))

    @app.route("/dashboard", endpoint="dashboard")
    @protected()
    def dashboard():
        return redirect(landing_route(g.auth.role))
