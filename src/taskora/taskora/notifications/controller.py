from __future__ import annotations

import logging

from flask import Flask, flash, g, redirect, render_template, request, url_for

from ..auth.gate import protected
from ..core.exceptions import ServiceError, ValidationError
from ..container import Container

logger = logging.getLogger(__name__)

CATEGORY_ICONS = {
    "task": "check-square",
    "user": "user",
    "file": "file-text",
    "message": "message-circle",
}


def register(app: Flask, container: Container) -> None:
    service = container.notification_service

    @app.route("/notifications", endpoint="notifications")
    @protected("notifications")
    def notifications():
        tab = request.args.get("tab", "all")
        try:
            items = service.list_for(g.auth.user_id, unread_only=(tab == "unread"))
            unread = service.unread_count(g.auth.user_id)
        except ServiceError:
            logger.exception("loading notifications failed")
            flash("Could not load notifications.", "danger")
            items, unread = [], 0
        return render_template(
            "notifications.html",
            active_page="notifications",
            items=items,
            unread=unread,
            tab=tab,
            icons=CATEGORY_ICONS,
        )

    @app.route("/notifications/<int:notification_id>/read", methods=["POST"], endpoint="notification_read")
    @protected("notifications")
    def notification_read(notification_id: int):
        try:
            service.mark_read(g.auth.user_id, notification_id)
        except ValidationError as e:
            flash(str(e), "warning")
        except ServiceError:
            logger.exception("mark read failed")
            flash("Could not update the notification.", "danger")
        return redirect(url_for("notifications", tab=request.args.get("tab", "all")))

    @app.route("/notifications/read-all", methods=["POST"], endpoint="notifications_read_all")
    @protected("notifications")
    def notifications_read_all():
        try:
            service.mark_all_read(g.auth.user_id)
            flash("All notifications marked as read.", "success")
        except ServiceError:
            logger.exception("mark all read failed")
            flash("Could not update notifications.", "danger")
        return redirect(url_for("notifications"))

    @app.route("/notifications/<int:notification_id>/delete", methods=["POST"], endpoint="notification_delete")
    @protected("notifications")
    def notification_delete(notification_id: int):
        try:
            service.delete(g.auth.user_id, notification_id)
        except ValidationError as e:
            flash(str(e), "warning")
        except ServiceError:
            logger.exception("delete notification failed")
            flash("Could not delete the notification.", "danger")
        return redirect(url_for("notifications", tab=request.args.get("tab", "all")))
