from __future__ import annotations

import logging

from flask import Flask, flash, g, jsonify, redirect, render_template, request, url_for

from ..auth.gate import protected
from ..common.datetime_utils import parse_optional_date
from ..core.enums import TaskPriority
from ..core.exceptions import AuthorizationError, ServiceError, ValidationError
from ..container import Container
from .service import TaskBoard

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    service = container.task_service

    @app.route("/tasks", endpoint="tasks")
    @protected("tasks")
    def tasks():
        try:
            board = TaskBoard.load(service)
            columns = board.columns()
        except ServiceError:
            logger.exception("loading tasks failed")
            flash("Could not load tasks.", "danger")
            columns = []
        return render_template(
            "tasks.html",
            active_page="tasks",
            columns=columns,
            priorities=[p.value for p in TaskPriority],
        )

    @app.route("/tasks/create", methods=["POST"], endpoint="task_create")
    @protected("tasks")
    def task_create():
        form = request.form
        try:
            service.create_task(
                created_by=g.auth.user_id,
                title=form.get("title", ""),
                description=form.get("description", ""),
                priority=form.get("priority"),
                due_date=parse_optional_date(form.get("due_date")),
            )
            flash("Task created.", "success")
        except ValueError:
            flash("Invalid due date.", "warning")
        except ValidationError as e:
            flash(str(e), "warning")
        except ServiceError:
            logger.exception("create task failed")
            flash("Could not create the task.", "danger")
        return redirect(url_for("tasks"))

    @app.route("/tasks/<int:task_id>/delete", methods=["POST"], endpoint="task_delete")
    @protected("tasks")
    def task_delete(task_id: int):
        try:
            service.delete_task(current_user_id=g.auth.user_id, task_id=task_id)
            flash("Task deleted.", "success")
        except (ValidationError, AuthorizationError) as e:
            flash(str(e), "warning")
        except ServiceError:
            logger.exception("delete task failed")
            flash("Could not delete the task.", "danger")
        return redirect(url_for("tasks"))

    @app.route("/api/tasks/<int:task_id>/status", methods=["POST"], endpoint="api_task_status")
    @protected("tasks", api=True)
    def api_task_status(task_id: int):
        body = request.get_json(silent=True) or {}
        try:
            board = TaskBoard.load(service)
        except ServiceError as e:
            return jsonify({"error": str(e)}), 502
        try:
            task = board.move(task_id, str(body.get("status", "")))
        except ValidationError as e:
            return jsonify({"error": str(e)}), 400
        except ServiceError as e:
            return jsonify({"error": str(e), "tasks": [t.to_dict() for t in board.tasks]}), 502
        return jsonify({"success": True, "task": task.to_dict()})
