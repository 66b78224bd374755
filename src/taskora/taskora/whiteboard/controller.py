from __future__ import annotations

import logging

from flask import Flask, flash, g, jsonify, redirect, render_template, request, url_for

from ..auth.gate import protected
from ..core.exceptions import AuthorizationError, ServiceError, ValidationError
from ..container import Container

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    service = container.whiteboard_service

    @app.route("/whiteboard", endpoint="whiteboard")
    @protected("whiteboard")
    def whiteboard():
        selected = None
        try:
            boards = service.list_boards(g.auth.user_id)
            board_id = request.args.get("board", type=int)
            if board_id:
                selected = service.load(user_id=g.auth.user_id, board_id=board_id)
            elif boards:
                selected = boards[0]
        except ValidationError as e:
            flash(str(e), "warning")
        except ServiceError:
            logger.exception("loading whiteboards failed")
            flash("Could not load whiteboards.", "danger")
            boards = []
        return render_template(
            "whiteboard.html",
            active_page="whiteboard",
            boards=boards,
            selected=selected,
            autosave_delay=container.settings.autosave_delay_seconds,
        )

    @app.route("/whiteboard/create", methods=["POST"], endpoint="whiteboard_create")
    @protected("whiteboard")
    def whiteboard_create():
        try:
            board_id = service.create_board(owner_id=g.auth.user_id, name=request.form.get("name", ""))
            return redirect(url_for("whiteboard", board=board_id))
        except ValidationError as e:
            flash(str(e), "warning")
        except ServiceError:
            logger.exception("create whiteboard failed")
            flash("Could not create the whiteboard.", "danger")
        return redirect(url_for("whiteboard"))

    @app.route("/whiteboard/<int:board_id>/share", methods=["POST"], endpoint="whiteboard_share")
    @protected("whiteboard")
    def whiteboard_share(board_id: int):
        try:
            shared = service.toggle_shared(user_id=g.auth.user_id, board_id=board_id)
            flash("Whiteboard shared with the team." if shared else "Whiteboard is private now.", "success")
        except (ValidationError, AuthorizationError) as e:
            flash(str(e), "warning")
        except ServiceError:
            logger.exception("share whiteboard failed")
            flash("Could not update the whiteboard.", "danger")
        return redirect(url_for("whiteboard", board=board_id))

    @app.route("/whiteboard/<int:board_id>/delete", methods=["POST"], endpoint="whiteboard_delete")
    @protected("whiteboard")
    def whiteboard_delete(board_id: int):
        try:
            service.delete(user_id=g.auth.user_id, board_id=board_id)
            flash("Whiteboard deleted.", "success")
        except (ValidationError, AuthorizationError) as e:
            flash(str(e), "warning")
        except ServiceError:
            logger.exception("delete whiteboard failed")
            flash("Could not delete the whiteboard.", "danger")
        return redirect(url_for("whiteboard"))

    @app.route("/api/whiteboard/<int:board_id>", methods=["GET"], endpoint="api_whiteboard_get")
    @protected("whiteboard", api=True)
    def api_whiteboard_get(board_id: int):
        try:
            board = service.load(user_id=g.auth.user_id, board_id=board_id)
        except ValidationError as e:
            return jsonify({"error": str(e)}), 404
        except ServiceError as e:
            return jsonify({"error": str(e)}), 502
        return jsonify(board.to_dict())

    def _snapshot_call(fn, board_id: int, status: int):
        body = request.get_json(silent=True) or {}
        try:
            fn(user_id=g.auth.user_id, board_id=board_id, snapshot=body.get("snapshot", ""))
        except AuthorizationError as e:
            return jsonify({"error": str(e)}), 403
        except ValidationError as e:
            return jsonify({"error": str(e)}), 400
        except ServiceError as e:
            logger.exception("saving whiteboard %s failed", board_id)
            return jsonify({"error": str(e)}), 502
        return jsonify({"success": True}), status

    @app.route("/api/whiteboard/<int:board_id>/autosave", methods=["POST"], endpoint="api_whiteboard_autosave")
    @protected("whiteboard", api=True)
    def api_whiteboard_autosave(board_id: int):
        return _snapshot_call(service.queue_autosave, board_id, 202)

    @app.route("/api/whiteboard/<int:board_id>/save", methods=["POST"], endpoint="api_whiteboard_save")
    @protected("whiteboard", api=True)
    def api_whiteboard_save(board_id: int):
        return _snapshot_call(service.save, board_id, 200)
