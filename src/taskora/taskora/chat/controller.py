from __future__ import annotations

import json
import logging

from flask import Flask, Response, g, jsonify, redirect, render_template, request, stream_with_context, url_for

from ..auth.gate import protected
from ..core.exceptions import ServiceError, ValidationError
from ..container import Container
from .sse import DONE_SENTINEL

logger = logging.getLogger(__name__)

QUICK_ACTIONS = (
    ("help-circle", "How to use Taskora?", "How do I use Taskora?"),
    ("file-text", "Create a task", "How do I create a new task?"),
    ("users", "Manage team", "How do I manage my team members?"),
    ("clock", "Track attendance", "How does attendance tracking work?"),
)


def _event(data: dict) -> str:
    return f"data: {json.dumps(data)}\n\n"


def register(app: Flask, container: Container) -> None:
    service = container.chat_service

    @app.route("/assistant", endpoint="assistant")
    @protected("assistant")
    def assistant():
        conversation = service.conversation_for(g.auth.user_id)
        return render_template(
            "assistant.html",
            active_page="assistant",
            messages=conversation.messages,
            busy=conversation.busy,
            quick_actions=QUICK_ACTIONS,
        )

    @app.route("/assistant/reset", methods=["POST"], endpoint="assistant_reset")
    @protected("assistant")
    def assistant_reset():
        service.reset(g.auth.user_id)
        return redirect(url_for("assistant"))

    @app.route("/api/chat", methods=["POST"], endpoint="api_chat")
    @protected("assistant", api=True)
    def api_chat():
        body = request.get_json(silent=True) or {}
        conversation = service.conversation_for(g.auth.user_id)
        try:
            pieces = conversation.send(str(body.get("message", "")))
        except ValidationError as e:
            return jsonify({"error": str(e)}), 409 if conversation.busy else 400
        turn = conversation.active_turn

        def generate():
            try:
                for piece in pieces:
                    yield _event({"choices": [{"delta": {"content": piece}}]})
            except ServiceError as e:
                logger.warning("assistant stream failed: %s", e)
                yield _event({"error": str(e)})
            yield f"data: {DONE_SENTINEL}\n\n"

        response = Response(
            stream_with_context(generate()),
            mimetype="text/event-stream",
            headers={"Cache-Control": "no-cache", "X-Accel-Buffering": "no"},
        )
        # a client that disconnects before the first chunk never starts the stream
        response.call_on_close(lambda: conversation.release(turn))
        return response

    @app.route("/chat", endpoint="chat")
    @protected("chat")
    def chat():
        return render_template("chat.html", active_page="chat")
