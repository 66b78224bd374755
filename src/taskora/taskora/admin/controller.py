from __future__ import annotations

import logging

from flask import Flask, jsonify, request

from ..core.exceptions import DomainError
from ..container import Container

logger = logging.getLogger(__name__)


def _bearer_token() -> str:
    header = request.headers.get("Authorization", "")
    scheme, _, token = header.partition(" ")
    if scheme.lower() != "bearer":
        return ""
    return token.strip()


def register(app: Flask, container: Container) -> None:
    @app.route("/functions/v1/create-user", methods=["POST"], endpoint="fn_create_user")
    def fn_create_user():
        body = request.get_json(silent=True) or {}
        try:
            principal = container.admin_functions.create_user(
                _bearer_token(),
                email=body.get("email", ""),
                password=body.get("password", ""),
                full_name=body.get("fullName", ""),
                role=body.get("role", ""),
                manager_id=body.get("managerId"),
            )
        except DomainError as e:
            return jsonify({"error": str(e)}), 400
        return jsonify({"success": True, "userId": principal.user_id})

    @app.route("/functions/v1/delete-user", methods=["POST"], endpoint="fn_delete_user")
    def fn_delete_user():
        body = request.get_json(silent=True) or {}
        try:
            container.admin_functions.delete_user(_bearer_token(), body.get("userId", ""))
        except DomainError as e:
            return jsonify({"error": str(e)}), 400
        return jsonify({"success": True})
