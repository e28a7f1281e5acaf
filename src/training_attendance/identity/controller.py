from __future__ import annotations

from flask import Flask, jsonify

from ..container import Container
from .access import current_user, make_auth_required


def register(app: Flask, container: Container) -> None:
    auth_required = make_auth_required(container)

    @app.route("/api/auth/sync", methods=["POST"], endpoint="auth_sync")
    @auth_required()
    def auth_sync():
        # Reaching here means the identity was resolved (or provisioned).
        return jsonify({"success": True, "user": current_user().to_dict()}), 200
