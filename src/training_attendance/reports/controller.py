from __future__ import annotations

from flask import Flask, jsonify

from ..container import Container
from ..core.enums import Role
from ..identity.access import make_auth_required


def register(app: Flask, container: Container) -> None:
    auth_required = make_auth_required(container)

    @app.route("/api/admin/dashboard/stats", methods=["GET"], endpoint="dashboard_stats")
    @auth_required(Role.ADMIN)
    def dashboard_stats():
        return jsonify(container.dashboard_service.build_stats().to_dict()), 200
