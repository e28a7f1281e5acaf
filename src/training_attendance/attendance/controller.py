from __future__ import annotations

from flask import Flask, jsonify

from ..common.http import json_body
from ..common.validators import require_non_empty
from ..container import Container
from ..core.enums import Role
from ..identity.access import ensure_self_or_roles, make_auth_required


def register(app: Flask, container: Container) -> None:
    auth_required = make_auth_required(container)

    @app.route("/api/attendance/mark", methods=["POST"], endpoint="mark_attendance")
    @auth_required()
    def mark_attendance():
        data = json_body()
        user_id = require_non_empty(data.get("userId"), "userId")
        code = data.get("code")

        # Students mark for themselves; admins may mark on behalf of anyone.
        ensure_self_or_roles(user_id, Role.ADMIN)

        receipt = container.attendance_service.mark_attendance(user_id, code)
        return jsonify(receipt.to_dict()), 200

    @app.route("/api/attendance/stats/<user_id>", methods=["GET"], endpoint="attendance_stats")
    @auth_required()
    def attendance_stats(user_id: str):
        ensure_self_or_roles(user_id, Role.ADMIN, Role.TUTOR)
        return jsonify(container.eligibility_service.get_stats(user_id).to_dict()), 200

    @app.route("/api/attendance/student/<user_id>/sessions", methods=["GET"], endpoint="student_sessions")
    @auth_required()
    def student_sessions(user_id: str):
        ensure_self_or_roles(user_id, Role.ADMIN, Role.TUTOR)
        return jsonify(container.attendance_service.get_student_sessions(user_id)), 200
