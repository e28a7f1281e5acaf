from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.http import json_body
from ..container import Container
from ..core.enums import Role
from ..identity.access import current_user, make_auth_required


def register(app: Flask, container: Container) -> None:
    auth_required = make_auth_required(container)

    @app.route("/api/attendance/sessions", methods=["POST"], endpoint="create_session")
    @auth_required(Role.ADMIN, Role.TUTOR)
    def create_session():
        data = json_body()
        session = container.session_service.create_session(
            domain_id=data.get("domainId"),
            batch_id=data.get("batchId"),
            date=data.get("date"),
            time=data.get("time"),
            duration_minutes=data.get("durationMinutes"),
            meet_link=data.get("meetLink"),
            actor=current_user(),
        )
        return jsonify(session.to_dict()), 201

    @app.route("/api/attendance/sessions", methods=["GET"], endpoint="list_sessions")
    @auth_required(Role.ADMIN, Role.TUTOR)
    def list_sessions():
        sessions = container.session_service.list_sessions(
            domain_id=request.args.get("domainId"),
            batch_id=request.args.get("batchId"),
        )
        return jsonify([s.to_dict() for s in sessions]), 200
