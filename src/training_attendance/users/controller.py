from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.http import json_body
from ..container import Container
from ..core.enums import Role
from ..identity.access import make_auth_required


def register(app: Flask, container: Container) -> None:
    auth_required = make_auth_required(container)

    @app.route("/api/admin/students", methods=["GET"], endpoint="list_students")
    @auth_required(Role.ADMIN, Role.TUTOR)
    def list_students():
        students = container.user_service.list_students(
            domain_id=request.args.get("domainId"),
            batch_id=request.args.get("batchId"),
        )
        return jsonify([s.to_dict() for s in students]), 200

    @app.route("/api/admin/students", methods=["POST"], endpoint="add_student")
    @auth_required(Role.ADMIN)
    def add_student():
        data = json_body()
        student = container.user_service.add_student(
            name=data.get("name"),
            email=data.get("email"),
            domain_id=data.get("domainId"),
            batch_id=data.get("batchId"),
        )
        return jsonify(student.to_dict()), 201

    @app.route("/api/admin/students/<user_id>", methods=["DELETE"], endpoint="delete_student")
    @auth_required(Role.ADMIN)
    def delete_student(user_id: str):
        container.user_service.delete_user(user_id, role=Role.STUDENT)
        return jsonify({"message": "Student deleted"}), 200

    @app.route("/api/admin/tutors", methods=["GET"], endpoint="list_tutors")
    @auth_required(Role.ADMIN)
    def list_tutors():
        return jsonify([t.to_dict() for t in container.user_service.list_tutors()]), 200

    @app.route("/api/admin/tutors", methods=["POST"], endpoint="add_tutor")
    @auth_required(Role.ADMIN)
    def add_tutor():
        data = json_body()
        tutor = container.user_service.add_tutor(
            name=data.get("name"),
            email=data.get("email"),
            domain_id=data.get("domainId"),
        )
        return jsonify(tutor.to_dict()), 201

    @app.route("/api/admin/tutors/<user_id>", methods=["DELETE"], endpoint="delete_tutor")
    @auth_required(Role.ADMIN)
    def delete_tutor(user_id: str):
        container.user_service.delete_user(user_id, role=Role.TUTOR)
        return jsonify({"message": "Tutor deleted"}), 200
