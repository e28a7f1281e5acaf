from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.http import json_body
from ..container import Container
from ..core.enums import Role
from ..identity.access import make_auth_required


def register(app: Flask, container: Container) -> None:
    auth_required = make_auth_required(container)

    @app.route("/api/admin/batches", methods=["GET"], endpoint="list_batches")
    @auth_required(Role.ADMIN, Role.TUTOR)
    def list_batches():
        batches = container.batch_service.list_batches(domain_id=request.args.get("domainId"))
        return jsonify([b.to_dict() for b in batches]), 200

    @app.route("/api/admin/batches", methods=["POST"], endpoint="add_batch")
    @auth_required(Role.ADMIN)
    def add_batch():
        data = json_body()
        batch = container.batch_service.add_batch(
            domain_id=data.get("domainId"),
            name=data.get("name"),
            start_date=data.get("startDate"),
            end_date=data.get("endDate"),
        )
        return jsonify(batch.to_dict()), 201

    @app.route("/api/admin/batches/<batch_id>", methods=["DELETE"], endpoint="delete_batch")
    @auth_required(Role.ADMIN)
    def delete_batch(batch_id: str):
        container.batch_service.delete_batch(batch_id)
        return jsonify({"message": "Batch deleted"}), 200
