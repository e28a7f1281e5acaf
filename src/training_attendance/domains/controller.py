from __future__ import annotations

from flask import Flask, jsonify

from ..common.http import json_body
from ..container import Container
from ..core.enums import Role
from ..identity.access import make_auth_required


def register(app: Flask, container: Container) -> None:
    auth_required = make_auth_required(container)

    @app.route("/api/admin/domains", methods=["GET"], endpoint="list_domains")
    @auth_required(Role.ADMIN, Role.TUTOR)
    def list_domains():
        return jsonify([d.to_dict() for d in container.domain_service.list_domains()]), 200

    @app.route("/api/admin/domains", methods=["POST"], endpoint="add_domain")
    @auth_required(Role.ADMIN)
    def add_domain():
        data = json_body()
        domain = container.domain_service.add_domain(name=data.get("name"))
        return jsonify(domain.to_dict()), 201

    @app.route("/api/admin/domains/<domain_id>", methods=["PATCH"], endpoint="rename_domain")
    @auth_required(Role.ADMIN)
    def rename_domain(domain_id: str):
        data = json_body()
        domain = container.domain_service.rename_domain(domain_id, name=data.get("name"))
        return jsonify(domain.to_dict()), 200

    @app.route("/api/admin/domains/<domain_id>", methods=["DELETE"], endpoint="delete_domain")
    @auth_required(Role.ADMIN)
    def delete_domain(domain_id: str):
        container.domain_service.delete_domain(domain_id)
        return jsonify({"message": "Domain deleted"}), 200
