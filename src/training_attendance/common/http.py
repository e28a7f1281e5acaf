from __future__ import annotations

import logging

from flask import Flask, jsonify, request
from werkzeug.exceptions import HTTPException

from ..core.exceptions import DomainError, StoreError, ValidationError

logger = logging.getLogger(__name__)


def json_body() -> dict:
    data = request.get_json(silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")
    return data


def register_error_handlers(app: Flask) -> None:
    """Map domain exceptions to JSON ``{error, message}`` responses."""

    @app.errorhandler(DomainError)
    def _domain_error(e: DomainError):
        if isinstance(e, StoreError):
            logger.error("store failure on %s %s: %s", request.method, request.path, e, exc_info=e)
        return jsonify({"error": e.error, "message": str(e)}), e.status_code

    @app.errorhandler(HTTPException)
    def _http_error(e: HTTPException):
        return jsonify({"error": e.name, "message": e.description}), e.code

    @app.errorhandler(Exception)
    def _unexpected(e: Exception):
        logger.exception("unhandled error on %s %s", request.method, request.path)
        if app.config.get("DEBUG"):
            return jsonify({"error": "Internal Server Error", "message": str(e)}), 500
        return jsonify({"error": "Internal Server Error", "message": "Unexpected server error"}), 500
