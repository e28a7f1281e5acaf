"""Logging setup and per-request correlation ids."""

from __future__ import annotations

import contextvars
import logging
import sys
import uuid
from typing import Optional

from flask import Flask, g, request

HEADER_NAME = "X-Request-ID"
LOG_FORMAT = "%(asctime)s %(levelname)s [%(request_id)s] %(name)s: %(message)s"

_request_id_ctx: contextvars.ContextVar[Optional[str]] = contextvars.ContextVar("request_id", default=None)


def get_request_id() -> Optional[str]:
    return _request_id_ctx.get()


class RequestIdFilter(logging.Filter):
    """Stamp every record with the current request id ("-" outside requests)."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = get_request_id() or "-"
        return True


_configured = False


def configure_logging(level_name: str = "INFO") -> None:
    global _configured
    if _configured:
        return

    handler = logging.StreamHandler(stream=sys.stdout)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    handler.addFilter(RequestIdFilter())

    root = logging.getLogger()
    root.setLevel(getattr(logging, str(level_name).upper(), logging.INFO))
    root.handlers = [handler]

    # Request lines are logged by the app itself.
    logging.getLogger("werkzeug").setLevel(logging.WARNING)

    _configured = True


def init_request_id(app: Flask) -> None:
    """Assign a correlation id to each request and echo it back."""

    @app.before_request
    def _assign_request_id() -> None:
        incoming = request.headers.get(HEADER_NAME, "").strip()
        request_id = incoming or uuid.uuid4().hex
        _request_id_ctx.set(request_id)
        g.request_id = request_id

    @app.after_request
    def _append_request_id(response):
        request_id = getattr(g, "request_id", None)
        if request_id:
            response.headers[HEADER_NAME] = request_id
        return response

    @app.teardown_request
    def _clear_request_id(_exc):
        _request_id_ctx.set(None)
