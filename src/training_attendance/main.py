from __future__ import annotations

import importlib
import logging
import uuid
from typing import Optional

import click
from dotenv import load_dotenv
from flask import Flask, jsonify

from .common.datetime_utils import utc_now
from .common.http import register_error_handlers
from .common.logging_utils import configure_logging, init_request_id
from .config import get_settings_module
from .container import Container, build_container
from .database.bootstrap import apply_schema, list_tables
from .core.enums import Role
from .identity.provider import SignedTokenIdentityProvider
from .users.model import User

from .attendance.controller import register as register_attendance
from .batches.controller import register as register_batches
from .domains.controller import register as register_domains
from .identity.controller import register as register_identity
from .reports.controller import register as register_reports
from .sessions.controller import register as register_sessions
from .users.controller import register as register_users

logger = logging.getLogger(__name__)


def create_app(container: Optional[Container] = None, *, settings_module: Optional[str] = None) -> Flask:
    """Application factory.

    ``container`` lets tests hand in services wired to in-memory repositories;
    otherwise MySQL repositories are built from the selected settings module.
    """

    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = settings_module or get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    app.config["TOKEN_MAX_AGE_SECONDS"] = int(getattr(settings, "TOKEN_MAX_AGE_SECONDS", 3600))
    app.json.sort_keys = False
    db_config = dict(getattr(settings, "DB_CONFIG"))

    configure_logging(getattr(settings, "LOG_LEVEL", "INFO"))
    logger.info(
        "settings=%s db=%s@%s:%s/%s",
        settings_module,
        db_config.get("user"),
        db_config.get("host"),
        db_config.get("port", 3306),
        db_config.get("database"),
    )

    if container is None:
        if bool(getattr(settings, "AUTO_INIT_DB", False)):
            apply_schema(db_config)
            logger.info("schema ready (tables=%d)", len(list_tables(db_config)))

        container = build_container(
            db_config=db_config,
            secret_key=app.secret_key,
            db_timeout_seconds=int(getattr(settings, "DB_TIMEOUT_SECONDS", 10)),
            token_max_age_seconds=app.config["TOKEN_MAX_AGE_SECONDS"],
            code_duration_minutes=int(getattr(settings, "CODE_DURATION_MINUTES", 5)),
        )
    app.extensions["container"] = container

    init_request_id(app)
    register_error_handlers(app)

    @app.route("/health", endpoint="health")
    def health():
        return jsonify({"status": "ok"}), 200

    register_identity(app, container)
    register_domains(app, container)
    register_batches(app, container)
    register_users(app, container)
    register_sessions(app, container)
    register_attendance(app, container)
    register_reports(app, container)

    _register_cli(app, db_config)
    return app


def _register_cli(app: Flask, db_config: dict) -> None:
    @app.cli.command("init-db")
    def init_db():
        """Apply schema.sql to the configured database."""
        apply_schema(db_config)
        click.echo(f"OK: schema applied (tables={len(list_tables(db_config))})")

    @app.cli.command("create-admin")
    @click.argument("email")
    @click.option("--name", default="Admin", show_default=True)
    def create_admin(email: str, name: str):
        """Create the first admin account (no-op if EMAIL already exists)."""
        container: Container = app.extensions["container"]
        email = email.lower()
        if container.users_repo.get_by_email(email):
            click.echo(f"User {email} already exists")
            return
        admin = User(
            user_id=uuid.uuid4().hex,
            uid=None,
            email=email,
            name=name,
            role=Role.ADMIN,
            created_at=utc_now(),
        )
        container.users_repo.add(admin)
        click.echo(f"OK: admin {email} created (id={admin.user_id})")

    @app.cli.command("issue-token")
    @click.argument("email")
    @click.option("--name", default=None, help="Display name carried in the token.")
    def issue_token(email: str, name: Optional[str]):
        """Print a signed bearer token for EMAIL."""
        container: Container = app.extensions["container"]
        user = container.users_repo.get_by_email(email.lower())
        uid = (user.uid or user.user_id) if user else uuid.uuid4().hex

        provider = container.identity_provider
        if not isinstance(provider, SignedTokenIdentityProvider):
            provider = SignedTokenIdentityProvider(app.secret_key)
        click.echo(provider.issue_token(uid=uid, email=email.lower(), name=name or (user.name if user else None)))
