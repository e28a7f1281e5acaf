from __future__ import annotations

from functools import wraps
from typing import TYPE_CHECKING

from flask import g, request

from ..core.enums import Role
from ..core.exceptions import AuthenticationError, AuthorizationError
from ..users.model import User

if TYPE_CHECKING:
    from ..container import Container


def _bearer_token() -> str:
    header = request.headers.get("Authorization", "")
    if not header.startswith("Bearer "):
        raise AuthenticationError("No authentication token provided")
    token = header[len("Bearer "):].strip()
    if not token:
        raise AuthenticationError("Invalid token format")
    return token


def make_auth_required(container: "Container"):
    """Build the ``auth_required(*roles)`` decorator bound to a container.

    Identity is resolved once per request and stored on ``g.current_user``.
    With no roles given any signed-in user passes.
    """

    def auth_required(*roles: Role):
        def decorator(view):
            @wraps(view)
            def wrapper(*args, **kwargs):
                claims = container.identity_provider.verify_token(_bearer_token())
                user = container.auth_service.resolve_identity(claims)
                g.current_user = user

                if roles and user.role not in roles:
                    required = " or ".join(r.value for r in roles)
                    raise AuthorizationError(f"Access denied. Required role: {required}")

                return view(*args, **kwargs)

            return wrapper

        return decorator

    return auth_required


def current_user() -> User:
    return g.current_user


def ensure_self_or_roles(user_id: str, *roles: Role) -> None:
    user = current_user()
    if user.user_id == user_id or user.role in roles:
        return
    raise AuthorizationError("Cannot access another user's attendance")
