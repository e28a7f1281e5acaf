"""Bearer token verification.

Tokens are ``itsdangerous`` signed payloads carrying the identity subject
(uid), email and display name. They are issued by the sign-in front end (or
``flask issue-token``) with the same ``SECRET_KEY`` and expire after
``TOKEN_MAX_AGE_SECONDS``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Protocol

from itsdangerous import BadSignature, SignatureExpired, URLSafeTimedSerializer

from ..core.constants import DEFAULT_TOKEN_MAX_AGE_SECONDS
from ..core.exceptions import AuthenticationError

TOKEN_SALT = "training-attendance.identity"


@dataclass(frozen=True)
class TokenClaims:
    uid: str
    email: str
    name: Optional[str] = None


class IdentityProvider(Protocol):
    def verify_token(self, token: str) -> TokenClaims:
        raise NotImplementedError


class SignedTokenIdentityProvider(IdentityProvider):
    def __init__(self, secret_key: str, *, max_age_seconds: int = DEFAULT_TOKEN_MAX_AGE_SECONDS):
        self._serializer = URLSafeTimedSerializer(secret_key, salt=TOKEN_SALT)
        self._max_age = int(max_age_seconds)

    def issue_token(self, *, uid: str, email: str, name: Optional[str] = None) -> str:
        return self._serializer.dumps({"uid": uid, "email": email, "name": name})

    def verify_token(self, token: str) -> TokenClaims:
        try:
            payload = self._serializer.loads(token, max_age=self._max_age)
        except SignatureExpired:
            raise AuthenticationError("Token expired")
        except BadSignature:
            raise AuthenticationError("Invalid token")

        if not isinstance(payload, dict) or not payload.get("uid"):
            raise AuthenticationError("Invalid token")

        return TokenClaims(
            uid=str(payload["uid"]),
            email=str(payload.get("email") or ""),
            name=payload.get("name"),
        )
