from __future__ import annotations

import pytest

from training_attendance.core.exceptions import AuthenticationError
from training_attendance.identity.provider import SignedTokenIdentityProvider


def test_issued_token_verifies_to_claims():
    provider = SignedTokenIdentityProvider("secret")
    token = provider.issue_token(uid="abc", email="a@example.com", name="Ana")

    claims = provider.verify_token(token)

    assert claims.uid == "abc"
    assert claims.email == "a@example.com"
    assert claims.name == "Ana"


def test_token_signed_with_other_key_is_rejected():
    token = SignedTokenIdentityProvider("other").issue_token(uid="abc", email="a@example.com")

    with pytest.raises(AuthenticationError, match="Invalid token"):
        SignedTokenIdentityProvider("secret").verify_token(token)


def test_tampered_token_is_rejected():
    provider = SignedTokenIdentityProvider("secret")
    token = provider.issue_token(uid="abc", email="a@example.com")

    with pytest.raises(AuthenticationError):
        provider.verify_token(token[:-2] + ("AA" if not token.endswith("AA") else "BB"))


def test_expired_token_is_rejected():
    provider = SignedTokenIdentityProvider("secret", max_age_seconds=-1)
    token = provider.issue_token(uid="abc", email="a@example.com")

    with pytest.raises(AuthenticationError, match="Token expired"):
        provider.verify_token(token)
