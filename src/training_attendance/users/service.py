from __future__ import annotations

import logging
import uuid
from datetime import datetime
from typing import TYPE_CHECKING, Optional, Sequence

from ..batches.repository import BatchRepository
from ..common.datetime_utils import utc_now
from ..common.hierarchy import validate_batch_belongs_to_domain
from ..common.validators import require_non_empty
from ..core.constants import DEFAULT_BATCH_ID, DEFAULT_DOMAIN_ID, DEFAULT_USER_NAME
from ..core.enums import Role
from ..core.exceptions import (
    AuthenticationError,
    BatchNotFound,
    DomainNotFound,
    HierarchyMismatch,
    UserNotFound,
    ValidationError,
)
from ..domains.repository import DomainRepository
from .model import User
from .repository import UserRepository

if TYPE_CHECKING:
    from ..identity.provider import TokenClaims

logger = logging.getLogger(__name__)


def _normalize_email(value: Optional[str]) -> str:
    email = require_non_empty(value, "Email").lower()
    if "@" not in email:
        raise ValidationError("Email is not valid")
    return email


class AuthService:
    """Use case: turn verified token claims into a stored User.

    Lookup order is uid, then email. A user an admin pre-created is bound to
    the uid on first sign-in; an unknown identity is provisioned as a student
    with placeholder domain/batch.
    """

    def __init__(self, users: UserRepository):
        self._users = users

    def resolve_identity(self, claims: "TokenClaims", *, now: Optional[datetime] = None) -> User:
        if not claims.uid:
            raise AuthenticationError("Token has no subject")

        user = self._users.get_by_id(claims.uid) or self._users.get_by_uid(claims.uid)
        if user:
            return user

        if claims.email:
            user = self._users.get_by_email(claims.email.lower())
            if user:
                if not user.uid:
                    self._users.set_uid(user.user_id, uid=claims.uid)
                    user = User(
                        user_id=user.user_id,
                        uid=claims.uid,
                        email=user.email,
                        name=user.name,
                        role=user.role,
                        domain_id=user.domain_id,
                        batch_id=user.batch_id,
                        created_at=user.created_at,
                    )
                return user

        if not claims.email:
            raise AuthenticationError("Token has no email")

        user = User(
            user_id=claims.uid,
            uid=claims.uid,
            email=claims.email.lower(),
            name=claims.name or DEFAULT_USER_NAME,
            role=Role.STUDENT,
            domain_id=DEFAULT_DOMAIN_ID,
            batch_id=DEFAULT_BATCH_ID,
            created_at=now or utc_now(),
        )
        self._users.add(user)
        logger.info("auto-provisioned user id=%s as %s", user.user_id, user.role.value)
        return user


class UserService:
    """Use case: manage students and tutors (admin)."""

    def __init__(self, users: UserRepository, domains: DomainRepository, batches: BatchRepository):
        self._users = users
        self._domains = domains
        self._batches = batches

    def _ensure_email_free(self, email: str) -> None:
        if self._users.get_by_email(email):
            raise ValidationError("A user with this email already exists")

    def add_student(
        self,
        *,
        name: str,
        email: str,
        domain_id: str,
        batch_id: str,
        now: Optional[datetime] = None,
    ) -> User:
        name = require_non_empty(name, "Name")
        email = _normalize_email(email)
        domain_id = require_non_empty(domain_id, "Domain")
        batch_id = require_non_empty(batch_id, "Batch")

        batch = self._batches.get_by_id(batch_id)
        if not batch:
            raise BatchNotFound("Batch not found")
        if not validate_batch_belongs_to_domain(batch, domain_id):
            raise HierarchyMismatch(
                f"Batch {batch_id} does not belong to domain {domain_id} (it belongs to {batch.domain_id})"
            )
        self._ensure_email_free(email)

        user = User(
            user_id=uuid.uuid4().hex,
            uid=None,
            email=email,
            name=name,
            role=Role.STUDENT,
            domain_id=domain_id,
            batch_id=batch_id,
            created_at=now or utc_now(),
        )
        self._users.add(user)
        logger.info("student created id=%s batch=%s", user.user_id, batch_id)
        return user

    def add_tutor(self, *, name: str, email: str, domain_id: str, now: Optional[datetime] = None) -> User:
        name = require_non_empty(name, "Name")
        email = _normalize_email(email)
        domain_id = require_non_empty(domain_id, "Domain")

        if not self._domains.get_by_id(domain_id):
            raise DomainNotFound("Domain not found")
        self._ensure_email_free(email)

        user = User(
            user_id=uuid.uuid4().hex,
            uid=None,
            email=email,
            name=name,
            role=Role.TUTOR,
            domain_id=domain_id,
            batch_id=None,
            created_at=now or utc_now(),
        )
        self._users.add(user)
        logger.info("tutor created id=%s domain=%s", user.user_id, domain_id)
        return user

    def list_students(self, *, domain_id: Optional[str] = None, batch_id: Optional[str] = None) -> Sequence[User]:
        return self._users.list_users(role=Role.STUDENT, domain_id=domain_id or None, batch_id=batch_id or None)

    def list_tutors(self) -> Sequence[User]:
        return self._users.list_users(role=Role.TUTOR)

    def delete_user(self, user_id: str, *, role: Role) -> None:
        """Delete a student or tutor; the route decides which role it manages."""

        user = self._users.get_by_id(user_id)
        if not user or user.role != role:
            raise UserNotFound(f"{role.value.capitalize()} not found")

        if not self._users.delete_by_id(user_id):
            raise UserNotFound(f"{role.value.capitalize()} not found")
        logger.info("%s deleted id=%s", role.value, user_id)
