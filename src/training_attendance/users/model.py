from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..common.datetime_utils import to_iso
from ..core.enums import Role


@dataclass(frozen=True)
class User:
    """Domain entity: User.

    Note: Plain data object (no database access code). ``uid`` is the identity
    provider's subject; it is empty for users an admin created who have not
    signed in yet.
    """

    user_id: str
    uid: Optional[str]
    email: str
    name: str
    role: Role
    domain_id: Optional[str] = None
    batch_id: Optional[str] = None
    created_at: Optional[datetime] = None

    def to_dict(self) -> dict:
        return {
            "id": self.user_id,
            "uid": self.uid,
            "email": self.email,
            "name": self.name,
            "role": self.role.value,
            "domainId": self.domain_id,
            "batchId": self.batch_id,
            "createdAt": to_iso(self.created_at),
        }
