"""Domain/batch membership checks.

Both checks are pure comparisons over records that were already loaded from
the store. They answer True/False; the caller raises ``HierarchyMismatch``
with a message describing which side did not match.
"""

from __future__ import annotations

from typing import Optional

from ..batches.model import Batch
from ..sessions.model import Session
from ..users.model import User


def validate_batch_belongs_to_domain(batch: Optional[Batch], domain_id: Optional[str]) -> bool:
    # A missing batch never validates.
    if batch is None or not domain_id:
        return False
    return batch.domain_id == domain_id


def validate_user_matches_session(user: User, session: Session) -> bool:
    # Unassigned users fail closed; admins get no bypass here.
    if not user.domain_id or not user.batch_id:
        return False
    return user.domain_id == session.domain_id and user.batch_id == session.batch_id


def describe_user_session_mismatch(user: User, session: Session) -> str:
    return (
        f"Mismatch: you belong to {user.domain_id or '-'}/{user.batch_id or '-'}, "
        f"but this session is for {session.domain_id}/{session.batch_id}"
    )
