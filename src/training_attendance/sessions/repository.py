from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from .model import Session


class SessionRepository(Protocol):
    def add(self, session: Session) -> str:
        raise NotImplementedError

    def get_by_id(self, session_id: str) -> Optional[Session]:
        raise NotImplementedError

    def find_by_code(self, code: str) -> Optional[Session]:
        """Return the session holding ``code``.

        When several sessions share a code, the one expiring last wins
        (ties broken by session id).
        """

        raise NotImplementedError

    def code_in_use(self, code: str, *, now: datetime) -> bool:
        """True when a session whose code has not expired yet holds ``code``."""

        raise NotImplementedError

    def list_sessions(
        self,
        *,
        domain_id: Optional[str] = None,
        batch_id: Optional[str] = None,
    ) -> Sequence[Session]:
        raise NotImplementedError

    def count_for_batch(self, batch_id: str) -> int:
        raise NotImplementedError
