from __future__ import annotations

from typing import Dict, Optional, Protocol, Sequence

from .model import AttendanceRecord


class AttendanceRepository(Protocol):
    def get_for_session_and_user(self, *, session_id: str, user_id: str) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def add(self, record: AttendanceRecord) -> str:
        """Insert a presence record.

        Must be atomic per (session_id, user_id): when a record for the pair
        already exists, raise ``AlreadyMarked`` instead of inserting.
        """

        raise NotImplementedError

    def list_for_user(self, user_id: str) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def count_for_user(self, user_id: str) -> int:
        raise NotImplementedError

    def count_by_user(self) -> Dict[str, int]:
        """Attended-session counts for every user that has at least one record."""

        raise NotImplementedError
