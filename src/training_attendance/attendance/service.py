from __future__ import annotations

import logging
import uuid
from datetime import datetime
from typing import Optional

from ..common.datetime_utils import utc_now
from ..common.hierarchy import describe_user_session_mismatch, validate_user_matches_session
from ..common.validators import require_non_empty
from ..core.enums import AttendanceStatus
from ..core.exceptions import (
    AlreadyMarked,
    CodeExpired,
    DomainError,
    HierarchyMismatch,
    InvalidCode,
    UserNotFound,
    ValidationError,
)
from ..sessions.repository import SessionRepository
from ..users.repository import UserRepository
from .model import AttendanceRecord, Receipt
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)


def _code_text(code) -> str:
    # JSON clients may send the 6-digit code as a number.
    if isinstance(code, int) and not isinstance(code, bool):
        code = str(code)
    elif code is not None and not isinstance(code, str):
        raise ValidationError("Attendance code must be a string")
    return require_non_empty(code, "Attendance code")


class AttendanceService:
    """Use case: redeem an attendance code.

    Checks run in a fixed order (code lookup, expiry, user, hierarchy,
    duplicate) and the first failing check decides the rejection. The
    repository insert is itself unique per (session, user), so two concurrent
    submissions that both pass the duplicate check still yield one record.
    """

    def __init__(self, attendance: AttendanceRepository, sessions: SessionRepository, users: UserRepository):
        self._attendance = attendance
        self._sessions = sessions
        self._users = users

    def mark_attendance(self, user_id: str, code: str, *, now: Optional[datetime] = None) -> Receipt:
        try:
            return self._mark(user_id, code, now=now or utc_now())
        except DomainError as e:
            logger.info("attendance rejected user=%s reason=%s", user_id, type(e).__name__)
            raise

    def _mark(self, user_id: str, code: str, *, now: datetime) -> Receipt:
        user_id = require_non_empty(user_id, "userId")
        code = _code_text(code)

        session = self._sessions.find_by_code(code)
        if not session:
            raise InvalidCode("Invalid attendance code")

        if not session.is_code_active(now):
            raise CodeExpired("Attendance code expired")

        user = self._users.get_by_id(user_id)
        if not user:
            raise UserNotFound("User not found")

        if not validate_user_matches_session(user, session):
            logger.warning(
                "hierarchy check failed user=%s (%s/%s) session=%s (%s/%s)",
                user_id,
                user.domain_id,
                user.batch_id,
                session.session_id,
                session.domain_id,
                session.batch_id,
            )
            raise HierarchyMismatch(describe_user_session_mismatch(user, session))

        if self._attendance.get_for_session_and_user(session_id=session.session_id, user_id=user_id):
            raise AlreadyMarked("Attendance already marked")

        record = AttendanceRecord(
            attendance_id=uuid.uuid4().hex,
            user_id=user_id,
            session_id=session.session_id,
            batch_id=session.batch_id,
            domain_id=session.domain_id,
            status=AttendanceStatus.PRESENT,
            marked_at=now,
        )
        self._attendance.add(record)
        logger.info("attendance accepted user=%s session=%s", user_id, session.session_id)

        return Receipt(
            attendance_id=record.attendance_id,
            session_id=record.session_id,
            user_id=user_id,
            marked_at=now,
        )

    def get_student_sessions(self, user_id: str) -> list[dict]:
        """Sessions of the student's batch, newest first, with an ``attended`` flag.

        Codes are left out; students receive them out-of-band.
        """

        user = self._users.get_by_id(user_id)
        if not user:
            raise UserNotFound("User not found")
        if not user.batch_id:
            return []

        attended_ids = {r.session_id for r in self._attendance.list_for_user(user_id)}
        sessions = sorted(
            self._sessions.list_sessions(batch_id=user.batch_id),
            key=lambda s: (s.session_date, s.created_at or datetime.min),
            reverse=True,
        )

        out: list[dict] = []
        for s in sessions:
            row = s.to_dict(include_code=False)
            row["attended"] = s.session_id in attended_ids
            out.append(row)
        return out
