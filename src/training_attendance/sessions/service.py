from __future__ import annotations

import logging
import secrets
import uuid
from datetime import datetime, timedelta
from typing import Callable, Optional, Sequence

from ..batches.repository import BatchRepository
from ..common.datetime_utils import parse_iso_date, utc_now
from ..common.hierarchy import validate_batch_belongs_to_domain
from ..common.validators import optional_str, require_non_empty, require_positive_int
from ..core.constants import (
    CODE_GENERATION_ATTEMPTS,
    CODE_MAX,
    CODE_MIN,
    DEFAULT_CODE_DURATION_MINUTES,
    MAX_CODE_DURATION_MINUTES,
)
from ..core.enums import Role
from ..core.exceptions import AuthorizationError, CodeGenerationError, HierarchyMismatch, ValidationError
from ..users.model import User
from .model import Session
from .repository import SessionRepository

logger = logging.getLogger(__name__)


def generate_attendance_code() -> str:
    """Uniform 6-digit code; the range has no leading zero so no padding is needed."""
    return str(CODE_MIN + secrets.randbelow(CODE_MAX - CODE_MIN + 1))


class SessionService:
    """Use case: issue sessions with a time-bound attendance code."""

    def __init__(
        self,
        sessions: SessionRepository,
        batches: BatchRepository,
        *,
        code_generator: Optional[Callable[[], str]] = None,
        default_duration_minutes: int = DEFAULT_CODE_DURATION_MINUTES,
    ):
        self._sessions = sessions
        self._batches = batches
        self._generate_code = code_generator or generate_attendance_code
        self._default_duration = int(default_duration_minutes)

    def _draw_free_code(self, now: datetime) -> str:
        for _ in range(CODE_GENERATION_ATTEMPTS):
            code = self._generate_code()
            if not self._sessions.code_in_use(code, now=now):
                return code
        raise CodeGenerationError("Could not allocate a unique attendance code")

    def create_session(
        self,
        *,
        domain_id: str,
        batch_id: str,
        date: str,
        time: str = "",
        duration_minutes: Optional[int] = None,
        meet_link: str = "",
        actor: Optional[User] = None,
        now: Optional[datetime] = None,
    ) -> Session:
        domain_id = require_non_empty(domain_id, "Domain")
        batch_id = require_non_empty(batch_id, "Batch")
        try:
            session_date = parse_iso_date(require_non_empty(date, "Date"))
        except ValueError:
            raise ValidationError("Date must be YYYY-MM-DD")
        duration = self._default_duration
        if duration_minutes is not None:
            duration = require_positive_int(duration_minutes, "durationMinutes")
            if duration > MAX_CODE_DURATION_MINUTES:
                raise ValidationError(f"durationMinutes must not exceed {MAX_CODE_DURATION_MINUTES}")

        if actor is not None and actor.role == Role.TUTOR and actor.domain_id != domain_id:
            raise AuthorizationError("Tutors can only create sessions for their own domain")

        batch = self._batches.get_by_id(batch_id)
        if not validate_batch_belongs_to_domain(batch, domain_id):
            if batch is None:
                raise HierarchyMismatch(f"Invalid Domain/Batch hierarchy: batch {batch_id} does not exist")
            raise HierarchyMismatch(
                f"Invalid Domain/Batch hierarchy: batch {batch_id} belongs to {batch.domain_id}, not {domain_id}"
            )

        # DATETIME columns keep whole seconds.
        now = (now or utc_now()).replace(microsecond=0)
        session = Session(
            session_id=uuid.uuid4().hex,
            domain_id=domain_id,
            batch_id=batch_id,
            session_date=session_date,
            session_time=optional_str(time),
            meet_link=optional_str(meet_link),
            attendance_code=self._draw_free_code(now),
            code_expires_at=now + timedelta(minutes=duration),
            created_at=now,
        )
        self._sessions.add(session)
        logger.info(
            "session created id=%s domain=%s batch=%s expires_at=%s",
            session.session_id,
            domain_id,
            batch_id,
            session.code_expires_at.isoformat(),
        )
        return session

    def list_sessions(self, *, domain_id: Optional[str] = None, batch_id: Optional[str] = None) -> Sequence[Session]:
        return self._sessions.list_sessions(domain_id=domain_id or None, batch_id=batch_id or None)
