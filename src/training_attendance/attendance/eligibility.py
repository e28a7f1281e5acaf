from __future__ import annotations

from ..core.constants import ELIGIBILITY_THRESHOLD
from ..core.exceptions import UserNotFound
from ..domains.repository import DomainRepository
from ..sessions.repository import SessionRepository
from ..users.model import User
from ..users.repository import UserRepository
from .model import AttendanceStats
from .repository import AttendanceRepository

UNKNOWN_DOMAIN = "Unknown Domain"


def attendance_percentage(attended: int, total: int) -> int:
    """round(attended / total * 100), halves rounded up, 0 when total is 0.

    Integer arithmetic avoids float drift at .5 boundaries; the result is
    clamped to [0, 100] because records from sessions outside the current
    batch still count as attended.
    """

    if total <= 0:
        return 0
    attended = max(0, attended)
    percentage = (200 * attended + total) // (2 * total)
    return min(100, percentage)


def is_eligible(percentage: int, *, threshold: int = ELIGIBILITY_THRESHOLD) -> bool:
    return percentage >= threshold


class EligibilityService:
    """Use case: attendance percentage and certificate eligibility."""

    def __init__(
        self,
        attendance: AttendanceRepository,
        sessions: SessionRepository,
        users: UserRepository,
        domains: DomainRepository,
        *,
        threshold: int = ELIGIBILITY_THRESHOLD,
    ):
        self._attendance = attendance
        self._sessions = sessions
        self._users = users
        self._domains = domains
        self._threshold = int(threshold)

    def get_stats(self, user_id: str) -> AttendanceStats:
        user = self._users.get_by_id(user_id)
        if not user:
            raise UserNotFound("User not found")
        return self.stats_for_user(user)

    def stats_for_user(self, user: User, *, domain_name: str | None = None) -> AttendanceStats:
        total = self._sessions.count_for_batch(user.batch_id) if user.batch_id else 0
        attended = self._attendance.count_for_user(user.user_id)
        percentage = attendance_percentage(attended, total)

        if domain_name is None:
            domain = self._domains.get_by_id(user.domain_id) if user.domain_id else None
            domain_name = domain.name if domain else UNKNOWN_DOMAIN

        return AttendanceStats(
            user_id=user.user_id,
            student_name=user.name or "Student",
            domain_name=domain_name,
            total_sessions=total,
            attended_sessions=attended,
            percentage=percentage,
            is_eligible=is_eligible(percentage, threshold=self._threshold),
            min_required=self._threshold,
        )
