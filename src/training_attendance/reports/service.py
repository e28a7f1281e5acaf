from __future__ import annotations

from dataclasses import dataclass, field

from ..attendance.eligibility import attendance_percentage
from ..attendance.repository import AttendanceRepository
from ..batches.repository import BatchRepository
from ..core.constants import ELIGIBILITY_THRESHOLD
from ..core.enums import Role
from ..domains.repository import DomainRepository
from ..sessions.repository import SessionRepository
from ..users.repository import UserRepository


@dataclass(frozen=True)
class DashboardStats:
    total_domains: int
    total_batches: int
    total_students: int
    students_below_threshold: int
    average_attendance: int
    low_attendance_students: list[dict] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "totalDomains": self.total_domains,
            "totalBatches": self.total_batches,
            "totalStudents": self.total_students,
            "studentsBelow75": self.students_below_threshold,
            "averageAttendance": self.average_attendance,
            "lowAttendanceStudents": self.low_attendance_students,
        }


class DashboardService:
    """Admin overview: program totals and students under the eligibility threshold."""

    def __init__(
        self,
        users: UserRepository,
        domains: DomainRepository,
        batches: BatchRepository,
        sessions: SessionRepository,
        attendance: AttendanceRepository,
        *,
        threshold: int = ELIGIBILITY_THRESHOLD,
    ):
        self._users = users
        self._domains = domains
        self._batches = batches
        self._sessions = sessions
        self._attendance = attendance
        self._threshold = int(threshold)

    def build_stats(self) -> DashboardStats:
        domains = {d.domain_id: d.name for d in self._domains.list_all()}
        batches = {b.batch_id: b.name for b in self._batches.list_batches()}
        students = self._users.list_users(role=Role.STUDENT)
        attended_by_user = self._attendance.count_by_user()

        totals_by_batch: dict[str, int] = {}
        percentages: list[int] = []
        low: list[dict] = []

        for s in students:
            total = 0
            if s.batch_id:
                if s.batch_id not in totals_by_batch:
                    totals_by_batch[s.batch_id] = self._sessions.count_for_batch(s.batch_id)
                total = totals_by_batch[s.batch_id]

            pct = attendance_percentage(attended_by_user.get(s.user_id, 0), total)
            percentages.append(pct)
            if pct < self._threshold:
                low.append(
                    {
                        "id": s.user_id,
                        "name": s.name,
                        "email": s.email,
                        "domainName": domains.get(s.domain_id or "", "-"),
                        "batchName": batches.get(s.batch_id or "", "-"),
                        "attendancePercentage": pct,
                    }
                )

        low.sort(key=lambda r: (r["attendancePercentage"], r["name"]))

        n = len(percentages)
        average = (2 * sum(percentages) + n) // (2 * n) if n else 0

        return DashboardStats(
            total_domains=len(domains),
            total_batches=len(batches),
            total_students=n,
            students_below_threshold=len(low),
            average_attendance=average,
            low_attendance_students=low,
        )
