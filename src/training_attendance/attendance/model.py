from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from ..common.datetime_utils import to_iso
from ..core.enums import AttendanceStatus


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: presence of one user at one session. Immutable once stored."""

    attendance_id: str
    user_id: str
    session_id: str
    batch_id: str
    domain_id: str
    status: AttendanceStatus
    marked_at: datetime

    def to_dict(self) -> dict:
        return {
            "id": self.attendance_id,
            "userId": self.user_id,
            "sessionId": self.session_id,
            "batchId": self.batch_id,
            "domainId": self.domain_id,
            "status": self.status.value,
            "timestamp": to_iso(self.marked_at),
        }


@dataclass(frozen=True)
class Receipt:
    attendance_id: str
    session_id: str
    user_id: str
    marked_at: datetime
    message: str = "Attendance marked successfully"

    def to_dict(self) -> dict:
        return {
            "message": self.message,
            "attendanceId": self.attendance_id,
            "sessionId": self.session_id,
            "userId": self.user_id,
            "timestamp": to_iso(self.marked_at),
        }


@dataclass(frozen=True)
class AttendanceStats:
    """Read-model for eligibility (recomputed on every call)."""

    user_id: str
    student_name: str
    domain_name: str
    total_sessions: int
    attended_sessions: int
    percentage: int
    is_eligible: bool
    min_required: int

    def to_dict(self) -> dict:
        return {
            "userId": self.user_id,
            "studentName": self.student_name,
            "domainName": self.domain_name,
            "totalSessions": self.total_sessions,
            "attendedSessions": self.attended_sessions,
            "percentage": self.percentage,
            "isEligible": self.is_eligible,
            "minRequired": self.min_required,
        }
