from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..common.datetime_utils import to_iso


@dataclass(frozen=True)
class Session:
    """One scheduled class meeting and its attendance window.

    ``attendance_code`` and ``code_expires_at`` are fixed at creation.
    """

    session_id: str
    domain_id: str
    batch_id: str
    session_date: date
    session_time: str
    meet_link: str
    attendance_code: str
    code_expires_at: datetime
    created_at: Optional[datetime] = None

    def is_code_active(self, now: datetime) -> bool:
        return now <= self.code_expires_at

    def to_dict(self, *, include_code: bool = True) -> dict:
        data = {
            "id": self.session_id,
            "domainId": self.domain_id,
            "batchId": self.batch_id,
            "date": self.session_date.strftime("%Y-%m-%d"),
            "time": self.session_time,
            "meetLink": self.meet_link,
            "codeExpiresAt": to_iso(self.code_expires_at),
            "createdAt": to_iso(self.created_at),
        }
        if include_code:
            data["attendanceCode"] = self.attendance_code
        return data
