from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..common.datetime_utils import to_iso


@dataclass(frozen=True)
class Batch:
    """Cohort of students inside a domain."""

    batch_id: str
    domain_id: str
    name: str
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    created_at: Optional[datetime] = None

    def to_dict(self) -> dict:
        return {
            "id": self.batch_id,
            "domainId": self.domain_id,
            "name": self.name,
            "startDate": self.start_date.strftime("%Y-%m-%d") if self.start_date else None,
            "endDate": self.end_date.strftime("%Y-%m-%d") if self.end_date else None,
            "createdAt": to_iso(self.created_at),
        }
