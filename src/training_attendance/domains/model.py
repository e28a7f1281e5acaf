from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..common.datetime_utils import to_iso


@dataclass(frozen=True)
class Domain:
    """Top-level subject-area track (e.g. Web Development)."""

    domain_id: str
    name: str
    created_at: Optional[datetime] = None

    def to_dict(self) -> dict:
        return {"id": self.domain_id, "name": self.name, "createdAt": to_iso(self.created_at)}
