from __future__ import annotations

import logging
import uuid
from datetime import datetime
from typing import Optional, Sequence

from ..common.datetime_utils import parse_iso_date, utc_now
from ..common.validators import require_non_empty
from ..core.exceptions import BatchNotFound, DomainNotFound, ValidationError
from ..domains.repository import DomainRepository
from .model import Batch
from .repository import BatchRepository

logger = logging.getLogger(__name__)


def _optional_date(value: Optional[str], field_name: str):
    if value is None or value == "":
        return None
    try:
        return parse_iso_date(str(value))
    except ValueError:
        raise ValidationError(f"{field_name} must be YYYY-MM-DD")


class BatchService:
    """Use case: manage batches; a batch must point at an existing domain."""

    def __init__(self, batches: BatchRepository, domains: DomainRepository):
        self._batches = batches
        self._domains = domains

    def add_batch(
        self,
        *,
        domain_id: str,
        name: str,
        start_date: Optional[str] = None,
        end_date: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> Batch:
        domain_id = require_non_empty(domain_id, "Domain")
        name = require_non_empty(name, "Batch name")
        start = _optional_date(start_date, "startDate")
        end = _optional_date(end_date, "endDate")
        if start and end and end < start:
            raise ValidationError("endDate must not be before startDate")

        if not self._domains.get_by_id(domain_id):
            raise DomainNotFound("Domain not found")

        batch = Batch(
            batch_id=uuid.uuid4().hex,
            domain_id=domain_id,
            name=name,
            start_date=start,
            end_date=end,
            created_at=now or utc_now(),
        )
        self._batches.add(batch)
        logger.info("batch created id=%s domain=%s", batch.batch_id, domain_id)
        return batch

    def list_batches(self, *, domain_id: Optional[str] = None) -> Sequence[Batch]:
        return self._batches.list_batches(domain_id=domain_id or None)

    def delete_batch(self, batch_id: str) -> None:
        if not self._batches.delete(batch_id):
            raise BatchNotFound("Batch not found")
        logger.info("batch deleted id=%s", batch_id)
