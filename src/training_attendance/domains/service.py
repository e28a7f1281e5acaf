from __future__ import annotations

import logging
import uuid
from datetime import datetime
from typing import Optional, Sequence

from ..common.datetime_utils import utc_now
from ..common.validators import require_non_empty
from ..core.exceptions import DomainNotFound
from .model import Domain
from .repository import DomainRepository

logger = logging.getLogger(__name__)


class DomainService:
    """Use case: manage domains (admin)."""

    def __init__(self, domains: DomainRepository):
        self._domains = domains

    def add_domain(self, *, name: str, now: Optional[datetime] = None) -> Domain:
        name = require_non_empty(name, "Domain name")
        domain = Domain(domain_id=uuid.uuid4().hex, name=name, created_at=now or utc_now())
        self._domains.add(domain)
        logger.info("domain created id=%s", domain.domain_id)
        return domain

    def list_domains(self) -> Sequence[Domain]:
        return self._domains.list_all()

    def rename_domain(self, domain_id: str, *, name: str) -> Domain:
        name = require_non_empty(name, "Domain name")
        domain = self._domains.get_by_id(domain_id)
        if not domain:
            raise DomainNotFound("Domain not found")
        self._domains.rename(domain_id, name=name)
        return Domain(domain_id=domain.domain_id, name=name, created_at=domain.created_at)

    def delete_domain(self, domain_id: str) -> None:
        # Batches and users of the domain are left in place.
        if not self._domains.delete(domain_id):
            raise DomainNotFound("Domain not found")
        logger.info("domain deleted id=%s", domain_id)
