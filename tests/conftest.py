from __future__ import annotations

from datetime import date
from types import SimpleNamespace

import pytest

from fakes import T0, InMemoryAttendance, InMemoryBatches, InMemoryDomains, InMemorySessions, InMemoryUsers, make_user
from training_attendance.batches.model import Batch
from training_attendance.core.enums import Role
from training_attendance.domains.model import Domain


@pytest.fixture
def repos():
    domains = InMemoryDomains(
        Domain(domain_id="web-dev", name="Web Development", created_at=T0),
        Domain(domain_id="ui-ux", name="UI/UX Design", created_at=T0),
    )
    batches = InMemoryBatches(
        Batch(batch_id="batch-a", domain_id="web-dev", name="Batch A", start_date=date(2026, 1, 5)),
        Batch(batch_id="batch-b", domain_id="ui-ux", name="Batch B", start_date=date(2026, 1, 5)),
    )
    users = InMemoryUsers(
        make_user("u"),
        make_user("admin", role=Role.ADMIN, domain_id=None, batch_id=None),
        make_user("tutor", role=Role.TUTOR, batch_id=None),
    )
    return SimpleNamespace(
        domains=domains,
        batches=batches,
        users=users,
        sessions=InMemorySessions(),
        attendance=InMemoryAttendance(),
    )
