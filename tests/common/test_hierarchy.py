from datetime import date, datetime

from fakes import make_user
from training_attendance.batches.model import Batch
from training_attendance.common.hierarchy import (
    describe_user_session_mismatch,
    validate_batch_belongs_to_domain,
    validate_user_matches_session,
)
from training_attendance.core.enums import Role
from training_attendance.sessions.model import Session

SESSION = Session(
    session_id="s1",
    domain_id="web-dev",
    batch_id="batch-a",
    session_date=date(2026, 3, 2),
    session_time="10:00 AM",
    meet_link="",
    attendance_code="123456",
    code_expires_at=datetime(2026, 3, 2, 10, 5),
)


def test_batch_in_claimed_domain_validates():
    batch = Batch(batch_id="batch-a", domain_id="web-dev", name="Batch A")
    assert validate_batch_belongs_to_domain(batch, "web-dev") is True
    assert validate_batch_belongs_to_domain(batch, "ui-ux") is False


def test_missing_batch_never_validates():
    assert validate_batch_belongs_to_domain(None, "web-dev") is False


def test_user_matching_session_validates():
    assert validate_user_matches_session(make_user("u"), SESSION) is True


def test_user_in_other_batch_or_domain_fails():
    assert validate_user_matches_session(make_user("u", batch_id="batch-b"), SESSION) is False
    assert validate_user_matches_session(make_user("u", domain_id="ui-ux"), SESSION) is False


def test_unassigned_user_fails_closed_even_for_admin():
    assert validate_user_matches_session(make_user("u", batch_id=None), SESSION) is False
    admin = make_user("a", role=Role.ADMIN, domain_id=None, batch_id=None)
    assert validate_user_matches_session(admin, SESSION) is False


def test_mismatch_message_names_both_sides():
    msg = describe_user_session_mismatch(make_user("u", domain_id="ui-ux"), SESSION)
    assert "ui-ux/batch-a" in msg
    assert "web-dev/batch-a" in msg
