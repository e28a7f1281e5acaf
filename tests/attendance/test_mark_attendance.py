from __future__ import annotations

import threading
from concurrent.futures import ThreadPoolExecutor
from datetime import timedelta

import pytest

from fakes import T0, FixedCodes, InMemoryAttendance, make_user
from training_attendance.attendance.service import AttendanceService
from training_attendance.core.enums import AttendanceStatus
from training_attendance.core.exceptions import (
    AlreadyMarked,
    CodeExpired,
    HierarchyMismatch,
    InvalidCode,
    UserNotFound,
    ValidationError,
)
from training_attendance.sessions.service import SessionService


@pytest.fixture
def session(repos):
    # Domain "web-dev", batch "batch-a", 5 minute window opened at T0.
    svc = SessionService(repos.sessions, repos.batches, code_generator=FixedCodes("123456"))
    return svc.create_session(domain_id="web-dev", batch_id="batch-a", date="2026-03-02", duration_minutes=5, now=T0)


@pytest.fixture
def svc(repos):
    return AttendanceService(repos.attendance, repos.sessions, repos.users)


def test_code_redeemed_within_window_is_accepted(svc, repos, session):
    receipt = svc.mark_attendance("u", "123456", now=T0 + timedelta(minutes=1))

    assert receipt.session_id == session.session_id
    assert receipt.user_id == "u"
    records = repos.attendance.all_records()
    assert len(records) == 1
    rec = records[0]
    assert (rec.user_id, rec.session_id, rec.batch_id, rec.domain_id) == ("u", session.session_id, "batch-a", "web-dev")
    assert rec.status == AttendanceStatus.PRESENT
    assert rec.marked_at == T0 + timedelta(minutes=1)


def test_code_redeemed_exactly_at_expiry_is_accepted(svc, session):
    svc.mark_attendance("u", "123456", now=session.code_expires_at)


def test_code_redeemed_after_expiry_is_rejected(svc, repos, session):
    with pytest.raises(CodeExpired):
        svc.mark_attendance("u", "123456", now=T0 + timedelta(minutes=6))
    assert repos.attendance.all_records() == []


def test_user_from_other_domain_is_rejected_with_both_sides(svc, repos, session):
    repos.users.add(make_user("x", domain_id="ui-ux", batch_id="batch-a"))

    with pytest.raises(HierarchyMismatch) as exc:
        svc.mark_attendance("x", "123456", now=T0 + timedelta(minutes=1))

    msg = str(exc.value)
    assert "ui-ux" in msg
    assert "web-dev" in msg
    assert "batch-a" in msg
    assert repos.attendance.all_records() == []


def test_user_without_batch_is_rejected(svc, repos, session):
    repos.users.add(make_user("nobatch", batch_id=None))
    with pytest.raises(HierarchyMismatch):
        svc.mark_attendance("nobatch", "123456", now=T0)


def test_second_submission_is_already_marked(svc, repos, session):
    svc.mark_attendance("u", "123456", now=T0 + timedelta(minutes=1))
    with pytest.raises(AlreadyMarked):
        svc.mark_attendance("u", "123456", now=T0 + timedelta(minutes=2))
    assert len(repos.attendance.all_records()) == 1


def test_unknown_code_is_invalid(svc, session):
    with pytest.raises(InvalidCode):
        svc.mark_attendance("u", "000000", now=T0)


def test_unknown_user_is_not_found(svc, session):
    with pytest.raises(UserNotFound):
        svc.mark_attendance("ghost", "123456", now=T0)


def test_blank_code_is_a_validation_error(svc, session):
    with pytest.raises(ValidationError):
        svc.mark_attendance("u", "  ", now=T0)


def test_expiry_is_checked_before_user_and_hierarchy(svc, session):
    # Both the user and the time are wrong; the expiry rejection wins.
    with pytest.raises(CodeExpired):
        svc.mark_attendance("ghost", "123456", now=T0 + timedelta(minutes=10))


def test_shared_code_resolves_to_latest_expiring_session(svc, repos, session):
    # An old, expired session with the same code must not shadow a fresh one.
    newer = SessionService(repos.sessions, repos.batches, code_generator=FixedCodes("123456")).create_session(
        domain_id="web-dev", batch_id="batch-a", date="2026-03-03", now=T0 + timedelta(hours=2)
    )

    receipt = svc.mark_attendance("u", "123456", now=T0 + timedelta(hours=2, minutes=1))
    assert receipt.session_id == newer.session_id


class RacingAttendance(InMemoryAttendance):
    """Holds every duplicate check until all submitters have passed it."""

    def __init__(self, parties: int):
        super().__init__()
        self._barrier = threading.Barrier(parties, timeout=5)

    def get_for_session_and_user(self, *, session_id, user_id):
        found = super().get_for_session_and_user(session_id=session_id, user_id=user_id)
        self._barrier.wait()
        return found


def test_concurrent_submissions_store_exactly_one_record(repos, session):
    parties = 4
    attendance = RacingAttendance(parties)
    svc = AttendanceService(attendance, repos.sessions, repos.users)

    def submit():
        try:
            svc.mark_attendance("u", "123456", now=T0 + timedelta(minutes=1))
            return "accepted"
        except AlreadyMarked:
            return "already"

    with ThreadPoolExecutor(max_workers=parties) as pool:
        outcomes = list(pool.map(lambda _: submit(), range(parties)))

    assert outcomes.count("accepted") == 1
    assert outcomes.count("already") == parties - 1
    assert len(attendance.all_records()) == 1


def test_student_sessions_flag_attended_and_hide_code(svc, repos, session):
    other = SessionService(repos.sessions, repos.batches, code_generator=FixedCodes("654321")).create_session(
        domain_id="web-dev", batch_id="batch-a", date="2026-03-05", now=T0
    )
    svc.mark_attendance("u", "123456", now=T0)

    rows = svc.get_student_sessions("u")

    assert [r["id"] for r in rows] == [other.session_id, session.session_id]
    assert [r["attended"] for r in rows] == [False, True]
    assert all("attendanceCode" not in r for r in rows)


def test_numeric_code_is_accepted(svc, repos, session):
    receipt = svc.mark_attendance("u", 123456, now=T0 + timedelta(minutes=1))

    assert receipt.session_id == session.session_id
    assert len(repos.attendance.all_records()) == 1


@pytest.mark.parametrize("code", [["123456"], 123456.0, True])
def test_non_text_code_is_rejected_with_type_message(svc, session, code):
    with pytest.raises(ValidationError, match="must be a string"):
        svc.mark_attendance("u", code, now=T0)
