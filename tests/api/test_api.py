from __future__ import annotations

import pytest

from fakes import FixedCodes
from training_attendance.container import wire_container
from training_attendance.core.exceptions import StoreError
from training_attendance.identity.provider import SignedTokenIdentityProvider
from training_attendance.main import create_app
from training_attendance.sessions.service import SessionService

SECRET = "test-secret"


@pytest.fixture
def client(repos):
    container = wire_container(
        domains_repo=repos.domains,
        batches_repo=repos.batches,
        users_repo=repos.users,
        sessions_repo=repos.sessions,
        attendance_repo=repos.attendance,
        identity_provider=SignedTokenIdentityProvider(SECRET),
        session_service=SessionService(repos.sessions, repos.batches, code_generator=FixedCodes("654321")),
    )
    app = create_app(container, settings_module="training_attendance.config.testing")
    return app.test_client()


def _auth(uid: str) -> dict:
    token = SignedTokenIdentityProvider(SECRET).issue_token(uid=uid, email=f"{uid}@example.com")
    return {"Authorization": f"Bearer {token}"}


def _create_session(client, as_user="tutor"):
    return client.post(
        "/api/attendance/sessions",
        json={"domainId": "web-dev", "batchId": "batch-a", "date": "2026-03-02", "time": "10:00 AM"},
        headers=_auth(as_user),
    )


def test_health_echoes_request_id(client):
    resp = client.get("/health", headers={"X-Request-ID": "req-1"})
    assert resp.status_code == 200
    assert resp.get_json() == {"status": "ok"}
    assert resp.headers["X-Request-ID"] == "req-1"


def test_missing_token_is_401(client):
    resp = client.get("/api/attendance/sessions")
    assert resp.status_code == 401
    assert resp.get_json()["message"] == "No authentication token provided"


def test_garbage_token_is_401(client):
    resp = client.get("/api/attendance/sessions", headers={"Authorization": "Bearer nope"})
    assert resp.status_code == 401


def test_student_cannot_create_session(client):
    assert _create_session(client, as_user="u").status_code == 403


def test_tutor_creates_session_and_student_marks_once(client, repos):
    created = _create_session(client)
    assert created.status_code == 201
    body = created.get_json()
    assert body["attendanceCode"] == "654321"
    assert body["codeExpiresAt"].endswith("Z")

    marked = client.post("/api/attendance/mark", json={"userId": "u", "code": "654321"}, headers=_auth("u"))
    assert marked.status_code == 200
    assert marked.get_json()["sessionId"] == body["id"]

    again = client.post("/api/attendance/mark", json={"userId": "u", "code": "654321"}, headers=_auth("u"))
    assert again.status_code == 400
    assert again.get_json()["message"] == "Attendance already marked"
    assert len(repos.attendance.all_records()) == 1

    stats = client.get("/api/attendance/stats/u", headers=_auth("u")).get_json()
    assert stats["totalSessions"] == 1
    assert stats["attendedSessions"] == 1
    assert stats["percentage"] == 100
    assert stats["isEligible"] is True

    rows = client.get("/api/attendance/student/u/sessions", headers=_auth("u")).get_json()
    assert rows[0]["attended"] is True
    assert "attendanceCode" not in rows[0]


def test_wrong_code_is_400(client):
    _create_session(client)
    resp = client.post("/api/attendance/mark", json={"userId": "u", "code": "000000"}, headers=_auth("u"))
    assert resp.status_code == 400
    assert resp.get_json()["message"] == "Invalid attendance code"


def test_student_cannot_mark_for_someone_else(client, repos):
    _create_session(client)
    resp = client.post("/api/attendance/mark", json={"userId": "tutor", "code": "654321"}, headers=_auth("u"))
    assert resp.status_code == 403
    assert repos.attendance.all_records() == []


def test_student_cannot_read_other_stats(client):
    assert client.get("/api/attendance/stats/admin", headers=_auth("u")).status_code == 403


def test_tutor_limited_to_own_domain(client):
    resp = client.post(
        "/api/attendance/sessions",
        json={"domainId": "ui-ux", "batchId": "batch-b", "date": "2026-03-02"},
        headers=_auth("tutor"),
    )
    assert resp.status_code == 403


def test_sync_provisions_unknown_identity(client, repos):
    token = SignedTokenIdentityProvider(SECRET).issue_token(uid="fresh", email="fresh@example.com", name="Fresh")
    resp = client.post("/api/auth/sync", headers={"Authorization": f"Bearer {token}"})

    assert resp.status_code == 200
    user = resp.get_json()["user"]
    assert user["role"] == "student"
    assert user["domainId"] == "web-dev"
    assert repos.users.get_by_id("fresh") is not None


def test_admin_student_management(client):
    bad = client.post(
        "/api/admin/students",
        json={"name": "Ana", "email": "ana@example.com", "domainId": "web-dev", "batchId": "batch-b"},
        headers=_auth("admin"),
    )
    assert bad.status_code == 400

    ok = client.post(
        "/api/admin/students",
        json={"name": "Ana", "email": "ana@example.com", "domainId": "web-dev", "batchId": "batch-a"},
        headers=_auth("admin"),
    )
    assert ok.status_code == 201

    listed = client.get("/api/admin/students?batchId=batch-a", headers=_auth("admin")).get_json()
    assert {s["email"] for s in listed} == {"u@example.com", "ana@example.com"}

    gone = client.delete("/api/admin/students/missing", headers=_auth("admin"))
    assert gone.status_code == 404


def test_add_batch_for_missing_domain_is_404(client):
    resp = client.post("/api/admin/batches", json={"domainId": "nope", "name": "X"}, headers=_auth("admin"))
    assert resp.status_code == 404


def test_dashboard_is_admin_only(client):
    assert client.get("/api/admin/dashboard/stats", headers=_auth("tutor")).status_code == 403
    resp = client.get("/api/admin/dashboard/stats", headers=_auth("admin"))
    assert resp.status_code == 200
    assert resp.get_json()["totalStudents"] == 1


def test_non_object_body_is_400(client):
    resp = client.post("/api/attendance/mark", json=["x"], headers=_auth("u"))
    assert resp.status_code == 400


def test_numeric_code_marks_attendance(client):
    _create_session(client)
    resp = client.post("/api/attendance/mark", json={"userId": "u", "code": 654321}, headers=_auth("u"))
    assert resp.status_code == 200


def test_store_failure_is_500(client, repos, monkeypatch):
    def unavailable(**_kwargs):
        raise StoreError("Database unavailable")

    monkeypatch.setattr(repos.sessions, "list_sessions", unavailable)

    resp = client.get("/api/attendance/sessions", headers=_auth("admin"))
    assert resp.status_code == 500
    assert resp.get_json() == {"error": "Internal Server Error", "message": "Database unavailable"}


def test_oversized_duration_is_400(client):
    resp = client.post(
        "/api/attendance/sessions",
        json={"domainId": "web-dev", "batchId": "batch-a", "date": "2026-03-02", "durationMinutes": 10**12},
        headers=_auth("tutor"),
    )
    assert resp.status_code == 400


def test_response_keys_keep_payload_order(client):
    resp = client.get("/api/attendance/stats/u", headers=_auth("u"))
    assert list(resp.get_json())[:3] == ["userId", "studentName", "domainName"]
