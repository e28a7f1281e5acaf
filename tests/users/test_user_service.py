from __future__ import annotations

import pytest

from fakes import T0
from training_attendance.core.constants import DEFAULT_BATCH_ID, DEFAULT_DOMAIN_ID
from training_attendance.core.enums import Role
from training_attendance.core.exceptions import (
    AuthenticationError,
    BatchNotFound,
    DomainNotFound,
    HierarchyMismatch,
    UserNotFound,
    ValidationError,
)
from training_attendance.identity.provider import TokenClaims
from training_attendance.users.service import AuthService, UserService


@pytest.fixture
def users_svc(repos):
    return UserService(repos.users, repos.domains, repos.batches)


def test_add_student_in_matching_batch(users_svc, repos):
    s = users_svc.add_student(name="Ana", email="Ana@Example.com", domain_id="web-dev", batch_id="batch-a", now=T0)

    assert s.role == Role.STUDENT
    assert s.email == "ana@example.com"
    assert repos.users.get_by_id(s.user_id) == s


def test_add_student_batch_from_other_domain(users_svc):
    with pytest.raises(HierarchyMismatch):
        users_svc.add_student(name="Ana", email="ana@example.com", domain_id="web-dev", batch_id="batch-b")


def test_add_student_unknown_batch(users_svc):
    with pytest.raises(BatchNotFound):
        users_svc.add_student(name="Ana", email="ana@example.com", domain_id="web-dev", batch_id="nope")


def test_add_student_duplicate_email(users_svc):
    with pytest.raises(ValidationError):
        users_svc.add_student(name="Dup", email="u@example.com", domain_id="web-dev", batch_id="batch-a")


def test_add_tutor_requires_existing_domain(users_svc):
    with pytest.raises(DomainNotFound):
        users_svc.add_tutor(name="T", email="t@example.com", domain_id="nope")

    tutor = users_svc.add_tutor(name="T", email="t@example.com", domain_id="ui-ux")
    assert tutor.role == Role.TUTOR
    assert tutor.batch_id is None


def test_list_and_delete_by_role(users_svc):
    assert [u.user_id for u in users_svc.list_students(batch_id="batch-a")] == ["u"]
    assert [u.user_id for u in users_svc.list_tutors()] == ["tutor"]

    # A tutor id is not deletable through the student route.
    with pytest.raises(UserNotFound):
        users_svc.delete_user("tutor", role=Role.STUDENT)

    users_svc.delete_user("u", role=Role.STUDENT)
    assert users_svc.list_students() == []


def test_resolve_identity_finds_existing_user(repos):
    user = AuthService(repos.users).resolve_identity(TokenClaims(uid="u", email="u@example.com"))
    assert user.user_id == "u"


def test_resolve_identity_binds_uid_for_precreated_user(repos, users_svc):
    created = users_svc.add_student(name="Ana", email="ana@example.com", domain_id="web-dev", batch_id="batch-a")

    user = AuthService(repos.users).resolve_identity(TokenClaims(uid="firebase-ana", email="ana@example.com"))

    assert user.user_id == created.user_id
    assert user.uid == "firebase-ana"
    assert repos.users.get_by_uid("firebase-ana").user_id == created.user_id


def test_resolve_identity_provisions_student_with_placeholders(repos):
    user = AuthService(repos.users).resolve_identity(
        TokenClaims(uid="new-uid", email="New@Example.com", name=None), now=T0
    )

    assert user.user_id == "new-uid"
    assert user.role == Role.STUDENT
    assert user.name == "Student"
    assert (user.domain_id, user.batch_id) == (DEFAULT_DOMAIN_ID, DEFAULT_BATCH_ID)
    assert repos.users.get_by_id("new-uid") == user


def test_resolve_identity_without_email_cannot_provision(repos):
    with pytest.raises(AuthenticationError):
        AuthService(repos.users).resolve_identity(TokenClaims(uid="new-uid", email=""))
