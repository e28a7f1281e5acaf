from __future__ import annotations

from dataclasses import dataclass

from .attendance.eligibility import EligibilityService
from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.repository import AttendanceRepository
from .attendance.service import AttendanceService
from .batches.mysql_batch_repository import MySQLBatchRepository
from .batches.repository import BatchRepository
from .batches.service import BatchService
from .core.constants import DEFAULT_CODE_DURATION_MINUTES, DEFAULT_DB_TIMEOUT_SECONDS, DEFAULT_TOKEN_MAX_AGE_SECONDS
from .database.connection import DBConfig, DatabaseConnection
from .domains.mysql_domain_repository import MySQLDomainRepository
from .domains.repository import DomainRepository
from .domains.service import DomainService
from .identity.provider import IdentityProvider, SignedTokenIdentityProvider
from .reports.service import DashboardService
from .sessions.mysql_session_repository import MySQLSessionRepository
from .sessions.repository import SessionRepository
from .sessions.service import SessionService
from .users.mysql_user_repository import MySQLUserRepository
from .users.repository import UserRepository
from .users.service import AuthService, UserService


@dataclass(frozen=True)
class Container:
    domains_repo: DomainRepository
    batches_repo: BatchRepository
    users_repo: UserRepository
    sessions_repo: SessionRepository
    attendance_repo: AttendanceRepository

    identity_provider: IdentityProvider

    auth_service: AuthService
    user_service: UserService
    domain_service: DomainService
    batch_service: BatchService
    session_service: SessionService
    attendance_service: AttendanceService
    eligibility_service: EligibilityService
    dashboard_service: DashboardService


def wire_container(
    *,
    domains_repo: DomainRepository,
    batches_repo: BatchRepository,
    users_repo: UserRepository,
    sessions_repo: SessionRepository,
    attendance_repo: AttendanceRepository,
    identity_provider: IdentityProvider,
    code_duration_minutes: int = DEFAULT_CODE_DURATION_MINUTES,
    session_service: SessionService | None = None,
) -> Container:
    """Assemble services on top of already chosen repositories."""

    return Container(
        domains_repo=domains_repo,
        batches_repo=batches_repo,
        users_repo=users_repo,
        sessions_repo=sessions_repo,
        attendance_repo=attendance_repo,
        identity_provider=identity_provider,
        auth_service=AuthService(users_repo),
        user_service=UserService(users_repo, domains_repo, batches_repo),
        domain_service=DomainService(domains_repo),
        batch_service=BatchService(batches_repo, domains_repo),
        session_service=session_service
        or SessionService(sessions_repo, batches_repo, default_duration_minutes=code_duration_minutes),
        attendance_service=AttendanceService(attendance_repo, sessions_repo, users_repo),
        eligibility_service=EligibilityService(attendance_repo, sessions_repo, users_repo, domains_repo),
        dashboard_service=DashboardService(users_repo, domains_repo, batches_repo, sessions_repo, attendance_repo),
    )


def build_container(
    *,
    db_config: dict,
    secret_key: str,
    db_timeout_seconds: int = DEFAULT_DB_TIMEOUT_SECONDS,
    token_max_age_seconds: int = DEFAULT_TOKEN_MAX_AGE_SECONDS,
    code_duration_minutes: int = DEFAULT_CODE_DURATION_MINUTES,
) -> Container:
    config = DBConfig(
        host=str(db_config["host"]),
        port=int(db_config.get("port", 3306)),
        user=str(db_config["user"]),
        password=str(db_config["password"]),
        database=str(db_config["database"]),
        timeout_seconds=int(db_timeout_seconds),
    )
    conn = DatabaseConnection.get_instance(config)

    return wire_container(
        domains_repo=MySQLDomainRepository(conn),
        batches_repo=MySQLBatchRepository(conn),
        users_repo=MySQLUserRepository(conn),
        sessions_repo=MySQLSessionRepository(conn),
        attendance_repo=MySQLAttendanceRepository(conn),
        identity_provider=SignedTokenIdentityProvider(secret_key, max_age_seconds=token_max_age_seconds),
        code_duration_minutes=code_duration_minutes,
    )
