from __future__ import annotations

from datetime import datetime
from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, normalize_mysql_date
from .model import Session
from .repository import SessionRepository

_COLUMNS = (
    "session_id, domain_id, batch_id, session_date, session_time, meet_link, "
    "attendance_code, code_expires_at, created_at"
)


def _row_to_session(row: dict) -> Session:
    return Session(
        session_id=row["session_id"],
        domain_id=row["domain_id"],
        batch_id=row["batch_id"],
        session_date=normalize_mysql_date(row["session_date"]),
        session_time=row.get("session_time") or "",
        meet_link=row.get("meet_link") or "",
        attendance_code=str(row["attendance_code"]),
        code_expires_at=row["code_expires_at"],
        created_at=row.get("created_at"),
    )


class MySQLSessionRepository(SessionRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def add(self, session: Session) -> str:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO sessions(session_id, domain_id, batch_id, session_date, session_time,
                                     meet_link, attendance_code, code_expires_at, created_at)
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    session.session_id,
                    session.domain_id,
                    session.batch_id,
                    session.session_date,
                    session.session_time,
                    session.meet_link,
                    session.attendance_code,
                    session.code_expires_at,
                    session.created_at,
                ),
            )
            return session.session_id

    def get_by_id(self, session_id: str) -> Optional[Session]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM sessions WHERE session_id=%s", (session_id,))
            row = fetchone(cur)
            return _row_to_session(row) if row else None

    def find_by_code(self, code: str) -> Optional[Session]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM sessions
                WHERE attendance_code=%s
                ORDER BY code_expires_at DESC, session_id ASC
                LIMIT 1
                """,
                (code,),
            )
            row = fetchone(cur)
            return _row_to_session(row) if row else None

    def code_in_use(self, code: str, *, now: datetime) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT 1 AS hit FROM sessions WHERE attendance_code=%s AND code_expires_at >= %s LIMIT 1",
                (code, now),
            )
            return fetchone(cur) is not None

    def list_sessions(
        self,
        *,
        domain_id: Optional[str] = None,
        batch_id: Optional[str] = None,
    ) -> Sequence[Session]:
        clauses: list[str] = []
        params: list[object] = []
        if domain_id:
            clauses.append("domain_id=%s")
            params.append(domain_id)
        if batch_id:
            clauses.append("batch_id=%s")
            params.append(batch_id)

        where = f"WHERE {' AND '.join(clauses)}" if clauses else ""

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM sessions {where} ORDER BY session_date DESC, created_at DESC",
                tuple(params),
            )
            return [_row_to_session(r) for r in fetchall(cur)]

    def count_for_batch(self, batch_id: str) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT COUNT(*) AS total FROM sessions WHERE batch_id=%s", (batch_id,))
            row = fetchone(cur)
            return int(row["total"]) if row else 0
