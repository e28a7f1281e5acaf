from __future__ import annotations

from typing import Dict, Optional, Sequence

import mysql.connector

from ..core.enums import AttendanceStatus
from ..core.exceptions import AlreadyMarked
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, is_duplicate_key
from .model import AttendanceRecord
from .repository import AttendanceRepository

_COLUMNS = "attendance_id, user_id, session_id, batch_id, domain_id, status, marked_at"


def _row_to_record(row: dict) -> AttendanceRecord:
    return AttendanceRecord(
        attendance_id=row["attendance_id"],
        user_id=row["user_id"],
        session_id=row["session_id"],
        batch_id=row["batch_id"],
        domain_id=row["domain_id"],
        status=AttendanceStatus(row["status"]),
        marked_at=row["marked_at"],
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_for_session_and_user(self, *, session_id: str, user_id: str) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM attendance WHERE session_id=%s AND user_id=%s LIMIT 1",
                (session_id, user_id),
            )
            row = fetchone(cur)
            return _row_to_record(row) if row else None

    def add(self, record: AttendanceRecord) -> str:
        with db_cursor(self._conn_factory) as (_, cur):
            try:
                cur.execute(
                    """
                    INSERT INTO attendance(attendance_id, user_id, session_id, batch_id, domain_id, status, marked_at)
                    VALUES(%s,%s,%s,%s,%s,%s,%s)
                    """,
                    (
                        record.attendance_id,
                        record.user_id,
                        record.session_id,
                        record.batch_id,
                        record.domain_id,
                        record.status.value,
                        record.marked_at,
                    ),
                )
            except mysql.connector.IntegrityError as e:
                # uq_attendance_session_user closes the check-then-insert race.
                if is_duplicate_key(e):
                    raise AlreadyMarked("Attendance already marked") from e
                raise
            return record.attendance_id

    def list_for_user(self, user_id: str) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM attendance WHERE user_id=%s ORDER BY marked_at DESC",
                (user_id,),
            )
            return [_row_to_record(r) for r in fetchall(cur)]

    def count_for_user(self, user_id: str) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT COUNT(*) AS total FROM attendance WHERE user_id=%s", (user_id,))
            row = fetchone(cur)
            return int(row["total"]) if row else 0

    def count_by_user(self) -> Dict[str, int]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT user_id, COUNT(*) AS total FROM attendance GROUP BY user_id")
            return {r["user_id"]: int(r["total"]) for r in fetchall(cur)}
