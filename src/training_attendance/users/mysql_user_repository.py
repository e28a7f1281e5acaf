from __future__ import annotations

from typing import Optional, Sequence

from ..core.enums import Role
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import User
from .repository import UserRepository

_COLUMNS = "user_id, uid, email, name, role, domain_id, batch_id, created_at"


def _row_to_user(row: dict) -> User:
    return User(
        user_id=row["user_id"],
        uid=row.get("uid"),
        email=row["email"],
        name=row["name"],
        role=Role(row["role"]),
        domain_id=row.get("domain_id"),
        batch_id=row.get("batch_id"),
        created_at=row.get("created_at"),
    )


class MySQLUserRepository(UserRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def _get_one(self, column: str, value: str) -> Optional[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM users WHERE {column}=%s LIMIT 1", (value,))
            row = fetchone(cur)
            return _row_to_user(row) if row else None

    def get_by_id(self, user_id: str) -> Optional[User]:
        return self._get_one("user_id", user_id)

    def get_by_uid(self, uid: str) -> Optional[User]:
        return self._get_one("uid", uid)

    def get_by_email(self, email: str) -> Optional[User]:
        return self._get_one("email", email)

    def add(self, user: User) -> str:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO users(user_id, uid, email, name, role, domain_id, batch_id, created_at)
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    user.user_id,
                    user.uid,
                    user.email,
                    user.name,
                    user.role.value,
                    user.domain_id,
                    user.batch_id,
                    user.created_at,
                ),
            )
            return user.user_id

    def set_uid(self, user_id: str, *, uid: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE users SET uid=%s WHERE user_id=%s", (uid, user_id))
            return cur.rowcount > 0

    def delete_by_id(self, user_id: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM users WHERE user_id=%s", (user_id,))
            return cur.rowcount > 0

    def list_users(
        self,
        *,
        role: Optional[Role] = None,
        domain_id: Optional[str] = None,
        batch_id: Optional[str] = None,
    ) -> Sequence[User]:
        clauses: list[str] = []
        params: list[object] = []
        if role is not None:
            clauses.append("role=%s")
            params.append(role.value)
        if domain_id:
            clauses.append("domain_id=%s")
            params.append(domain_id)
        if batch_id:
            clauses.append("batch_id=%s")
            params.append(batch_id)

        where = f"WHERE {' AND '.join(clauses)}" if clauses else ""

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM users {where} ORDER BY name ASC", tuple(params))
            return [_row_to_user(r) for r in fetchall(cur)]
