from __future__ import annotations

from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Domain
from .repository import DomainRepository


def _row_to_domain(row: dict) -> Domain:
    return Domain(domain_id=row["domain_id"], name=row["name"], created_at=row.get("created_at"))


class MySQLDomainRepository(DomainRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, domain_id: str) -> Optional[Domain]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT domain_id, name, created_at FROM domains WHERE domain_id=%s", (domain_id,))
            row = fetchone(cur)
            return _row_to_domain(row) if row else None

    def list_all(self) -> Sequence[Domain]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT domain_id, name, created_at FROM domains ORDER BY name ASC")
            return [_row_to_domain(r) for r in fetchall(cur)]

    def add(self, domain: Domain) -> str:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "INSERT INTO domains(domain_id, name, created_at) VALUES(%s,%s,%s)",
                (domain.domain_id, domain.name, domain.created_at),
            )
            return domain.domain_id

    def rename(self, domain_id: str, *, name: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE domains SET name=%s WHERE domain_id=%s", (name, domain_id))
            return cur.rowcount > 0

    def delete(self, domain_id: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM domains WHERE domain_id=%s", (domain_id,))
            return cur.rowcount > 0
