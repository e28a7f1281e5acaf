from __future__ import annotations

from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, normalize_mysql_date
from .model import Batch
from .repository import BatchRepository

_COLUMNS = "batch_id, domain_id, name, start_date, end_date, created_at"


def _row_to_batch(row: dict) -> Batch:
    return Batch(
        batch_id=row["batch_id"],
        domain_id=row["domain_id"],
        name=row["name"],
        start_date=normalize_mysql_date(row.get("start_date")),
        end_date=normalize_mysql_date(row.get("end_date")),
        created_at=row.get("created_at"),
    )


class MySQLBatchRepository(BatchRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, batch_id: str) -> Optional[Batch]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM batches WHERE batch_id=%s", (batch_id,))
            row = fetchone(cur)
            return _row_to_batch(row) if row else None

    def list_batches(self, *, domain_id: Optional[str] = None) -> Sequence[Batch]:
        sql = f"SELECT {_COLUMNS} FROM batches"
        params: tuple = ()
        if domain_id:
            sql += " WHERE domain_id=%s"
            params = (domain_id,)
        sql += " ORDER BY start_date DESC, name ASC"

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, params)
            return [_row_to_batch(r) for r in fetchall(cur)]

    def add(self, batch: Batch) -> str:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO batches(batch_id, domain_id, name, start_date, end_date, created_at)
                VALUES(%s,%s,%s,%s,%s,%s)
                """,
                (batch.batch_id, batch.domain_id, batch.name, batch.start_date, batch.end_date, batch.created_at),
            )
            return batch.batch_id

    def delete(self, batch_id: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM batches WHERE batch_id=%s", (batch_id,))
            return cur.rowcount > 0
