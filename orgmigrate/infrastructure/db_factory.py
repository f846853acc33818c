"""
PostgreSQL persistence gateway for the migration pipeline.

Opens one autocommit psycopg connection per run: each INSERT commits on its own
and nothing spans tables, which is the contract the migrator is written
against. Rows come back as dicts through ``RETURNING *`` so that generated ids
can be threaded into child inserts.

Includes retry logic for transient connection failures using tenacity.
"""

from __future__ import annotations

from typing import List, Optional, Sequence

import psycopg
from psycopg import Connection, sql
from psycopg.rows import dict_row
from tenacity import Retrying, retry_if_exception_type, stop_after_attempt, wait_exponential

from orgmigrate.config import Settings, get_settings
from orgmigrate.errors import GatewayError
from orgmigrate.infrastructure.gateway import NotEqual, Record
from orgmigrate.utils.logging import get_logger

log = get_logger(__name__)


def build_dsn(settings: Optional[Settings] = None) -> str:
    """Compose a DSN string from settings."""
    settings = settings or get_settings()
    return (
        f"postgresql://{settings.db_user}:{settings.db_password}"
        f"@{settings.db_host}:{settings.db_port}/{settings.db_name}"
    )


def get_sync_connection(dsn: Optional[str] = None, attempts: Optional[int] = None) -> Connection:
    """
    Acquire an autocommit connection with automatic retry.

    Retries with exponential backoff for transient connection errors.

    Raises
    ------
    psycopg.OperationalError
        If connection fails after all retry attempts.
    """
    settings = get_settings()
    conninfo = dsn or build_dsn(settings)
    for attempt in Retrying(
        stop=stop_after_attempt(attempts or settings.db_connect_retries),
        wait=wait_exponential(multiplier=1, min=1, max=10),
        retry=retry_if_exception_type((psycopg.OperationalError, psycopg.InterfaceError)),
        reraise=True,
    ):
        with attempt:
            return psycopg.connect(conninfo, autocommit=True, row_factory=dict_row)
    raise AssertionError("unreachable")  # pragma: no cover


class PostgresGateway:
    """
    Persistence gateway over a single psycopg connection.

    Example
    -------
        with PostgresGateway.connect() as gateway:
            created = gateway.insert("organizations", [{"name": "...", ...}])
    """

    def __init__(self, conn: Connection) -> None:
        self._conn = conn

    @classmethod
    def connect(cls, dsn: Optional[str] = None) -> "PostgresGateway":
        return cls(get_sync_connection(dsn))

    def __enter__(self) -> "PostgresGateway":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def close(self) -> None:
        if not self._conn.closed:
            self._conn.close()

    def insert(self, table: str, rows: Sequence[Record]) -> List[Record]:
        table = str(table)
        if not rows:
            return []
        columns = list(rows[0])
        if any(list(row) != columns for row in rows[1:]):
            raise GatewayError(f"rows for {table} do not share one column set", table)

        row_template = sql.SQL("({})").format(sql.SQL(", ").join(sql.Placeholder() * len(columns)))
        query = sql.SQL("INSERT INTO {} ({}) VALUES {} RETURNING *").format(
            sql.Identifier(table),
            sql.SQL(", ").join(map(sql.Identifier, columns)),
            sql.SQL(", ").join([row_template] * len(rows)),
        )
        params = [row[column] for row in rows for column in columns]
        try:
            with self._conn.cursor() as cur:
                cur.execute(query, params)
                return list(cur.fetchall())
        except psycopg.Error as exc:
            raise GatewayError(str(exc).strip(), table) from exc

    def delete_where(self, table: str, predicate: NotEqual) -> None:
        table = str(table)
        query = sql.SQL("DELETE FROM {} WHERE {} <> %s").format(
            sql.Identifier(table), sql.Identifier(predicate.column)
        )
        try:
            with self._conn.cursor() as cur:
                cur.execute(query, (predicate.value,))
                log.debug("Cleared table", extra={"table": table, "rows": cur.rowcount})
        except psycopg.Error as exc:
            raise GatewayError(str(exc).strip(), table) from exc


__all__ = ["PostgresGateway", "build_dsn", "get_sync_connection"]
