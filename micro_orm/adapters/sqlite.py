"""SQLite adapter using the stdlib sqlite3 module."""

from __future__ import annotations

import sqlite3
from typing import Any

from micro_orm.core.connection import ConnectionConfig
from micro_orm.core.exceptions import PoolError


class SqliteAdapter:
    """SQLite adapter. Each pooled connection is opened with ``sqlite3.Row`` rows."""

    @property
    def paramstyle(self) -> str:
        return "named"

    def create_pool(self, config: ConnectionConfig) -> list[sqlite3.Connection]:
        """Create a 'pool' (list of connections) for SQLite.

        An in-memory database is private to its connection, so use
        ``pool_size=1`` with ``:memory:``.
        """
        pool: list[sqlite3.Connection] = []
        for _ in range(config.pool_size):
            conn = sqlite3.connect(config.database, check_same_thread=False, **config.extra)
            conn.row_factory = sqlite3.Row
            pool.append(conn)
        return pool

    def acquire_connection(self, pool: list[sqlite3.Connection]) -> sqlite3.Connection:
        if not pool:
            raise PoolError("No connections available in pool")
        return pool.pop()

    def release_connection(
        self, connection: sqlite3.Connection, pool: list[sqlite3.Connection]
    ) -> None:
        pool.append(connection)

    def close_pool(self, pool: list[sqlite3.Connection]) -> None:
        for conn in pool:
            conn.close()
        pool.clear()

    def execute(
        self,
        connection: sqlite3.Connection,
        sql: str,
        params: dict[str, Any] | None = None,
    ) -> sqlite3.Cursor:
        return connection.execute(sql, params or {})
