"""Statement driver.

The Driver executes rendered SQL through the configured adapter. It is the
only place raw driver exceptions are seen; they are re-raised as
StatementExecutionError with the original exception chained.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

from micro_orm.core.connection import ConnectionConfig, ConnectionManager
from micro_orm.core.exceptions import StatementExecutionError
from micro_orm.core.helpers import DbHelper, get_db_helper
from micro_orm.core.params import normalize_params
from micro_orm.core.transaction import TransactionManager

logger = logging.getLogger(__name__)


def _row_to_dict(row: Any, columns: list[str]) -> dict[str, Any]:
    """Convert a single cursor row to dict.

    Handles both tuple-like rows and dict-like rows from different adapters.
    """
    if isinstance(row, dict):
        return dict(row)
    return dict(zip(columns, row, strict=True))


class Driver:
    """Executes SQL against a pooled connection.

    Outside a transaction every write is committed immediately. Inside
    ``with driver.transaction():`` all statements issued by the current
    thread share the transaction's connection.
    """

    def __init__(self, connection_manager: ConnectionManager) -> None:
        self._connection_manager = connection_manager
        self._adapter = connection_manager.adapter
        self._paramstyle: str = self._adapter.paramstyle
        self._helper = get_db_helper(connection_manager.backend)
        self._local = threading.local()

    @classmethod
    def from_config(cls, config: ConnectionConfig) -> Driver:
        """Create a Driver from a ConnectionConfig."""
        return cls(ConnectionManager(config))

    @property
    def connection_manager(self) -> ConnectionManager:
        return self._connection_manager

    def get_db_helper(self) -> DbHelper:
        return self._helper

    def close(self) -> None:
        """Close the underlying connection pool."""
        self._connection_manager.close_pool()

    # --- transaction plumbing ---

    @property
    def active_transaction(self) -> TransactionManager | None:
        return getattr(self._local, "transaction", None)

    def _bind_transaction(self, transaction: TransactionManager | None) -> None:
        self._local.transaction = transaction

    @contextmanager
    def _connection(self):  # type: ignore[no-untyped-def]
        """Yield ``(connection, autocommit)`` for one statement."""
        transaction = self.active_transaction
        if transaction is not None:
            yield transaction.connection, False
            return
        with self._connection_manager.get_connection() as conn:
            yield conn, True

    def _run(self, connection: Any, sql: str, params: dict[str, Any] | None) -> Any:
        logger.debug("Executing %s [params: %s]", sql, ", ".join(sorted(params or {})))
        try:
            return self._adapter.execute(
                connection, normalize_params(sql, self._paramstyle), params
            )
        except Exception as e:
            raise StatementExecutionError(sql, str(e)) from e

    # --- execution ---

    def execute(self, sql: str, params: dict[str, Any] | None = None) -> int:
        """Execute a write statement. Returns affected row count."""
        with self._connection() as (conn, autocommit):
            try:
                cursor = self._run(conn, sql, params)
            except StatementExecutionError:
                if autocommit:
                    conn.rollback()
                raise
            if autocommit:
                conn.commit()
            return int(cursor.rowcount)

    def execute_insert(self, sql: str, params: dict[str, Any] | None = None) -> Any:
        """Execute an insert and return the key generated by the database."""
        with self._connection() as (conn, autocommit):
            try:
                cursor = self._run(conn, sql, params)
                inserted_id = self._helper.last_insert_id(conn, cursor)
            except StatementExecutionError:
                if autocommit:
                    conn.rollback()
                raise
            if autocommit:
                conn.commit()
            logger.debug("Insert generated id %r", inserted_id)
            return inserted_id

    def get_iterator(
        self, sql: str, params: dict[str, Any] | None = None
    ) -> Iterator[dict[str, Any]]:
        """Lazily yield result rows as dicts.

        The statement runs on the first ``next()``; the connection is held
        until the iterator is exhausted or closed. Single pass only.
        """
        with self._connection() as (conn, _autocommit):
            cursor = self._run(conn, sql, params)
            if cursor.description is None:
                return
            columns = [desc[0] for desc in cursor.description]
            for row in cursor:
                yield _row_to_dict(row, columns)

    def transaction(self) -> TransactionManager:
        """Create a new transaction context manager."""
        return TransactionManager(self)
