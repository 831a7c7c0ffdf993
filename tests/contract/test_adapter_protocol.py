"""Contract tests for adapter protocol compliance."""

from __future__ import annotations

import pytest

from micro_orm.adapters.protocol import SyncAdapter
from micro_orm.adapters.sqlite import SqliteAdapter
from micro_orm.core.connection import ConnectionConfig, ConnectionManager
from micro_orm.core.enums import DatabaseBackend
from micro_orm.core.exceptions import AdapterError, PoolError


class TestSqliteAdapterProtocol:
    def test_implements_sync_protocol(self) -> None:
        assert isinstance(SqliteAdapter(), SyncAdapter)

    def test_paramstyle(self) -> None:
        assert SqliteAdapter().paramstyle == "named"

    def test_lifecycle(self, sqlite_config: ConnectionConfig) -> None:
        adapter = SqliteAdapter()
        pool = adapter.create_pool(sqlite_config)
        assert len(pool) == 1

        conn = adapter.acquire_connection(pool)
        assert conn is not None

        cursor = adapter.execute(conn, "SELECT :val AS val", {"val": 1})
        row = cursor.fetchone()
        assert row["val"] == 1

        adapter.release_connection(conn, pool)
        assert len(pool) == 1

        adapter.close_pool(pool)
        assert len(pool) == 0

    def test_empty_pool_raises(self) -> None:
        with pytest.raises(PoolError):
            SqliteAdapter().acquire_connection([])


class TestPostgresqlAdapterProtocol:
    def test_implements_sync_protocol(self) -> None:
        from micro_orm.adapters.postgresql import PostgresqlAdapter

        assert isinstance(PostgresqlAdapter(), SyncAdapter)

    def test_paramstyle(self) -> None:
        from micro_orm.adapters.postgresql import PostgresqlAdapter

        assert PostgresqlAdapter().paramstyle == "pyformat"

    def test_conninfo(self) -> None:
        from micro_orm.adapters.postgresql import _build_conninfo

        config = ConnectionConfig(
            driver="postgresql", host="db", port=5432, user="app", database="orm"
        )
        assert _build_conninfo(config) == "host=db port=5432 user=app dbname=orm"


class TestMysqlAdapterProtocol:
    def test_implements_sync_protocol(self) -> None:
        from micro_orm.adapters.mysql import MysqlAdapter

        assert isinstance(MysqlAdapter(), SyncAdapter)

    def test_paramstyle(self) -> None:
        from micro_orm.adapters.mysql import MysqlAdapter

        assert MysqlAdapter().paramstyle == "pyformat"


class TestConnectionManager:
    def test_backend_from_driver_name(self, sqlite_config: ConnectionConfig) -> None:
        manager = ConnectionManager(sqlite_config)
        assert manager.backend is DatabaseBackend.SQLITE
        assert isinstance(manager.adapter, SqliteAdapter)

    def test_driver_name_is_case_insensitive(self) -> None:
        config = ConnectionConfig(driver="SQLite", database=":memory:")
        assert config.backend is DatabaseBackend.SQLITE

    def test_unsupported_driver(self) -> None:
        config = ConnectionConfig(driver="oracle", database="x")
        with pytest.raises(AdapterError, match="oracle"):
            ConnectionManager(config)

    def test_get_connection_returns_to_pool(self, sqlite_config: ConnectionConfig) -> None:
        manager = ConnectionManager(sqlite_config)
        with manager.get_connection() as conn:
            assert conn is not None
        with manager.get_connection() as again:
            assert again is conn
        manager.close_pool()

    @pytest.mark.parametrize(
        ("name", "backend"),
        [
            ("sqlite3", DatabaseBackend.SQLITE),
            ("Postgres", DatabaseBackend.POSTGRESQL),
            ("mariadb", DatabaseBackend.MYSQL),
        ],
    )
    def test_driver_aliases(self, name: str, backend: DatabaseBackend) -> None:
        assert ConnectionConfig(driver=name, database="x").backend is backend
