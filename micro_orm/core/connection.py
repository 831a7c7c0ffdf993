"""Connection configuration and management.

ConnectionConfig is a Pydantic model for type-safe connection config.
ConnectionManager resolves the adapter for the configured driver and owns
the connection pool.
"""

from __future__ import annotations

import importlib
import logging
from contextlib import contextmanager
from typing import Any

from pydantic import BaseModel

from micro_orm.core.enums import DatabaseBackend
from micro_orm.core.exceptions import AdapterError

logger = logging.getLogger(__name__)


class ConnectionConfig(BaseModel):
    """Configuration for database connections."""

    driver: str
    host: str | None = None
    port: int | None = None
    user: str | None = None
    password: str | None = None
    database: str
    pool_size: int = 5
    extra: dict[str, Any] = {}

    @property
    def backend(self) -> DatabaseBackend:
        try:
            return DatabaseBackend.from_driver(self.driver)
        except ValueError:
            raise AdapterError(f"Unsupported database driver: {self.driver}") from None


# Adapter module mapping: backend → (module_path, adapter_class)
_ADAPTER_MAP: dict[DatabaseBackend, tuple[str, str]] = {
    DatabaseBackend.SQLITE: ("micro_orm.adapters.sqlite", "SqliteAdapter"),
    DatabaseBackend.POSTGRESQL: ("micro_orm.adapters.postgresql", "PostgresqlAdapter"),
    DatabaseBackend.MYSQL: ("micro_orm.adapters.mysql", "MysqlAdapter"),
}


def _load_adapter(backend: DatabaseBackend) -> Any:
    """Load the adapter for *backend*."""
    module_path, cls_name = _ADAPTER_MAP[backend]
    try:
        module = importlib.import_module(module_path)
        return getattr(module, cls_name)()
    except (ImportError, AttributeError) as e:
        raise AdapterError(f"Failed to load adapter for '{backend.value}': {e}") from e


class ConnectionManager:
    """Pool-backed connection manager using the SyncAdapter protocol."""

    def __init__(self, config: ConnectionConfig) -> None:
        self.config = config
        self._backend = config.backend
        self._adapter = _load_adapter(self._backend)
        self._pool: Any = None

    @property
    def adapter(self) -> Any:
        return self._adapter

    @property
    def backend(self) -> DatabaseBackend:
        return self._backend

    def initialize_pool(self) -> Any:
        """Initialize the connection pool."""
        if self._pool is None:
            logger.debug(
                "Opening %s pool of %d connection(s)", self._backend.value, self.config.pool_size
            )
            self._pool = self._adapter.create_pool(self.config)
        return self._pool

    def acquire(self) -> Any:
        """Take a connection out of the pool. Pair with release()."""
        if self._pool is None:
            self.initialize_pool()
        return self._adapter.acquire_connection(self._pool)

    def release(self, connection: Any) -> None:
        """Return a connection obtained from acquire()."""
        self._adapter.release_connection(connection, self._pool)

    @contextmanager
    def get_connection(self):  # type: ignore[no-untyped-def]
        """Get a connection from the pool as a context manager."""
        connection = self.acquire()
        try:
            yield connection
        finally:
            self.release(connection)

    def close_pool(self) -> None:
        """Close the connection pool."""
        if self._pool is not None:
            self._adapter.close_pool(self._pool)
            self._pool = None
