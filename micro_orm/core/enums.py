"""Database backend enumeration."""

from __future__ import annotations

from enum import Enum


class DatabaseBackend(Enum):
    """Backends with an adapter and a dialect helper."""

    SQLITE = "sqlite"
    POSTGRESQL = "postgresql"
    MYSQL = "mysql"

    @classmethod
    def from_driver(cls, name: str) -> DatabaseBackend:
        """Resolve a driver name, accepting common aliases. Raises ValueError."""
        key = name.strip().lower()
        return cls(_DRIVER_ALIASES.get(key, key))


_DRIVER_ALIASES = {
    "sqlite3": "sqlite",
    "postgres": "postgresql",
    "psycopg": "postgresql",
    "mariadb": "mysql",
}
