"""Dialect helpers.

A DbHelper carries the few things that differ between backends when the
statement builders and the Repository write SQL: identifier quoting, the
row-lock clause, and how to read back an auto-generated key.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from micro_orm.core.enums import DatabaseBackend

if TYPE_CHECKING:
    from micro_orm.core.driver import Driver


class DbHelper:
    """Base dialect helper. Subclasses set the quote characters."""

    field_quote_open = '"'
    field_quote_close = '"'

    def delimit_field(self, name: str) -> str:
        """Quote a column name, keeping any ``table.`` qualifier separate."""
        return ".".join(
            f"{self.field_quote_open}{part}{self.field_quote_close}" for part in name.split(".")
        )

    def delimit_table(self, name: str) -> str:
        return self.delimit_field(name)

    def for_update_clause(self) -> str:
        return " FOR UPDATE"

    def last_insert_id(self, connection: Any, cursor: Any) -> Any:
        """Read the key generated by the insert that produced *cursor*."""
        return cursor.lastrowid

    def execute_and_get_inserted_id(
        self, driver: Driver, sql: str, params: dict[str, Any] | None = None
    ) -> Any:
        return driver.execute_insert(sql, params)


class SqliteHelper(DbHelper):
    def for_update_clause(self) -> str:
        # SQLite locks the whole database; there is no row-level lock clause.
        return ""


class PostgresqlHelper(DbHelper):
    def last_insert_id(self, connection: Any, cursor: Any) -> Any:
        row = connection.execute("SELECT lastval()").fetchone()
        if isinstance(row, dict):
            return next(iter(row.values()))
        return row[0]


class MysqlHelper(DbHelper):
    field_quote_open = "`"
    field_quote_close = "`"


_HELPERS: dict[DatabaseBackend, type[DbHelper]] = {
    DatabaseBackend.SQLITE: SqliteHelper,
    DatabaseBackend.POSTGRESQL: PostgresqlHelper,
    DatabaseBackend.MYSQL: MysqlHelper,
}


def get_db_helper(backend: DatabaseBackend) -> DbHelper:
    """Return the helper for *backend*."""
    return _HELPERS[backend]()
