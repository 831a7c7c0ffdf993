"""SELECT statement builder."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import TYPE_CHECKING, Any

from micro_orm.core.exceptions import StatementError
from micro_orm.query.filter import FilterExpression, as_filter, combine

if TYPE_CHECKING:
    from micro_orm.core.driver import Driver


class Query:
    """Fluent SELECT builder.

    Build a fresh Query per repository call; ``build()`` has no side effects
    and may be called more than once.
    """

    def __init__(self) -> None:
        self._table: str | None = None
        self._alias: str | None = None
        self._fields: list[str] = []
        self._joins: list[str] = []
        self._filters: list[FilterExpression] = []
        self._order: list[str] = []
        self._limit: int | None = None
        self._offset: int | None = None
        self._for_update = False

    @classmethod
    def get_instance(cls) -> Query:
        return cls()

    def table(self, name: str, alias: str | None = None) -> Query:
        self._table = name
        self._alias = alias
        return self

    def fields(self, fields: Iterable[str]) -> Query:
        """Add projected columns. Defaults to ``*`` when none are given."""
        self._fields.extend(fields)
        return self

    def join(self, table: str, on: str, alias: str | None = None) -> Query:
        return self._add_join("INNER JOIN", table, on, alias)

    def left_join(self, table: str, on: str, alias: str | None = None) -> Query:
        return self._add_join("LEFT JOIN", table, on, alias)

    def _add_join(self, kind: str, table: str, on: str, alias: str | None) -> Query:
        target = f"{table} {alias}" if alias else table
        self._joins.append(f"{kind} {target} ON {on}")
        return self

    def where(
        self, condition: str | FilterExpression, params: Mapping[str, Any] | None = None
    ) -> Query:
        """Add a filter. Several filters are AND-combined."""
        self._filters.append(as_filter(condition, params))
        return self

    def order_by(self, *columns: str) -> Query:
        self._order.extend(columns)
        return self

    def limit(self, limit: int, offset: int | None = None) -> Query:
        self._limit = limit
        self._offset = offset
        return self

    def for_update(self, enabled: bool = True) -> Query:
        """Lock the selected rows until the surrounding transaction ends."""
        self._for_update = enabled
        return self

    @property
    def is_for_update(self) -> bool:
        return self._for_update

    def build(self, driver: Driver | None = None) -> dict[str, Any]:
        """Render to ``{"sql": str, "params": dict}``.

        Args:
            driver: Supplies the dialect helper for the row-lock clause.
                Without it the ANSI ``FOR UPDATE`` clause is used.
        """
        if not self._table:
            raise StatementError("Query has no table")

        source = f"{self._table} {self._alias}" if self._alias else self._table
        parts = [f"SELECT {', '.join(self._fields) or '*'} FROM {source}"]
        parts.extend(self._joins)

        predicate, params = combine(self._filters)
        if predicate:
            parts.append(f"WHERE {predicate}")
        if self._order:
            parts.append(f"ORDER BY {', '.join(self._order)}")
        if self._limit is not None:
            parts.append(f"LIMIT {int(self._limit)}")
            if self._offset is not None:
                parts.append(f"OFFSET {int(self._offset)}")

        sql = " ".join(parts)
        if self._for_update:
            helper = driver.get_db_helper() if driver is not None else None
            sql += helper.for_update_clause() if helper is not None else " FOR UPDATE"
        return {"sql": sql, "params": params}
