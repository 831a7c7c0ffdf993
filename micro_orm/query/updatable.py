"""INSERT / UPDATE / DELETE statement builder."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

from micro_orm.core.exceptions import (
    InvalidFieldsError,
    MissingFilterError,
    ParameterBindingError,
    StatementError,
)
from micro_orm.core.helpers import DbHelper
from micro_orm.query.filter import FilterExpression, as_filter, combine


class Updatable:
    """Fluent builder for write statements.

    Fields are declared first, then a filter is added for update/delete.
    Each ``build_*`` renders ``{"sql": str, "params": dict}`` and leaves the
    builder untouched.
    """

    def __init__(self) -> None:
        self._table: str | None = None
        self._fields: list[str] = []
        self._filters: list[FilterExpression] = []

    @classmethod
    def get_instance(cls) -> Updatable:
        return cls()

    def table(self, name: str) -> Updatable:
        self._table = name
        return self

    def fields(self, fields: Iterable[str]) -> Updatable:
        for name in fields:
            if name not in self._fields:
                self._fields.append(name)
        return self

    @property
    def field_list(self) -> list[str]:
        return list(self._fields)

    def where(
        self, condition: str | FilterExpression, params: Mapping[str, Any] | None = None
    ) -> Updatable:
        self._filters.append(as_filter(condition, params))
        return self

    def _require_table(self) -> str:
        if not self._table:
            raise StatementError("Statement has no table")
        return self._table

    def _columns(self, params: Mapping[str, Any], action: str) -> list[str]:
        """Declared fields that have a value in *params*."""
        columns = [name for name in self._fields if name in params]
        if not columns:
            raise InvalidFieldsError(self._require_table(), action)
        return columns

    def _filter(self, action: str) -> tuple[str, dict[str, Any]]:
        predicate, filter_params = combine(self._filters)
        if not predicate:
            raise MissingFilterError(self._require_table(), action)
        return predicate, filter_params

    def build_insert(
        self, params: Mapping[str, Any], helper: DbHelper | None = None
    ) -> dict[str, Any]:
        table = self._require_table()
        columns = self._columns(params, "insert")
        quote = helper.delimit_field if helper is not None else str
        sql = (
            f"INSERT INTO {table} ({', '.join(quote(c) for c in columns)}) "
            f"VALUES ({', '.join(':' + c for c in columns)})"
        )
        return {"sql": sql, "params": {c: params[c] for c in columns}}

    def build_update(
        self, params: Mapping[str, Any], helper: DbHelper | None = None
    ) -> dict[str, Any]:
        table = self._require_table()
        predicate, filter_params = self._filter("update")
        columns = self._columns(params, "update")
        quote = helper.delimit_field if helper is not None else str

        bound = {c: params[c] for c in columns}
        for name, value in filter_params.items():
            if name in bound and bound[name] != value:
                raise ParameterBindingError(
                    predicate, f"'{name}' is both a column value and a filter binding"
                )
            bound[name] = value

        assignments = ", ".join(f"{quote(c)} = :{c}" for c in columns)
        sql = f"UPDATE {table} SET {assignments} WHERE {predicate}"
        return {"sql": sql, "params": bound}

    def build_delete(self, params: Mapping[str, Any] | None = None) -> dict[str, Any]:
        table = self._require_table()
        predicate, filter_params = self._filter("delete")
        return {
            "sql": f"DELETE FROM {table} WHERE {predicate}",
            "params": {**(params or {}), **filter_params},
        }
