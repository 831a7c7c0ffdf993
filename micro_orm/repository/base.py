"""Repository - maps record instances onto table rows.

Generates parameterized SQL through the statement builders, executes it
through a Driver and hydrates results through a MappingTable.

Concurrency:
    A Repository keeps no state besides its hooks and borrowed references,
    so it can serve concurrent reads when the Driver's pool allows it.
    ``save`` reads (existence check) before it writes and brings no
    transaction of its own: two writers saving the same key at once may
    both insert (the second fails on the duplicate key) or one may update
    right after the other's insert. Wrap ``save`` in
    ``with driver.transaction():`` when that matters. Replacing a hook
    while saves are in flight is unsynchronized; an in-flight save uses
    whichever hooks object it read when it reached the hook step.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator, Mapping
from dataclasses import replace
from typing import Any, Generic, TypeVar

from micro_orm.core.driver import Driver
from micro_orm.core.exceptions import (
    BeforeHookInvalidError,
    FieldMappingInvalidError,
    MappingError,
    ParameterBindingError,
)
from micro_orm.mapping.binder import bind_object, to_dict_from
from micro_orm.mapping.hydrator import hydrate
from micro_orm.mapping.protocol import MappingTable
from micro_orm.query.filter import FilterExpression
from micro_orm.query.query import Query
from micro_orm.query.updatable import Updatable
from micro_orm.repository.hooks import Hook, RepositoryHooks

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _is_empty(value: Any) -> bool:
    return value is None or (isinstance(value, str) and value == "")


class Repository(Generic[T]):
    """Data mapper for one record type.

    Args:
        driver: Executes SQL. Borrowed, never closed by the repository.
        mapper: Table descriptor of the record type handled here.
        hooks: Before-insert / before-update hooks. Defaults to identity.
    """

    def __init__(
        self,
        driver: Driver,
        mapper: MappingTable[T],
        hooks: RepositoryHooks | None = None,
    ) -> None:
        self.driver = driver
        self._mapper = mapper
        self._hooks = hooks or RepositoryHooks()

    @property
    def mapper(self) -> MappingTable[T]:
        return self._mapper

    @property
    def hooks(self) -> RepositoryHooks:
        return self._hooks

    def set_before_insert(self, hook: Hook) -> None:
        self._hooks = replace(self._hooks, before_insert=hook)

    def set_before_update(self, hook: Hook) -> None:
        self._hooks = replace(self._hooks, before_update=hook)

    # --- keys ---

    def _key_filter(self, key: Any, name: str = "id") -> FilterExpression:
        """Build ``pk = :name`` (one clause per column for composite keys)."""
        columns = self._mapper.primary_keys
        if len(columns) == 1:
            return FilterExpression(f"{columns[0]} = :{name}", {name: key})

        values = tuple(key) if isinstance(key, (tuple, list)) else (key,)
        if len(values) != len(columns):
            raise ParameterBindingError(
                " AND ".join(columns),
                f"composite key needs {len(columns)} values, got {len(values)}",
            )
        return FilterExpression(
            " AND ".join(f"{column} = :{name}{i}" for i, column in enumerate(columns)),
            {f"{name}{i}": value for i, value in enumerate(values)},
        )

    def _key_value(self, values: Mapping[str, Any]) -> Any:
        """Return the key held in *values*, or None if any key column is empty."""
        parts = [values.get(column) for column in self._mapper.primary_keys]
        if any(_is_empty(part) for part in parts):
            return None
        return parts[0] if len(parts) == 1 else tuple(parts)

    def _key_columns(self, key: Any) -> dict[str, Any]:
        columns = self._mapper.primary_keys
        if len(columns) == 1:
            return {columns[0]: key}
        return dict(zip(columns, key, strict=True))

    # --- reads ---

    def get(self, key: Any) -> T | None:
        """Fetch one record by primary key.

        Returns None when no row matches, and also when several rows match:
        a non-unique key lookup is reported as not found, not as an error.
        """
        result = self.get_by_filter(self._key_filter(key))
        if len(result) == 1:
            return result[0]  # type: ignore[no-any-return]
        if result:
            logger.warning(
                "get(%r) on '%s' matched %d rows; returning None",
                key,
                self._mapper.table,
                len(result),
            )
        return None

    def get_by_filter(
        self,
        condition: str | FilterExpression,
        params: Mapping[str, Any] | None = None,
        for_update: bool = False,
    ) -> list[Any]:
        """Fetch every record of this repository's table matching *condition*."""
        query = Query().table(self._mapper.table).where(condition, params)
        if for_update:
            query.for_update()
        return self.get_by_query(query)

    def get_by_query(
        self, query: Query, mappers: Iterable[MappingTable[Any]] = ()
    ) -> list[Any]:
        """Run *query* and hydrate every row.

        With extra *mappers* each row yields a list of instances, this
        repository's type first and then one per mapper in the given order.
        """
        return list(self.iter_by_query(query, mappers))

    def iter_by_query(
        self, query: Query, mappers: Iterable[MappingTable[Any]] = ()
    ) -> Iterator[Any]:
        """Lazy, single-pass form of get_by_query.

        The driver connection stays checked out until the iterator is
        exhausted or closed. With a single-connection pool, any other call
        on the same driver made while iterating (a ``save`` per row, say)
        fails with PoolError; use get_by_query for that.
        """
        tables = [self._mapper, *mappers]
        statement = query.build(self.driver)
        for row in self.driver.get_iterator(statement["sql"], statement["params"]):
            instances = [hydrate(table, row) for table in tables]
            yield instances[0] if len(instances) == 1 else instances

    # --- deletes ---

    def delete(self, key: Any) -> bool:
        """Delete by primary key. Zero matching rows is still a success."""
        updatable = Updatable().table(self._mapper.table).where(self._key_filter(key))
        return self.delete_by_query(updatable)

    def delete_by_query(self, updatable: Updatable) -> bool:
        statement = updatable.build_delete()
        self.driver.execute(statement["sql"], statement["params"])
        return True

    # --- save ---

    def save(self, instance: T) -> T:
        """Insert or update *instance* and return it with the stored values.

        A record whose key is empty, or whose key is not found, is inserted;
        anything else is updated. The instance is only modified after the
        write succeeded.

        Only None and "" count as an empty key: a key of 0 or "0" is looked
        up first and, when not found, inserted as an explicit key value.

        Raises:
            FieldMappingInvalidError: The field map names a missing property.
            BeforeHookInvalidError: A hook returned an empty or non-mapping value.
        """
        values = self._flatten(instance)

        key = self._key_value(values)
        is_insert = key is None or self.get(key) is None
        logger.debug(
            "Saving %s into '%s' as %s",
            self._mapper.entity_name,
            self._mapper.table,
            "insert" if is_insert else "update",
        )

        updatable = Updatable().table(self._mapper.table).fields(values.keys())

        hooks = self._hooks
        if is_insert:
            values = self._run_hook("before_insert", hooks.before_insert, values)
            values.update(self._key_columns(self._insert(updatable, values)))
        else:
            values = self._run_hook("before_update", hooks.before_update, values)
            self._update(updatable, values)

        bind_object(values, instance)
        return instance

    def _flatten(self, instance: T) -> dict[str, Any]:
        """Flatten *instance* and apply every write mask."""
        values = self._mapper.prepare_field(to_dict_from(instance, include_all=True))
        for property_name, mapping in self._mapper.field_map.items():
            if property_name not in values:
                raise FieldMappingInvalidError(self._mapper.entity_name, property_name)
            masked = mapping.update_mask(values.pop(property_name), instance)
            if masked is False:
                continue
            values[mapping.field_name] = masked
        return values

    @staticmethod
    def _run_hook(name: str, hook: Hook, values: dict[str, Any]) -> dict[str, Any]:
        result = hook(dict(values))
        if not result or not isinstance(result, Mapping):
            raise BeforeHookInvalidError(name, result)
        return dict(result)

    def _insert(self, updatable: Updatable, values: dict[str, Any]) -> Any:
        """Insert and return the record's key."""
        generated = self._mapper.generate_key()
        if not _is_empty(generated):
            return self._insert_with_key(updatable, values, generated)

        supplied = self._key_value(values)
        if supplied is not None:
            return self._insert_with_key(updatable, values, supplied)
        return self._insert_with_autoinc(updatable, values)

    def _insert_with_autoinc(self, updatable: Updatable, values: dict[str, Any]) -> Any:
        columns = self._mapper.primary_keys
        if len(columns) > 1:
            raise MappingError(
                f"Cannot insert into '{self._mapper.table}' without a key: composite "
                "keys need a key generator or explicit values"
            )
        params = {name: value for name, value in values.items() if name not in columns}
        helper = self.driver.get_db_helper()
        statement = updatable.build_insert(params, helper)
        return helper.execute_and_get_inserted_id(
            self.driver, statement["sql"], statement["params"]
        )

    def _insert_with_key(self, updatable: Updatable, values: dict[str, Any], key: Any) -> Any:
        key_columns = self._key_columns(key)
        updatable.fields(key_columns)
        statement = updatable.build_insert(
            {**values, **key_columns}, self.driver.get_db_helper()
        )
        self.driver.execute(statement["sql"], statement["params"])
        return key

    def _update(self, updatable: Updatable, values: dict[str, Any]) -> None:
        key = self._key_value(values)
        if key is None:
            raise MappingError(
                f"Cannot update '{self._mapper.table}': the before_update hook cleared the key"
            )
        updatable.where(self._key_filter(key, name="_id"))
        statement = updatable.build_update(values, self.driver.get_db_helper())
        self.driver.execute(statement["sql"], statement["params"])
