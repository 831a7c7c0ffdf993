"""Mapper DSL builder.

Provides a fluent builder for defining Mapper descriptors.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from micro_orm.core.exceptions import MapperCompilationError
from micro_orm.mapping.plan import FieldMapping, Mapper, Mask, default_mask


def mapper(
    entity: Callable[[], Any], table: str, primary_key: str | tuple[str, ...] = "id"
) -> MapperBuilder:
    """Entry point for the mapping DSL.

    Args:
        entity: Record class (or zero-argument factory).
        table: Table name.
        primary_key: Primary key column, or a tuple for a composite key.

    Returns:
        A builder for chaining mapping declarations.
    """
    return MapperBuilder(entity, table, primary_key)


class MapperBuilder:
    """Fluent builder for Mapper definitions."""

    def __init__(
        self,
        entity: Callable[[], Any],
        table: str,
        primary_key: str | tuple[str, ...],
    ) -> None:
        self._entity = entity
        self._table = table
        self._primary_key = primary_key
        self._key_generator: Callable[[], Any] | None = None
        self._fields: dict[str, FieldMapping] = {}
        self._aliases: dict[str, str] = {}
        self._preserve_case = True

    def field(
        self,
        property_name: str,
        field_name: str | None = None,
        *,
        update_mask: Mask | None = None,
        select_mask: Mask | None = None,
    ) -> MapperBuilder:
        """Map a property onto a column, optionally with read/write masks."""
        self._fields[property_name] = FieldMapping(
            property_name=property_name,
            field_name=field_name or property_name,
            update_mask=update_mask or default_mask,
            select_mask=select_mask or default_mask,
        )
        return self

    def alias(self, property_name: str, column_alias: str) -> MapperBuilder:
        """Read *property_name* from a result column called *column_alias*."""
        self._aliases[property_name] = column_alias
        return self

    def key_generator(self, generator: Callable[[], Any]) -> MapperBuilder:
        """Generate primary keys client-side instead of relying on the database."""
        self._key_generator = generator
        return self

    def preserve_case(self, enabled: bool = True) -> MapperBuilder:
        self._preserve_case = enabled
        return self

    def build(self) -> Mapper[Any]:
        """Validate and freeze the definition into a Mapper."""
        if not self._table:
            raise MapperCompilationError("Mapper requires a table name")

        keys = (self._primary_key,) if isinstance(self._primary_key, str) else self._primary_key
        if not keys or not all(keys):
            raise MapperCompilationError(f"Mapper for '{self._table}' requires a primary key")

        seen: dict[str, str] = {}
        for prop, mapping in self._fields.items():
            if mapping.field_name in seen:
                raise MapperCompilationError(
                    f"Column '{mapping.field_name}' is mapped by both "
                    f"'{seen[mapping.field_name]}' and '{prop}'"
                )
            seen[mapping.field_name] = prop

        return Mapper(
            entity_factory=self._entity,
            table=self._table,
            primary_key=self._primary_key,
            key_generator=self._key_generator,
            field_map=self._fields,
            field_aliases=self._aliases,
            preserve_case=self._preserve_case,
        )
