"""Row hydration pipeline.

Turns one result row into one record instance in three explicit stages::

    raw_bind -> derive_masked_fields -> commit_bind

Read masks run after the raw bind, so a mask can compute a value from
sibling properties that are already populated on the instance.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from micro_orm.mapping.binder import bind_object
from micro_orm.mapping.protocol import MappingTable


def raw_bind(mapper: MappingTable[Any], row: Mapping[str, Any]) -> tuple[Any, dict[str, Any]]:
    """Create an instance and bind the row's directly named columns onto it.

    Returns the instance and the working data (row plus resolved aliases).
    """
    instance = mapper.entity()
    data = dict(row)
    for property_name, column_alias in mapper.field_aliases.items():
        if column_alias in data:
            data[property_name] = data[column_alias]
    bind_object(data, instance)
    return instance, data


def derive_masked_fields(
    mapper: MappingTable[Any], data: Mapping[str, Any], instance: Any
) -> dict[str, Any]:
    """Run every read mask and return property -> derived value.

    A column that is missing from the row or NULL reaches its mask as an
    empty string.
    """
    derived: dict[str, Any] = {}
    for property_name, mapping in mapper.field_map.items():
        value = data.get(mapping.field_name)
        derived[property_name] = mapping.select_mask("" if value is None else value, instance)
    return derived


def commit_bind(data: Mapping[str, Any], derived: Mapping[str, Any], instance: Any) -> Any:
    """Bind the derived values over the working data onto the instance."""
    if derived:
        bind_object({**data, **derived}, instance)
    return instance


def hydrate(mapper: MappingTable[Any], row: Mapping[str, Any]) -> Any:
    """Build one record instance of *mapper*'s type from *row*."""
    instance, data = raw_bind(mapper, row)
    derived = derive_masked_fields(mapper, data, instance)
    return commit_bind(data, derived, instance)
