"""MappingTable protocol.

The Repository only relies on this surface; Mapper is the shipped
implementation.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Protocol, TypeVar, runtime_checkable

from micro_orm.mapping.plan import FieldMapping

T = TypeVar("T")


@runtime_checkable
class MappingTable(Protocol[T]):
    """Per-record-type table descriptor."""

    @property
    def table(self) -> str: ...

    @property
    def primary_keys(self) -> tuple[str, ...]: ...

    @property
    def field_map(self) -> Mapping[str, FieldMapping]: ...

    @property
    def field_aliases(self) -> Mapping[str, str]: ...

    @property
    def entity_name(self) -> str: ...

    def entity(self) -> T:
        """Create a fresh record instance."""
        ...

    def generate_key(self) -> Any:
        """Return a new primary key, or None to let the database generate one."""
        ...

    def prepare_field(self, data: Mapping[str, Any]) -> dict[str, Any]:
        """Coerce a flattened record before write masks run."""
        ...
