"""Mapping descriptors.

Frozen dataclasses describing how one record type maps onto one table.
Used by the Repository at execution time.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Generic, TypeVar

T = TypeVar("T")

# (value, instance) -> value. A write mask may return False to omit the field.
Mask = Callable[[Any, Any], Any]


def default_mask(value: Any, instance: Any) -> Any:
    """Pass the value through unchanged."""
    return value


def do_not_update(value: Any, instance: Any) -> Any:
    """Write mask that keeps a field out of inserts and updates."""
    return False


@dataclass(frozen=True)
class FieldMapping:
    """How one entity property maps onto a column."""

    property_name: str
    field_name: str
    update_mask: Mask = default_mask
    select_mask: Mask = default_mask


def _is_pydantic_model(cls: Any) -> bool:
    """Check if a factory is a Pydantic BaseModel class."""
    try:
        from pydantic import BaseModel

        return isinstance(cls, type) and issubclass(cls, BaseModel)
    except ImportError:
        return False


@dataclass(frozen=True, eq=False)
class Mapper(Generic[T]):
    """Immutable description of one record type's table.

    Attributes:
        entity_factory: Class or zero-argument callable creating a blank record.
        table: Table name used in every generated statement.
        primary_key: Column name, or a tuple of column names for a composite key.
        key_generator: Optional callable producing a new key for inserts.
            When absent (or when it returns None) the database generates it.
        field_map: Property name -> FieldMapping.
        field_aliases: Property name -> result column alias.
        preserve_case: When False, prepare_field lower-cases every key.
    """

    entity_factory: Callable[[], T]
    table: str
    primary_key: str | tuple[str, ...]
    key_generator: Callable[[], Any] | None = None
    field_map: Mapping[str, FieldMapping] = field(default_factory=dict)
    field_aliases: Mapping[str, str] = field(default_factory=dict)
    preserve_case: bool = True

    def __post_init__(self) -> None:
        object.__setattr__(self, "field_map", MappingProxyType(dict(self.field_map)))
        object.__setattr__(self, "field_aliases", MappingProxyType(dict(self.field_aliases)))

    @property
    def primary_keys(self) -> tuple[str, ...]:
        if isinstance(self.primary_key, str):
            return (self.primary_key,)
        return tuple(self.primary_key)

    @property
    def entity_name(self) -> str:
        return getattr(self.entity_factory, "__name__", type(self.entity_factory).__name__)

    def entity(self) -> T:
        """Create a fresh, unbound record instance."""
        if _is_pydantic_model(self.entity_factory):
            return self.entity_factory.model_construct()  # type: ignore[attr-defined, no-any-return]
        return self.entity_factory()

    def generate_key(self) -> Any:
        if self.key_generator is None:
            return None
        return self.key_generator()

    def prepare_field(self, data: Mapping[str, Any]) -> dict[str, Any]:
        """Table-specific coercion of a flattened record before masks run."""
        if self.preserve_case:
            return dict(data)
        return {key.lower(): value for key, value in data.items()}
