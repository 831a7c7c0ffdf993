"""Mapping layer - table descriptors, record binding and row hydration."""

from __future__ import annotations

from micro_orm.mapping.binder import bind_object, field_names, to_dict_from
from micro_orm.mapping.builder import MapperBuilder, mapper
from micro_orm.mapping.hydrator import commit_bind, derive_masked_fields, hydrate, raw_bind
from micro_orm.mapping.plan import FieldMapping, Mapper, default_mask, do_not_update
from micro_orm.mapping.protocol import MappingTable

__all__ = [
    "Mapper",
    "FieldMapping",
    "MappingTable",
    "MapperBuilder",
    "mapper",
    "default_mask",
    "do_not_update",
    "to_dict_from",
    "bind_object",
    "field_names",
    "raw_bind",
    "derive_masked_fields",
    "commit_bind",
    "hydrate",
]
