"""Record binder.

Flattens record instances into dicts and binds dicts back onto instances.
Supports dataclasses, Pydantic models, and plain classes.
"""

from __future__ import annotations

import dataclasses
from collections.abc import Mapping
from typing import Any

from micro_orm.mapping.plan import _is_pydantic_model


def field_names(instance: Any) -> list[str]:
    """Return the bindable property names of *instance*.

    Detection order:
    1. Pydantic BaseModel -> declared model fields
    2. dataclass -> dataclass fields
    3. Plain object -> public class-level attributes (across the MRO)
       followed by public instance attributes
    """
    cls = type(instance)
    if _is_pydantic_model(cls):
        return list(cls.model_fields.keys())
    if dataclasses.is_dataclass(instance):
        return [f.name for f in dataclasses.fields(instance)]
    names = dict.fromkeys(_class_attributes(cls))
    names.update(dict.fromkeys(vars(instance)))
    return [name for name in names if not name.startswith("_")]


def _class_attributes(cls: type) -> list[str]:
    """Return data attributes declared on *cls* or its bases, base classes first."""
    names: list[str] = []
    for klass in reversed(cls.__mro__[:-1]):
        for name, value in vars(klass).items():
            if callable(value) or hasattr(value, "__get__"):
                continue
            names.append(name)
    return names


def to_dict_from(instance: Any, include_all: bool = False) -> dict[str, Any]:
    """Flatten *instance* into a property -> value dict.

    With ``include_all`` every bindable property is returned, including
    unset ones; otherwise properties holding None are skipped.
    """
    result: dict[str, Any] = {}
    for name in field_names(instance):
        value = getattr(instance, name, None)
        if value is None and not include_all:
            continue
        result[name] = value
    return result


def bind_object(data: Mapping[str, Any], instance: Any) -> None:
    """Copy values from *data* onto matching properties of *instance*.

    Keys that do not name a property of the instance are ignored.
    """
    for name in field_names(instance):
        if name in data:
            setattr(instance, name, data[name])
