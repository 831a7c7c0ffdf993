"""Filter expressions.

A filter is SQL predicate text with `:name` placeholders plus the values
bound to them.
"""

from __future__ import annotations

import warnings
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any

from micro_orm.core.exceptions import ParameterBindingError, UnusedParameterWarning
from micro_orm.core.params import find_placeholders


@dataclass(frozen=True, eq=False)
class FilterExpression:
    """Predicate text plus its bound values."""

    text: str
    params: Mapping[str, Any] = field(default_factory=dict)

    def placeholders(self) -> list[str]:
        return find_placeholders(self.text)

    def missing(self) -> list[str]:
        """Placeholders without a bound value."""
        return [name for name in self.placeholders() if name not in self.params]

    def unused(self) -> list[str]:
        """Bound values no placeholder refers to."""
        placeholders = set(self.placeholders())
        return [name for name in self.params if name not in placeholders]

    def validate(self) -> FilterExpression:
        """Raise on unbound placeholders; warn about unused bindings."""
        missing = self.missing()
        if missing:
            raise ParameterBindingError(self.text, f"no value bound for {missing}")
        unused = self.unused()
        if unused:
            warnings.warn(
                f"Filter '{self.text}' ignores bound parameters {unused}",
                UnusedParameterWarning,
                stacklevel=3,
            )
        return self


def as_filter(
    text: str | FilterExpression, params: Mapping[str, Any] | None = None
) -> FilterExpression:
    """Accept either a ready FilterExpression or text plus params."""
    if isinstance(text, FilterExpression):
        if params:
            return FilterExpression(text.text, {**text.params, **params})
        return text
    return FilterExpression(text, dict(params or {}))


def combine(filters: Iterable[FilterExpression]) -> tuple[str, dict[str, Any]]:
    """AND-combine *filters* into one predicate and one parameter dict.

    Raises:
        ParameterBindingError: A placeholder is unbound, or two filters bind
            the same name to different values.
    """
    clauses: list[str] = []
    params: dict[str, Any] = {}
    for expression in filters:
        expression.validate()
        for name, value in expression.params.items():
            if name in params and params[name] != value:
                raise ParameterBindingError(
                    expression.text, f"'{name}' is already bound to {params[name]!r}"
                )
            params[name] = value
        clauses.append(expression.text.strip())

    if len(clauses) > 1:
        clauses = [f"({clause})" for clause in clauses]
    return " AND ".join(clauses), params
