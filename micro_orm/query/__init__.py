"""Statement builders - filters, SELECT queries and write statements."""

from __future__ import annotations

from micro_orm.query.filter import FilterExpression
from micro_orm.query.query import Query
from micro_orm.query.updatable import Updatable

__all__ = [
    "FilterExpression",
    "Query",
    "Updatable",
]
