"""Shared test fixtures."""

from __future__ import annotations

from collections.abc import Iterator
from typing import Any

import pytest

from micro_orm.core.connection import ConnectionConfig
from micro_orm.core.driver import Driver
from micro_orm.core.helpers import DbHelper, SqliteHelper


class RecordingDriver:
    """Driver double that records statements and replays canned result sets.

    Each get_iterator call consumes the next entry of ``result_sets``.
    """

    def __init__(
        self,
        result_sets: list[list[dict[str, Any]]] | None = None,
        inserted_id: Any = None,
        helper: DbHelper | None = None,
    ) -> None:
        self.result_sets = list(result_sets or [])
        self.inserted_id = inserted_id
        self.helper = helper or SqliteHelper()
        self.executed: list[tuple[str, dict[str, Any]]] = []
        self.queries: list[tuple[str, dict[str, Any]]] = []

    def get_db_helper(self) -> DbHelper:
        return self.helper

    def execute(self, sql: str, params: dict[str, Any] | None = None) -> int:
        self.executed.append((sql, dict(params or {})))
        return 1

    def execute_insert(self, sql: str, params: dict[str, Any] | None = None) -> Any:
        self.executed.append((sql, dict(params or {})))
        return self.inserted_id

    def get_iterator(
        self, sql: str, params: dict[str, Any] | None = None
    ) -> Iterator[dict[str, Any]]:
        self.queries.append((sql, dict(params or {})))
        rows = self.result_sets.pop(0) if self.result_sets else []
        yield from rows


@pytest.fixture
def sqlite_config() -> ConnectionConfig:
    """SQLite in-memory connection config."""
    return ConnectionConfig(driver="sqlite", database=":memory:", pool_size=1)


@pytest.fixture
def driver(sqlite_config: ConnectionConfig) -> Iterator[Driver]:
    """Real Driver over a single in-memory SQLite connection."""
    drv = Driver.from_config(sqlite_config)
    drv.execute(
        "CREATE TABLE people (id INTEGER PRIMARY KEY AUTOINCREMENT, name TEXT, email TEXT)"
    )
    yield drv
    drv.close()


@pytest.fixture
def make_driver() -> type[RecordingDriver]:
    """Factory for RecordingDriver doubles."""
    return RecordingDriver
