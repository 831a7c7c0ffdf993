"""Unit tests for the Query builder."""

from __future__ import annotations

import pytest

from micro_orm.core.exceptions import ParameterBindingError, StatementError
from micro_orm.core.helpers import MysqlHelper
from micro_orm.query.query import Query


class TestQuery:
    def test_select_all(self) -> None:
        built = Query().table("people").build()
        assert built == {"sql": "SELECT * FROM people", "params": {}}

    def test_fields_filter_order_limit(self) -> None:
        built = (
            Query.get_instance()
            .table("people")
            .fields(["id", "name"])
            .where("name = :name", {"name": "Ann"})
            .order_by("name", "id DESC")
            .limit(10, 20)
            .build()
        )
        assert built["sql"] == (
            "SELECT id, name FROM people WHERE name = :name "
            "ORDER BY name, id DESC LIMIT 10 OFFSET 20"
        )
        assert built["params"] == {"name": "Ann"}

    def test_joins(self) -> None:
        built = (
            Query()
            .table("people", "p")
            .fields(["p.id", "a.city"])
            .join("addresses", "a.person_id = p.id", alias="a")
            .left_join("phones ph", "ph.person_id = p.id")
            .build()
        )
        assert built["sql"] == (
            "SELECT p.id, a.city FROM people p "
            "INNER JOIN addresses a ON a.person_id = p.id "
            "LEFT JOIN phones ph ON ph.person_id = p.id"
        )

    def test_multiple_where_and_combined(self) -> None:
        built = Query().table("t").where("a = :a", {"a": 1}).where("b = :b", {"b": 2}).build()
        assert built["sql"] == "SELECT * FROM t WHERE (a = :a) AND (b = :b)"
        assert built["params"] == {"a": 1, "b": 2}

    def test_for_update_without_driver_uses_ansi_clause(self) -> None:
        query = Query().table("t").where("id = :id", {"id": 1}).for_update()
        assert query.is_for_update
        assert query.build()["sql"].endswith(" FOR UPDATE")

    def test_for_update_dropped_on_sqlite(self, make_driver) -> None:
        built = Query().table("t").for_update().build(make_driver())
        assert built["sql"] == "SELECT * FROM t"

    def test_for_update_with_mysql_helper(self, make_driver) -> None:
        built = Query().table("t").for_update().build(make_driver(helper=MysqlHelper()))
        assert built["sql"] == "SELECT * FROM t FOR UPDATE"

    def test_build_is_repeatable(self) -> None:
        query = Query().table("t").where("id = :id", {"id": 1})
        assert query.build() == query.build()

    def test_missing_table_raises(self) -> None:
        with pytest.raises(StatementError):
            Query().build()

    def test_unbound_placeholder_raises(self) -> None:
        with pytest.raises(ParameterBindingError):
            Query().table("t").where("id = :id").build()
