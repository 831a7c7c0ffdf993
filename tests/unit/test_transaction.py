"""Unit tests for TransactionManager."""

from __future__ import annotations

import pytest

from micro_orm.core.driver import Driver
from micro_orm.core.exceptions import TransactionStateError


def _count(driver: Driver) -> int:
    (row,) = driver.get_iterator("SELECT COUNT(*) AS cnt FROM people")
    return int(row["cnt"])


class TestTransactionManager:
    def test_commit_persists_changes(self, driver: Driver) -> None:
        with driver.transaction():
            driver.execute("INSERT INTO people (name) VALUES (:name)", {"name": "Ann"})

        assert _count(driver) == 1

    def test_auto_rollback_on_exception(self, driver: Driver) -> None:
        with pytest.raises(RuntimeError, match="boom"), driver.transaction():
            driver.execute("INSERT INTO people (name) VALUES (:name)", {"name": "Ann"})
            raise RuntimeError("boom")

        assert _count(driver) == 0

    def test_explicit_rollback(self, driver: Driver) -> None:
        with driver.transaction() as tx:
            driver.execute("INSERT INTO people (name) VALUES (:name)", {"name": "Ann"})
            tx.rollback()

        assert _count(driver) == 0

    def test_reads_see_uncommitted_writes(self, driver: Driver) -> None:
        with driver.transaction():
            driver.execute("INSERT INTO people (name) VALUES (:name)", {"name": "Ann"})
            assert _count(driver) == 1

    def test_active_transaction_is_cleared_on_exit(self, driver: Driver) -> None:
        with driver.transaction() as tx:
            assert driver.active_transaction is tx
        assert driver.active_transaction is None

    def test_commit_after_rollback_raises(self, driver: Driver) -> None:
        with driver.transaction() as tx:
            tx.rollback()
            with pytest.raises(TransactionStateError):
                tx.commit()

    def test_execute_after_commit_raises(self, driver: Driver) -> None:
        with driver.transaction() as tx:
            tx.commit()
            with pytest.raises(TransactionStateError):
                driver.execute("INSERT INTO people (name) VALUES ('Ann')")

    def test_nested_transaction_raises(self, driver: Driver) -> None:
        with driver.transaction(), pytest.raises(TransactionStateError):
            with driver.transaction():
                pass
