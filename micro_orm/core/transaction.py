"""Transaction management.

Lets a caller run several Driver statements (for example a whole
``Repository.save``) atomically. Auto-commits on success, auto-rolls-back
on exception.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import TYPE_CHECKING, Any

from micro_orm.core.exceptions import TransactionStateError

if TYPE_CHECKING:
    from micro_orm.core.driver import Driver

logger = logging.getLogger(__name__)


class _TxState(Enum):
    IDLE = "idle"
    ACTIVE = "active"
    COMMITTED = "committed"
    ROLLED_BACK = "rolled_back"


class TransactionManager:
    """Transaction context manager bound to one pooled connection.

    Nested transactions on the same thread are not supported.
    """

    def __init__(self, driver: Driver) -> None:
        self._driver = driver
        self._connection: Any = None
        self._state = _TxState.IDLE

    @property
    def connection(self) -> Any:
        self._check_active()
        return self._connection

    def __enter__(self) -> TransactionManager:
        if self._state != _TxState.IDLE:
            raise TransactionStateError(self._state.value, "begin")
        if self._driver.active_transaction is not None:
            raise TransactionStateError("active", "nest")
        self._connection = self._driver.connection_manager.acquire()
        self._driver._bind_transaction(self)
        self._state = _TxState.ACTIVE
        logger.debug("Transaction started")
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: Any,
    ) -> None:
        try:
            if self._state == _TxState.ACTIVE:
                if exc_type is not None:
                    self.rollback()
                else:
                    self.commit()
        finally:
            self._driver._bind_transaction(None)
            self._driver.connection_manager.release(self._connection)

    def commit(self) -> None:
        """Explicitly commit the transaction."""
        if self._state == _TxState.ROLLED_BACK:
            raise TransactionStateError("rolled_back", "commit")
        if self._state == _TxState.COMMITTED:
            raise TransactionStateError("committed", "commit")
        self._connection.commit()
        self._state = _TxState.COMMITTED
        logger.debug("Transaction committed")

    def rollback(self) -> None:
        """Explicitly rollback the transaction."""
        if self._state == _TxState.COMMITTED:
            raise TransactionStateError("committed", "rollback")
        self._connection.rollback()
        self._state = _TxState.ROLLED_BACK
        logger.debug("Transaction rolled back")

    def _check_active(self) -> None:
        if self._state == _TxState.IDLE:
            raise TransactionStateError("idle", "execute")
        if self._state == _TxState.COMMITTED:
            raise TransactionStateError("committed", "execute")
        if self._state == _TxState.ROLLED_BACK:
            raise TransactionStateError("rolled_back", "execute")
