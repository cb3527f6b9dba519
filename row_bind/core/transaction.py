"""Transaction management.

A Transaction runs statements on its database's connection and commits on
success or rolls back on exception when used as a context manager.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator
from contextlib import contextmanager
from enum import Enum
from typing import TYPE_CHECKING, Any, TypeVar

from row_bind.core.exceptions import TransactionStateError
from row_bind.core.statement import Statement, prepared

if TYPE_CHECKING:
    from row_bind.core.database import Database

T = TypeVar("T")


class _TxState(Enum):
    IDLE = "idle"
    ACTIVE = "active"
    COMMITTED = "committed"
    ROLLED_BACK = "rolled_back"


class Transaction:
    """Synchronous transaction context manager."""

    def __init__(self, database: Database) -> None:
        self._database = database
        self._connection = database.connection
        self._state = _TxState.IDLE

    @property
    def state(self) -> str:
        return self._state.value

    def __enter__(self) -> Transaction:
        self.begin()
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
                    self._connection.rollback()
                    self._state = _TxState.ROLLED_BACK
                    self._database.logger.debug("tx: rolled back after %r", exc_val)
                else:
                    self._connection.commit()
                    self._state = _TxState.COMMITTED
        finally:
            self._database._end_transaction(self)

    def begin(self) -> None:
        """Mark the transaction active.

        DB-API drivers open the underlying transaction implicitly with the
        first statement.
        """
        if self._state != _TxState.IDLE:
            raise TransactionStateError(self._state.value, "begin")
        self._database._begin_transaction(self)
        self._state = _TxState.ACTIVE

    @contextmanager
    def statement(self, query: str) -> Iterator[Statement]:
        """Yield a Statement running inside this transaction."""
        self._check_active()
        with prepared(
            self._connection,
            self._database.adapter,
            query,
            bind_mode=self._database.bind_mode,
            logger=self._database.logger,
            log_queries=self._database.log_queries,
            prefix="tx: ",
        ) as stmt:
            yield stmt

    def with_stmt(self, query: str, fn: Callable[[Statement], T]) -> T:
        """Run *fn* with a Statement for *query* inside this transaction."""
        with self.statement(query) as stmt:
            return fn(stmt)

    def commit(self) -> None:
        """Explicitly commit the transaction."""
        if self._state == _TxState.ROLLED_BACK:
            raise TransactionStateError("rolled_back", "commit")
        if self._state == _TxState.COMMITTED:
            raise TransactionStateError("committed", "commit")
        self._connection.commit()
        self._state = _TxState.COMMITTED
        self._database._end_transaction(self)

    def rollback(self) -> None:
        """Explicitly rollback the transaction."""
        if self._state == _TxState.COMMITTED:
            raise TransactionStateError("committed", "rollback")
        self._connection.rollback()
        self._state = _TxState.ROLLED_BACK
        self._database._end_transaction(self)

    def _check_active(self) -> None:
        if self._state != _TxState.ACTIVE:
            raise TransactionStateError(self._state.value, "execute")
