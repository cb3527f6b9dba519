"""Database wrapper.

Database holds one driver connection and the adapter that opened it, and
exposes statement and transaction scopes on top. Statements run outside a
transaction are committed when their scope exits cleanly.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from typing import Any, TypeVar

from row_bind.core.connection import ConnectionConfig, load_adapter
from row_bind.core.enums import BindMode
from row_bind.core.exceptions import TransactionStateError
from row_bind.core.statement import Row, Statement, prepared
from row_bind.core.transaction import Transaction

T = TypeVar("T")

_default_logger = logging.getLogger("row_bind")


class Database:
    """A database connection with statement and transaction helpers."""

    def __init__(
        self,
        connection: Any,
        adapter: Any,
        *,
        bind_mode: BindMode = BindMode.BY_NAME,
        logger: logging.Logger | None = None,
        log_queries: bool = True,
    ) -> None:
        self._connection = connection
        self._adapter = adapter
        self._bind_mode = bind_mode
        self._logger = logger or _default_logger
        self._log_queries = log_queries
        self._transaction: Transaction | None = None

    @classmethod
    def open(
        cls,
        config: ConnectionConfig,
        logger: logging.Logger | None = None,
    ) -> Database:
        """Open a connection described by *config*.

        Args:
            config: ConnectionConfig instance
            logger: Logger receiving query timings. Defaults to ``row_bind``.

        Returns:
            Database instance
        """
        adapter = load_adapter(config.driver)
        connection = adapter.connect(config)
        return cls(
            connection,
            adapter,
            bind_mode=config.bind_mode,
            logger=logger,
            log_queries=config.log_queries,
        )

    @property
    def connection(self) -> Any:
        return self._connection

    @property
    def adapter(self) -> Any:
        return self._adapter

    @property
    def bind_mode(self) -> BindMode:
        return self._bind_mode

    @property
    def logger(self) -> logging.Logger:
        return self._logger

    @property
    def log_queries(self) -> bool:
        return self._log_queries

    def close(self) -> None:
        """Close the underlying connection."""
        self._adapter.close(self._connection)

    def __enter__(self) -> Database:
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close()

    @contextmanager
    def statement(self, query: str) -> Iterator[Statement]:
        """Yield a Statement for *query*.

        Outside a transaction the connection is committed on clean exit and
        rolled back when the block raises.
        """
        autocommit = self._transaction is None
        try:
            with prepared(
                self._connection,
                self._adapter,
                query,
                bind_mode=self._bind_mode,
                logger=self._logger,
                log_queries=self._log_queries,
            ) as stmt:
                yield stmt
        except Exception:
            if autocommit:
                self._connection.rollback()
            raise
        if autocommit:
            self._connection.commit()

    def with_stmt(self, query: str, fn: Callable[[Statement], T]) -> T:
        """Run *fn* with a Statement for *query*, returning its result."""
        with self.statement(query) as stmt:
            return fn(stmt)

    def query_row(self, query: str, *args: Any) -> Row:
        """Run a single-row query. Errors surface from Row.scan.

        The returned Row holds an open cursor until it is scanned or closed.
        The query is logged at that point.
        """
        stmt = Statement(self._connection, self._adapter, query, bind_mode=self._bind_mode)
        return stmt.query_row(*args, logger=self._logger if self._log_queries else None)

    def transaction(self) -> Transaction:
        """Create a new transaction context manager."""
        return Transaction(self)

    def with_tx(self, fn: Callable[[Transaction], T]) -> T:
        """Run *fn* in a transaction.

        Rolls back and re-raises if *fn* raises, otherwise commits.
        """
        with self.transaction() as tx:
            return fn(tx)

    def _begin_transaction(self, tx: Transaction) -> None:
        if self._transaction is not None:
            raise TransactionStateError("active", "begin")
        self._transaction = tx

    def _end_transaction(self, tx: Transaction) -> None:
        if self._transaction is tx:
            self._transaction = None
