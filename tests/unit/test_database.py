"""Unit tests for Database."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from unittest.mock import MagicMock

import pytest

from row_bind.core.connection import ConnectionConfig
from row_bind.core.database import Database
from row_bind.core.enums import BindMode
from row_bind.core.exceptions import AdapterError, ExecutionError, NoRowsError
from row_bind.core.statement import Row
from row_bind.mapping.fields import column
from row_bind.mapping.targets import Cell


@dataclass
class User:
    userid: int = column("userid", default=0)
    name: str = column("name", default="")


class TestDatabaseOpen:
    def test_open_uses_config(self) -> None:
        config = ConnectionConfig(
            driver="sqlite", database=":memory:", bind_mode="by_position", log_queries=False
        )
        with Database.open(config) as database:
            assert database.bind_mode is BindMode.BY_POSITION
            assert database.log_queries is False

    def test_unsupported_driver(self) -> None:
        config = ConnectionConfig(driver="db2", database="x")
        with pytest.raises(AdapterError, match="Unsupported database driver"):
            Database.open(config)

    def test_injected_logger(self, caplog) -> None:
        logger = logging.getLogger("tests.queries")
        config = ConnectionConfig(driver="sqlite", database=":memory:")
        with caplog.at_level("DEBUG", logger="tests.queries"):
            with Database.open(config, logger=logger) as database:
                database.with_stmt("SELECT 1", lambda s: None)
        assert [r.name for r in caplog.records] == ["tests.queries"]
        assert caplog.records[0].getMessage().startswith("SELECT 1 ")

    def test_close_delegates_to_adapter(self) -> None:
        adapter = MagicMock()
        connection = MagicMock()
        Database(connection, adapter).close()
        adapter.close.assert_called_once_with(connection)


class TestStatements:
    def test_with_stmt_returns_result(self, db: Database) -> None:
        result = db.with_stmt(
            "UPDATE users SET name = ? WHERE userid = ?", lambda s: s.execute("ann", 1)
        )
        assert result == 1

    def test_statement_commits_on_success(self, db: Database) -> None:
        with db.statement("DELETE FROM users WHERE userid = ?") as stmt:
            stmt.execute(2)
        assert not db.connection.in_transaction

    def test_statement_rolls_back_on_error(self, db: Database) -> None:
        with pytest.raises(RuntimeError), db.statement("DELETE FROM users") as stmt:
            stmt.execute()
            raise RuntimeError("abort")

        cell = Cell()
        db.query_row("SELECT COUNT(*) FROM users").scan(cell)
        assert cell.value == 2

    def test_statement_closed_after_scope(self, db: Database) -> None:
        with db.statement("SELECT name FROM users") as stmt:
            pass
        with pytest.raises(ExecutionError, match="closed"):
            stmt.execute()

    def test_statement_error_logged(self, db: Database, caplog) -> None:
        with caplog.at_level("DEBUG", logger="row_bind"):
            with pytest.raises(ValueError), db.statement("SELECT 1"):
                raise ValueError("bad")
        assert caplog.records[-1].getMessage().endswith("bad")

    def test_log_queries_disabled(self, caplog) -> None:
        config = ConnectionConfig(driver="sqlite", database=":memory:", log_queries=False)
        with caplog.at_level("DEBUG", logger="row_bind"):
            with Database.open(config) as database:
                database.with_stmt("SELECT 1", lambda s: None)
        assert caplog.records == []


class TestQueryRow:
    def test_scan_record(self, db: Database) -> None:
        user = User()
        db.query_row("SELECT userid, name FROM users WHERE userid = ?", 2).scan(user)
        assert user == User(userid=2, name="bob")

    def test_no_rows(self, db: Database) -> None:
        with pytest.raises(NoRowsError):
            db.query_row("SELECT userid, name FROM users WHERE userid = ?", 99).scan(User())

    def test_deferred_execute_error(self, db: Database) -> None:
        row = db.query_row("SELECT * FROM missing_table")
        assert row.error is not None
        with pytest.raises(type(row.error)):
            row.scan(Cell())

    def test_row_scanned_once(self, db: Database) -> None:
        row = db.query_row("SELECT name FROM users WHERE userid = 1")
        row.scan(Cell())
        with pytest.raises(ExecutionError, match="already been scanned"):
            row.scan(Cell())

    def test_logged_when_scanned(self, db: Database, caplog) -> None:
        query = "SELECT name FROM users WHERE userid = 1"
        with caplog.at_level("DEBUG", logger="row_bind"):
            row = db.query_row(query)
            assert caplog.records == []
            row.scan(Cell())
        assert len(caplog.records) == 1
        assert caplog.records[0].getMessage().startswith(query)

    def test_deferred_error_logged_when_scanned(self, db: Database, caplog) -> None:
        with caplog.at_level("DEBUG", logger="row_bind"):
            row = db.query_row("SELECT * FROM missing_table")
            with pytest.raises(Exception, match="missing_table"):
                row.scan(Cell())
        assert caplog.records[-1].getMessage().endswith(str(row.error))

    def test_close_without_scanning(self, db: Database, caplog) -> None:
        with caplog.at_level("DEBUG", logger="row_bind"):
            row = db.query_row("SELECT name FROM users")
            row.close()
            row.close()
        assert row.finished
        assert len(caplog.records) == 1
        with pytest.raises(ExecutionError, match="closed"):
            row.scan(Cell())

    def test_close_releases_cursor(self) -> None:
        cursor = MagicMock()
        Row(cursor, query="SELECT 1").close()
        cursor.close.assert_called_once()
        cursor.next.assert_not_called()
