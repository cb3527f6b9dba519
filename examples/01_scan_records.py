"""
Example 01: Scanning Rows Into Records

This example shows positional scans, record scans with nested fields, and
single-row lookups against a SQLite database.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from row_bind import Cell, ConnectionConfig, Database, NoRowsError, column, ref


@dataclass
class Author:
    name: str = column("user_name", default="")


@dataclass
class Comment:
    body: str = column("body", default="")
    date: Optional[datetime] = column("date", default=None)
    user: Author = field(default_factory=Author)


QUERY = (
    "SELECT body, date, u.name AS user_name FROM comments c "
    "INNER JOIN users u ON c.userid = u.userid ORDER BY c.id"
)


def main():
    logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")

    config = ConnectionConfig(driver="sqlite", database=":memory:")
    with Database.open(config) as db:
        # Set up schema and data inside a transaction
        def setup(tx):
            tx.with_stmt(
                "CREATE TABLE users (userid INTEGER PRIMARY KEY, name TEXT)",
                lambda s: s.execute(),
            )
            tx.with_stmt(
                "CREATE TABLE comments (id INTEGER PRIMARY KEY, userid INTEGER, "
                "body TEXT, date TEXT)",
                lambda s: s.execute(),
            )
            tx.with_stmt(
                "INSERT INTO users (userid, name) VALUES (1, 'alice')",
                lambda s: s.execute(),
            )
            tx.with_stmt(
                "INSERT INTO comments (userid, body, date) VALUES (?, ?, ?)",
                lambda s: s.execute(1, "first!", "2024-03-01T12:30:00"),
            )

        db.with_tx(setup)

        print("=== Scanning ===\n")

        # 1. Positional targets
        print("1. Positional targets:")
        comments = []

        def each(rows):
            comment = Comment()
            rows.scan(ref(comment, "body"), ref(comment, "date"), ref(comment.user, "name"))
            comments.append(comment)

        db.with_stmt(QUERY, lambda stmt: stmt.query(each))
        print(f"   {comments}\n")

        # 2. Records, bound by column name
        print("2. Records:")
        with db.statement(QUERY) as stmt:
            for comment in stmt.query_all(Comment):
                print(f"   {comment.user.name}: {comment.body} ({comment.date})")
        print()

        # 3. Single row
        print("3. Single row:")
        count = Cell.of(int)
        db.query_row("SELECT COUNT(*) FROM comments").scan(count)
        print(f"   {count.value} comment(s)")
        try:
            db.query_row("SELECT name FROM users WHERE userid = ?", 99).scan(Cell())
        except NoRowsError as e:
            print(f"   lookup failed: {e}")


if __name__ == "__main__":
    main()
