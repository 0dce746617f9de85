"""Database connection, schema and transactions."""

from __future__ import annotations

import logging
import sqlite3
from contextlib import contextmanager
from typing import Iterator

log = logging.getLogger(__name__)

_ID = "integer primary key"
_INT = "integer not null"
_INT0 = "integer not null default 0"
_BOOL0 = "boolean not null default 0"
_TEXT = "text not null"
_TEXT0 = "text not null default ''"
_NOW = "timestamp not null default current_timestamp"

_TABLES: dict[str, tuple[tuple[str, str], ...]] = {
    "chats": (("id", _ID), ("title", _TEXT0), ("username", _TEXT0), ("created_at", _NOW)),
    "users": (
        ("id", _ID),
        ("is_bot", _BOOL0),
        ("first_name", _TEXT0),
        ("username", _TEXT0),
        ("created_at", _NOW),
        ("updated_at", _NOW),
    ),
    "members": (
        ("id", _ID + " autoincrement"),
        ("user_id", _INT),
        ("chat_id", _INT),
        ("status", _INT),
        ("inviter_id", _INT0),
        ("ignore_in_ticket_counting", _BOOL0),
        ("in_ticket_id", _INT0),
        ("created_at", _NOW),
        ("updated_at", _NOW),
    ),
    "contests": (
        ("id", "text primary key"),
        ("creator_id", _INT),
        ("competitive_chat_id", _INT),
        ("keyword_chat_id", _INT),
        ("keyword_topic_id", _INT0),
        ("keyword", _TEXT),
        ("multiplicity", _INT),
        ("created_at", _NOW),
        ("ended_at", "timestamp"),
    ),
    "tickets": (("number", _INT), ("user_id", _INT), ("contest_id", _TEXT)),
}

_TABLE_CONSTRAINTS: dict[str, tuple[str, ...]] = {
    "tickets": ("primary key (contest_id, number)",),
}


def _create_statement(table: str) -> str:
    parts = [f"{name} {definition}" for name, definition in _TABLES[table]]
    parts.extend(_TABLE_CONSTRAINTS.get(table, ()))
    return f"create table if not exists {table} ({', '.join(parts)})"


def connect(dsn: str) -> sqlite3.Connection:
    """Open an SQLite database; statements outside a transaction autocommit."""
    connection = sqlite3.connect(
        dsn,
        uri=dsn.startswith("file:"),
        isolation_level=None,
        check_same_thread=False,
    )
    connection.row_factory = sqlite3.Row
    return connection


def ensure_schema(connection: sqlite3.Connection) -> None:
    """Create the tables the bot needs, if they are missing."""
    for table in _TABLES:
        connection.execute(_create_statement(table))


@contextmanager
def transaction(connection: sqlite3.Connection) -> Iterator[sqlite3.Connection]:
    """Run the block in a transaction: commit on success, roll back on error."""
    connection.execute("BEGIN")
    try:
        yield connection
    except BaseException:
        try:
            connection.execute("ROLLBACK")
        except sqlite3.Error as exc:
            log.error("tx.Rollback: %s", exc)
        raise
    connection.execute("COMMIT")