"""Storing users."""

from __future__ import annotations

import sqlite3

from .model import User

_COLUMNS = ("id", "is_bot", "first_name", "username")

_UPSERT = "INSERT INTO users ({cols}) VALUES ({params}) ON CONFLICT (id) DO UPDATE SET {updates}".format(
    cols=", ".join(_COLUMNS),
    params=", ".join(f":{column}" for column in _COLUMNS),
    updates=", ".join(
        [f"{column} = excluded.{column}" for column in _COLUMNS[1:]]
        + ["updated_at = CURRENT_TIMESTAMP"]
    ),
)


def upsert_user(connection: sqlite3.Connection, user: User) -> None:
    """Insert the user or refresh their details."""
    values = {column: getattr(user, column) for column in _COLUMNS}
    values["is_bot"] = int(user.is_bot)
    connection.execute(_UPSERT, values)