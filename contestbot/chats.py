"""Storing and looking up chats."""

from __future__ import annotations

import sqlite3

from . import l10n
from .errors import NotFoundError, UserError
from .model import Chat


def upsert_chat(connection: sqlite3.Connection, chat: Chat) -> None:
    """Insert the chat or refresh its title and username."""
    connection.execute(
        """
        insert into chats (id, title, username)
        values (:id, :title, :username)
        on conflict (id) do update set
            title = excluded.title,
            username = excluded.username
        """,
        {"id": chat.id, "title": chat.title, "username": chat.username},
    )


def take_chat(connection: sqlite3.Connection, username: str) -> Chat:
    """Find a chat by its username as last stored.

    Usernames change, so the chat must have been synced beforehand.
    """
    row = connection.execute(
        "select id, title, username, created_at from chats where username = ?",
        (username,),
    ).fetchone()
    if row is None:
        raise UserError(l10n.CHAT_TAKE_NOT_FOUND) from NotFoundError(
            f"no chat with username {username!r}"
        )
    chat_id, title, chat_username, created_at = row
    return Chat(id=chat_id, title=title, username=chat_username, created_at=created_at)