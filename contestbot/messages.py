"""Reacting to messages that may carry a contest keyword."""

from __future__ import annotations

import sqlite3
from dataclasses import dataclass, field

from .chats import upsert_chat
from .db import transaction
from .model import Chat, Contest, Ticket, User
from .tickets import count_tickets
from .users import upsert_user


@dataclass
class MessageOutcome:
    """What a message led to."""

    created_tickets: list[Ticket] = field(default_factory=list)
    contest: Contest | None = None
    calculation_was_started: bool = False


def handle_message(
    connection: sqlite3.Connection,
    chat: Chat,
    user: User,
    text: str,
    topic_id: int,
) -> MessageOutcome:
    """Count tickets when the text holds the keyword of the chat's running contest."""
    if not text:
        return MessageOutcome()

    upsert_chat(connection, chat)
    upsert_user(connection, user)

    with transaction(connection):
        row = connection.execute(
            """
            select id, creator_id, competitive_chat_id, keyword_chat_id,
                   keyword_topic_id, keyword, multiplicity, created_at, ended_at
            from contests
            where keyword_chat_id = ?
              and keyword_topic_id = ?
              and ended_at is null
            """,
            (chat.id, topic_id),
        ).fetchone()
        if row is None:
            return MessageOutcome()
        contest = Contest(*row)

        lowered = text.lower()
        keyword = contest.keyword.lower()
        if f'"{keyword}"' in lowered or keyword not in lowered:
            return MessageOutcome()

        tickets = count_tickets(connection, chat, user, contest)
        return MessageOutcome(
            created_tickets=tickets,
            contest=contest,
            calculation_was_started=True,
        )