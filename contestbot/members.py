"""Recording chat members joining and leaving."""

from __future__ import annotations

import sqlite3

from .chats import upsert_chat
from .contests import ContestNotFoundError, stop_contest
from .model import Chat, MemberStatus, User
from .users import upsert_user


def update_member_status(
    connection: sqlite3.Connection,
    chat: Chat,
    status: MemberStatus,
    participant: User,
    initiator: User,
    via_link: bool,
) -> None:
    """Store a join or leave of a participant in a chat."""
    status = MemberStatus(status)
    upsert_chat(connection, chat)
    upsert_user(connection, participant)
    upsert_user(connection, initiator)

    cursor = connection.execute(
        "update members set status = ? where chat_id = ? and user_id = ?",
        (int(status), chat.id, participant.id),
    )
    if cursor.rowcount == 0:
        _save_member(connection, chat, status, participant, initiator, via_link)


def _save_member(
    connection: sqlite3.Connection,
    chat: Chat,
    status: MemberStatus,
    participant: User,
    initiator: User,
    via_link: bool,
) -> None:
    ignore = (
        status == MemberStatus.LEAVE
        or via_link
        or initiator.is_bot
        or participant.is_bot
        or initiator.id == participant.id
    )
    inviter_id = initiator.id if status == MemberStatus.JOIN else 0
    connection.execute(
        """
        insert into members (chat_id, user_id, status, inviter_id, ignore_in_ticket_counting)
        values (:chat_id, :user_id, :status, :inviter_id, :ignore)
        """,
        {
            "chat_id": chat.id,
            "user_id": participant.id,
            "status": int(status),
            "inviter_id": inviter_id,
            "ignore": int(ignore),
        },
    )


def update_bot_status(
    connection: sqlite3.Connection, chat: Chat, status: MemberStatus
) -> None:
    """Record the bot's own membership; when it leaves, stop the chat's contest."""
    upsert_chat(connection, chat)
    if MemberStatus(status) == MemberStatus.LEAVE:
        try:
            stop_contest(connection, chat.id)
        except ContestNotFoundError:
            pass