"""Handing out tickets for invited members."""

from __future__ import annotations

import sqlite3
from datetime import datetime

from .common import chunked
from .errors import NotFoundError
from .model import Chat, Contest, Member, MemberStatus, Ticket, User, member_ids

_EARLIEST = "0001-01-01 00:00:00"


def _timestamp(value: datetime | None) -> str:
    return _EARLIEST if value is None else value.isoformat(sep=" ")


def count_tickets(
    connection: sqlite3.Connection, chat: Chat, user: User, contest: Contest
) -> list[Ticket]:
    """Turn the user's not yet counted invitations into new tickets."""
    row = connection.execute(
        """
        select chats.id
        from chats
        inner join contests on chats.id = contests.competitive_chat_id
        where contests.keyword_chat_id = ?
          and contests.ended_at is null
        """,
        (chat.id,),
    ).fetchone()
    if row is None:
        raise NotFoundError(f"no running contest for chat {chat.id}")
    competitive_chat_id = row[0]

    unlinked = [
        Member(*member_row)
        for member_row in connection.execute(
            """
            select id, user_id, chat_id, status, inviter_id,
                   ignore_in_ticket_counting, in_ticket_id, created_at, updated_at
            from members
            where not ignore_in_ticket_counting
              and in_ticket_id = 0
              and status = ?
              and inviter_id = ?
              and chat_id = ?
              and created_at >= ?
            order by id
            """,
            (
                int(MemberStatus.JOIN),
                user.id,
                competitive_chat_id,
                _timestamp(contest.created_at),
            ),
        )
    ]
    if len(unlinked) // contest.multiplicity == 0:
        return []

    (last_number,) = connection.execute(
        "select ifnull(max(number), 0) from tickets where contest_id = ?",
        (contest.id,),
    ).fetchone()

    tickets = []
    for number, group in enumerate(
        chunked(unlinked, contest.multiplicity), start=last_number + 1
    ):
        ticket = Ticket(number=number, user_id=user.id, contest_id=contest.id)
        connection.execute(
            "insert into tickets (number, user_id, contest_id) values (?, ?, ?)",
            (ticket.number, ticket.user_id, ticket.contest_id),
        )
        ids = member_ids(group)
        placeholders = ", ".join("?" for _ in ids)
        connection.execute(
            f"update members set in_ticket_id = ? where id in ({placeholders})",
            (ticket.number, *ids),
        )
        tickets.append(ticket)
    return tickets