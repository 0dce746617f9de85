"""Starting and stopping contests."""

from __future__ import annotations

import sqlite3
import uuid

from . import l10n
from .errors import NotFoundError, UserError
from .model import Contest

DEFAULT_MULTIPLICITY = 10
DEFAULT_KEYWORD = l10n.DEFAULT_KEYWORD

_CONTEST_COLUMNS = (
    "id, creator_id, competitive_chat_id, keyword_chat_id, keyword_topic_id, "
    "keyword, multiplicity, created_at, ended_at"
)


class ContestNotFoundError(UserError):
    """There is no running contest to stop in the chat."""

    def __init__(self, text: str = l10n.CONTEST_STOP_NOT_FOUND) -> None:
        super().__init__(text)


def _require_chat(connection: sqlite3.Connection, chat_id: int) -> None:
    row = connection.execute("select 1 from chats where id = ?", (chat_id,)).fetchone()
    if row is None:
        raise NotFoundError(f"no chat with id {chat_id}")


def create_contest(
    connection: sqlite3.Connection,
    *,
    creator_id: int,
    competitive_chat_id: int,
    keyword_chat_id: int,
    keyword_topic_id: int,
    keyword: str,
    multiplicity: int,
) -> Contest:
    """Start a contest; both chats must be known and no contest may be running."""
    _require_chat(connection, competitive_chat_id)
    _require_chat(connection, keyword_chat_id)

    (running,) = connection.execute(
        """
        select exists(
            select 1 from contests
            where competitive_chat_id = ?
              and ended_at is null
        )
        """,
        (competitive_chat_id,),
    ).fetchone()
    if running:
        raise UserError(l10n.CONTEST_CREATE_PREVIOUS_NOT_OVER_YET)

    if multiplicity <= 0:
        multiplicity = DEFAULT_MULTIPLICITY
    if not keyword:
        keyword = DEFAULT_KEYWORD

    contest_id = str(uuid.uuid4())
    connection.execute(
        """
        insert into contests (id, creator_id, competitive_chat_id, keyword_chat_id,
                              keyword_topic_id, keyword, multiplicity)
        values (:id, :creator_id, :competitive_chat_id, :keyword_chat_id,
                :keyword_topic_id, :keyword, :multiplicity)
        """,
        {
            "id": contest_id,
            "creator_id": creator_id,
            "competitive_chat_id": competitive_chat_id,
            "keyword_chat_id": keyword_chat_id,
            "keyword_topic_id": keyword_topic_id,
            "keyword": keyword,
            "multiplicity": multiplicity,
        },
    )
    row = connection.execute(
        f"select {_CONTEST_COLUMNS} from contests where id = ?", (contest_id,)
    ).fetchone()
    return Contest(*row)


def stop_contest(connection: sqlite3.Connection, chat_id: int) -> None:
    """End the running contest of the chat."""
    cursor = connection.execute(
        """
        update contests
        set ended_at = current_timestamp
        where ended_at is null
          and competitive_chat_id = ?
        """,
        (chat_id,),
    )
    if cursor.rowcount == 0:
        raise ContestNotFoundError()