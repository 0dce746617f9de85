"""Domain records stored in the database."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import IntEnum
from typing import Iterable


class MemberStatus(IntEnum):
    """Whether a user joined or left a chat."""

    JOIN = 1
    LEAVE = 2


def _as_datetime(value: datetime | str | None) -> datetime | None:
    if value is None or isinstance(value, datetime):
        return value
    return datetime.fromisoformat(value)


@dataclass
class User:
    id: int
    first_name: str = ""
    username: str = ""
    is_bot: bool = False

    def __post_init__(self) -> None:
        self.is_bot = bool(self.is_bot)


@dataclass
class Member:
    id: int = 0
    user_id: int = 0
    chat_id: int = 0
    status: MemberStatus = MemberStatus.JOIN
    inviter_id: int = 0
    ignore_in_ticket_counting: bool = False
    in_ticket_id: int = 0
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def __post_init__(self) -> None:
        self.status = MemberStatus(self.status)
        self.ignore_in_ticket_counting = bool(self.ignore_in_ticket_counting)
        self.created_at = _as_datetime(self.created_at)
        self.updated_at = _as_datetime(self.updated_at)


@dataclass
class Chat:
    id: int = 0
    title: str = ""
    username: str = ""
    created_at: datetime | None = None

    def __post_init__(self) -> None:
        self.created_at = _as_datetime(self.created_at)


@dataclass
class Contest:
    id: str
    creator_id: int
    competitive_chat_id: int
    keyword_chat_id: int
    keyword_topic_id: int
    keyword: str
    multiplicity: int
    created_at: datetime | None = None
    ended_at: datetime | None = None

    def __post_init__(self) -> None:
        self.created_at = _as_datetime(self.created_at)
        self.ended_at = _as_datetime(self.ended_at)


@dataclass
class Ticket:
    number: int
    user_id: int
    contest_id: str


def member_ids(members: Iterable[Member]) -> list[int]:
    """Return the ids of the given members, in order."""
    return [member.id for member in members]