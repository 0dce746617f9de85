"""Telegram chat member statuses and mapping of Telegram objects."""

from __future__ import annotations

from enum import IntEnum
from typing import Any, Mapping

from .model import Chat, MemberStatus, User


class ChatMemberStatus(IntEnum):
    """Membership statuses as reported by Telegram."""

    LEFT = 1
    KICKED = 2
    MEMBER = 3
    RESTRICTED = 4
    ADMINISTRATOR = 5
    CREATOR = 6

    @property
    def label(self) -> str:
        return self.name.lower()


_BY_LABEL = {status.label: status for status in ChatMemberStatus}

_PARTICIPANT = frozenset(
    {
        ChatMemberStatus.MEMBER,
        ChatMemberStatus.RESTRICTED,
        ChatMemberStatus.ADMINISTRATOR,
        ChatMemberStatus.CREATOR,
    }
)
_ALIEN = frozenset({ChatMemberStatus.LEFT, ChatMemberStatus.KICKED})


def member_status_name(status_id: int) -> str:
    """Return the Telegram name of a status id, or "unknown"."""
    try:
        return ChatMemberStatus(status_id).label
    except ValueError:
        return "unknown"


def define_member_status(old: str, new: str) -> MemberStatus | None:
    """Tell whether a status change is a join, a leave, or neither (None)."""
    old_status = _BY_LABEL.get(old)
    new_status = _BY_LABEL.get(new)
    if old_status in _ALIEN and new_status in _PARTICIPANT:
        return MemberStatus.JOIN
    if old_status in _PARTICIPANT and new_status in _ALIEN:
        return MemberStatus.LEAVE
    return None


def user_from_telegram(data: Mapping[str, Any]) -> User:
    """Build a User from a Telegram user object."""
    return User(
        id=int(data["id"]),
        first_name=data.get("first_name", ""),
        username=data.get("username", ""),
        is_bot=bool(data.get("is_bot", False)),
    )


def chat_from_telegram(data: Mapping[str, Any]) -> Chat:
    """Build a Chat from a Telegram chat object."""
    return Chat(
        id=int(data["id"]),
        title=data.get("title", ""),
        username=data.get("username", ""),
    )