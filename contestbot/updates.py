"""Request context for one update and helpers shared by the update handlers."""

from __future__ import annotations

import logging
import re
import sqlite3
from dataclasses import dataclass
from typing import Any, Mapping

from . import l10n
from .botapi import PARSE_MODE_MARKDOWN_V2, BotApiError
from .chats import upsert_chat
from .errors import UsageError, UserError
from .model import Chat
from .tg_status import chat_from_telegram

log = logging.getLogger(__name__)

CHAT_TYPE_PRIVATE = "private"
GROUP_CHAT_TYPES = frozenset({"group", "supergroup"})

_INT_PATTERN = re.compile(r"[+-]?[0-9]+")
_INT64_MIN = -(2**63)
_INT64_MAX = 2**63 - 1


def _parse_int(text: str) -> int | None:
    """Parse a signed decimal 64-bit integer; None when the text is not one."""
    if not _INT_PATTERN.fullmatch(text):
        return None
    value = int(text)
    if not _INT64_MIN <= value <= _INT64_MAX:
        return None
    return value


@dataclass(frozen=True)
class Update:
    """A raw Telegram update with accessors for the parts handlers need."""

    data: Mapping[str, Any]

    @property
    def update_id(self) -> int:
        return int(self.data.get("update_id", 0))

    @property
    def message(self) -> Mapping[str, Any] | None:
        return self.data.get("message")

    @property
    def my_chat_member(self) -> Mapping[str, Any] | None:
        return self.data.get("my_chat_member")

    @property
    def chat_member(self) -> Mapping[str, Any] | None:
        return self.data.get("chat_member")

    def _payload(self) -> Mapping[str, Any] | None:
        return self.message or self.my_chat_member or self.chat_member

    @property
    def effective_chat(self) -> Mapping[str, Any] | None:
        payload = self._payload()
        return None if payload is None else payload.get("chat")

    @property
    def effective_user(self) -> Mapping[str, Any] | None:
        payload = self._payload()
        return None if payload is None else payload.get("from")

    @property
    def effective_message(self) -> Mapping[str, Any] | None:
        return self.message

    @property
    def effective_sender_id(self) -> int:
        """Id of the chat a message was sent on behalf of, else of the user."""
        message = self.message
        if message is not None and message.get("sender_chat"):
            return int(message["sender_chat"]["id"])
        user = self.effective_user
        return 0 if user is None else int(user["id"])

    @property
    def text(self) -> str:
        """Text of the message, or its caption; empty when there is none."""
        message = self.message
        if message is None:
            return ""
        return message.get("caption") or message.get("text") or ""


@dataclass
class Request:
    """Everything a handler needs to react to one update."""

    db: sqlite3.Connection
    api: Any
    update: Update

    def reply(self, text: str, markdown: bool = False) -> dict:
        """Reply to the update's message."""
        message = self.update.message
        if message is None:
            raise ValueError("the update carries no message to reply to")
        thread_id = message.get("message_thread_id") if message.get("is_topic_message") else None
        return self.api.send_message(
            message["chat"]["id"],
            text,
            message_thread_id=thread_id,
            parse_mode=PARSE_MODE_MARKDOWN_V2 if markdown else None,
            reply_to_message_id=message["message_id"],
        )

    def react_error(self, error: BaseException | None) -> None:
        """Tell the user about a user or usage error; re-raise anything else."""
        if error is None:
            return
        if self.update.message is None:
            raise error

        if isinstance(error, UserError):
            text = l10n.REACT_ERROR_PREFIX + error.text + l10n.REACT_ERROR_SUFFIX
            log.warning(text)
            try:
                self.reply(text)
            except BotApiError as exc:
                log.error("reactError: reply to userErr: %s", exc)
            return

        if isinstance(error, UsageError):
            try:
                self.reply(error.usage, markdown=True)
            except BotApiError as exc:
                log.error("reactError: reply with usage: %s", exc)
            self.react_error(error.error)
            return

        raise error

    def check_admin_rights(self, chat_id: int) -> None:
        """Raise a UserError unless the sender administers the chat."""
        sender_id = self.update.effective_sender_id
        try:
            admins = self.api.get_chat_administrators(chat_id)
        except BotApiError as exc:
            log.warning("checkAdminRights: %s", exc)
            raise UserError(l10n.CREATE_CONTEST_CANT_VERIFY_ADMIN_RIGHTS) from exc
        if not any(admin.get("user", {}).get("id") == sender_id for admin in admins):
            raise UserError(l10n.CREATE_CONTEST_NO_ADMIN_RIGHTS)

    def sync_chat(self) -> Chat:
        """Store the update's chat quietly; private chats give an empty Chat."""
        data = self.update.effective_chat
        if data is None or data.get("type") == CHAT_TYPE_PRIVATE:
            return Chat()
        chat = chat_from_telegram(data)
        try:
            upsert_chat(self.db, chat)
        except sqlite3.Error as exc:
            log.warning("silentUpdateChat: chatUpdate.Run: %s", exc)
        return chat


def clear_at(text: str) -> str:
    """Strip one leading "@" from a username."""
    return text.removeprefix("@")


def is_group(chat: Mapping[str, Any]) -> bool:
    """Tell whether a Telegram chat object is a group or supergroup."""
    return chat.get("type") in GROUP_CHAT_TYPES


def parse_config(text: str) -> dict[str, str]:
    """Read "name - value" lines; lines of any other shape are skipped."""
    values = {}
    for line in text.split("\n"):
        parts = line.strip().split(l10n.CFG_DELIMITER)
        if len(parts) == 2:
            values[parts[0].strip()] = parts[1].strip()
    return values


def int_parameter(
    values: Mapping[str, str],
    name: str,
    required: bool = False,
    default: int | None = 0,
) -> int | None:
    """Read an integer parameter; a bad optional one gives the default."""
    raw = values.get(name, "")
    if required and raw == "":
        raise UsageError(
            UserError(f"{l10n.PARAMETER_NOT_PROVIDED}: {name}"),
            l10n.CONTEST_CONFIG_RUN_USAGE,
        )
    value = _parse_int(raw)
    if value is None:
        if required:
            raise UsageError(None, l10n.CONTEST_CONFIG_RUN_USAGE)
        return default
    return value