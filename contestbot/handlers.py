"""Routing of Telegram updates to the bot's handlers."""

from __future__ import annotations

import logging
import sqlite3
from functools import reduce
from typing import Any, Callable, Mapping

from . import l10n
from .botapi import BotApiError
from .chats import take_chat
from .contests import create_contest, stop_contest
from .db import transaction
from .errors import UserError
from .members import update_bot_status, update_member_status
from .messages import handle_message
from .tg_status import define_member_status, user_from_telegram
from .updates import (
    CHAT_TYPE_PRIVATE,
    Request,
    Update,
    clear_at,
    int_parameter,
    is_group,
    parse_config,
)

log = logging.getLogger(__name__)

Handler = Callable[[Request], None]
Middleware = Callable[[Handler], Handler]


def log_debug(handler: Handler) -> Handler:
    """Log a summary of each update before handling it."""

    def wrapper(request: Request) -> None:
        update = request.update
        fields: dict[str, Any] = {"update_id": update.update_id}
        chat = update.effective_chat
        if chat is not None:
            fields["effective_chat_id"] = chat.get("id")
            fields["effective_chat_username"] = chat.get("username", "")
        user = update.effective_user
        if user is not None:
            fields["effective_user_id"] = user.get("id")
            fields["effective_user_username"] = user.get("username", "")
        message = update.effective_message
        if message is not None:
            fields["effective_message_id"] = message.get("message_id")
        log.debug("new update %s", fields)
        handler(request)

    return wrapper


def only_in_private_chat(handler: Handler) -> Handler:
    """Handle the update only when it comes from a private chat."""

    def wrapper(request: Request) -> None:
        chat = request.update.effective_chat
        if chat is not None and chat.get("type") == CHAT_TYPE_PRIVATE:
            handler(request)

    return wrapper


def _chain(handler: Handler, middlewares: tuple[Middleware, ...]) -> Handler:
    # Each middleware wraps the previous result, so the last one runs first.
    return reduce(lambda inner, middleware: middleware(inner), middlewares, handler)


def _resolve_config(request: Request) -> dict[str, Any]:
    values = parse_config(request.update.text)
    params: dict[str, Any] = {
        "keyword": values.get(l10n.CFG_KEYWORD, ""),
        "creator_id": request.update.effective_sender_id,
    }

    chat_username = clear_at(values.get(l10n.CFG_CHAT_USERNAME, ""))
    if chat_username:
        params["keyword_chat_id"] = take_chat(request.db, chat_username).id
    else:
        params["keyword_chat_id"] = int_parameter(values, l10n.CFG_CHAT_ID, True, 0)

    channel_username = clear_at(values.get(l10n.CFG_CHANNEL_USERNAME, ""))
    if channel_username:
        params["competitive_chat_id"] = take_chat(request.db, channel_username).id
    else:
        params["competitive_chat_id"] = int_parameter(
            values, l10n.CFG_CHANNEL_ID, False, params["keyword_chat_id"]
        )

    request.check_admin_rights(params["keyword_chat_id"])

    params["multiplicity"] = int_parameter(values, l10n.CFG_MULTIPLICITY, True, 0)
    params["keyword_topic_id"] = int_parameter(values, l10n.CFG_TOPIC, False, 0)

    _check_chat_availability(request, params["keyword_chat_id"], params["keyword_topic_id"])
    return params


def _check_chat_availability(request: Request, chat_id: int, topic_id: int) -> None:
    try:
        ping = request.api.send_message(chat_id, "ping", message_thread_id=topic_id)
    except BotApiError:
        request.react_error(UserError(l10n.CONTEST_CONFIG_BOT_CANNOT_SEND_MSG))
        return
    try:
        request.api.delete_message(chat_id, ping["message_id"])
    except BotApiError as exc:
        log.warning("contestConfigRun: pingMsg.Delete: %s", exc)


def contest_config_run(request: Request) -> None:
    """Start a contest described by the lines of the command message."""
    try:
        params = _resolve_config(request)
        with transaction(request.db):
            create_contest(request.db, **params)
    except Exception as exc:
        request.react_error(exc)
        return
    request.reply(l10n.CONTEST_CONFIG_RUN_SUCCESS)


def _chat_id_from_property(request: Request, prop: str) -> int:
    chat_id = int_parameter({"chat": prop}, "chat", False, None)
    if chat_id is not None:
        return chat_id
    return take_chat(request.db, clear_at(prop)).id


def contest_stop(request: Request) -> None:
    """Stop the running contest of the chat named in the command."""
    words = request.update.text.split()
    if len(words) < 2:
        request.reply(l10n.CONTEST_STOP_USAGE)
        return
    try:
        chat_id = _chat_id_from_property(request, words[1])
        request.check_admin_rights(chat_id)
        with transaction(request.db):
            stop_contest(request.db, chat_id)
    except Exception as exc:
        request.react_error(exc)
        return
    request.reply(l10n.CONTEST_STOP_SUCCESS)


def on_my_chat_member(request: Request) -> None:
    """Record the bot joining or leaving a chat."""
    chat = request.sync_chat()
    update = request.update.my_chat_member
    status = define_member_status(
        update["old_chat_member"].get("status", ""),
        update["new_chat_member"].get("status", ""),
    )
    if status is None:
        return
    try:
        with transaction(request.db):
            update_bot_status(request.db, chat, status)
    except sqlite3.Error as exc:
        log.debug("newMyChatMember: botStatusUpdate.Run: %s", exc)


def on_message(request: Request) -> None:
    """Count tickets for a group message that carries the contest keyword."""
    chat = request.sync_chat()
    message = request.update.message
    text = request.update.text
    sender_is_user = not message.get("sender_chat") and message.get("from") is not None
    if not is_group(message.get("chat", {})) or not sender_is_user or not text:
        return

    topic_id = int(message.get("message_thread_id", 0)) if message.get("is_topic_message") else 0
    try:
        outcome = handle_message(
            request.db, chat, user_from_telegram(message["from"]), text, topic_id
        )
    except Exception as exc:
        request.react_error(exc)
        return

    if outcome.created_tickets:
        numbers = l10n.YOUR_TICKET_NUMBERS_DELIMITER.join(
            str(ticket.number) for ticket in outcome.created_tickets
        )
        request.reply(l10n.YOUR_TICKET_NUMBERS + numbers)
    elif outcome.calculation_was_started:
        request.reply(l10n.DINT_GET_RIGHT_NUMBER_OF_INVITATIONS)


def on_chat_member(request: Request) -> None:
    """Record a user joining or leaving a chat."""
    chat = request.sync_chat()
    update = request.update.chat_member
    status = define_member_status(
        update["old_chat_member"].get("status", ""),
        update["new_chat_member"].get("status", ""),
    )
    if status is None:
        return
    via_link = (
        update.get("invite_link") is not None
        or bool(update.get("via_join_request"))
        or bool(update.get("via_chat_folder_invite_link"))
    )
    with transaction(request.db):
        update_member_status(
            request.db,
            chat,
            status,
            user_from_telegram(update["new_chat_member"]["user"]),
            user_from_telegram(update["from"]),
            via_link,
        )


class Controller:
    """Hands each update to the first handler that accepts it."""

    def __init__(self, db: sqlite3.Connection, api: Any) -> None:
        self.db = db
        self.api = api
        self._bot_username: str | None = None
        base = (log_debug,)
        private = (log_debug, only_in_private_chat)
        self._routes: list[tuple[Callable[[Update], bool], Handler]] = [
            (self._command("contestConfigRun"), _chain(contest_config_run, private)),
            (self._command("contestStop"), _chain(contest_stop, private)),
            (lambda u: u.my_chat_member is not None, _chain(on_my_chat_member, base)),
            (lambda u: u.message is not None, _chain(on_message, base)),
            (lambda u: u.chat_member is not None, _chain(on_chat_member, base)),
        ]

    @property
    def bot_username(self) -> str:
        if self._bot_username is None:
            self._bot_username = str(self.api.get_me().get("username", ""))
        return self._bot_username

    def _command(self, name: str) -> Callable[[Update], bool]:
        def matches(update: Update) -> bool:
            if update.message is None:
                return False
            words = update.text.split()
            if not words or not words[0].startswith("/"):
                return False
            command, _, mention = words[0][1:].partition("@")
            if command.casefold() != name.casefold():
                return False
            return not mention or mention.casefold() == self.bot_username.casefold()

        return matches

    def dispatch(self, update: Mapping[str, Any] | Update) -> None:
        """Handle one update with the first matching handler."""
        if not isinstance(update, Update):
            update = Update(update)
        request = Request(db=self.db, api=self.api, update=update)
        for matches, handler in self._routes:
            if matches(update):
                handler(request)
                return