"""A small Telegram Bot API client and a long-polling loop."""

from __future__ import annotations

import json
import logging
import threading
from typing import Any, Callable, Mapping

import requests

log = logging.getLogger(__name__)

DEFAULT_API_URL = "https://api.telegram.org"
DEFAULT_TIMEOUT = 5.0

ALLOWED_UPDATES = ("chat_member", "message", "my_chat_member")
POLL_TIMEOUT = 5
POLL_REQUEST_TIMEOUT = 10.0
RETRY_DELAY = 1.0

PARSE_MODE_MARKDOWN_V2 = "MarkdownV2"


class BotApiError(Exception):
    """A Bot API call failed, either on the network or as reported by Telegram."""

    def __init__(
        self, method: str, description: str, error_code: int | None = None
    ) -> None:
        super().__init__(method, description, error_code)
        self.method = method
        self.description = description
        self.error_code = error_code

    def __str__(self) -> str:
        if self.error_code is None:
            return f"{self.method}: {self.description}"
        return f"{self.method}: {self.error_code} {self.description}"


class BotApi:
    """Calls Bot API methods and logs every non-empty result at debug level."""

    def __init__(
        self,
        token: str,
        base_url: str = DEFAULT_API_URL,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        self.token = token
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._session = requests.Session()

    def _request(self, method: str, params: Mapping[str, Any], timeout: float) -> Any:
        url = f"{self.base_url}/bot{self.token}/{method}"
        payload = {key: value for key, value in params.items() if value is not None}
        try:
            response = self._session.post(url, json=payload, timeout=timeout)
            body = response.json()
        except requests.RequestException as exc:
            raise BotApiError(method, str(exc)) from exc
        except ValueError as exc:
            raise BotApiError(
                method, "response is not JSON", response.status_code
            ) from exc

        if not isinstance(body, dict) or not body.get("ok"):
            description = ""
            code = response.status_code
            if isinstance(body, dict):
                description = str(body.get("description", ""))
                code = body.get("error_code", code)
            raise BotApiError(method, description, code)

        result = body.get("result")
        dumped = json.dumps(result, ensure_ascii=False, separators=(",", ":"))
        if dumped != "[]":
            log.debug(dumped)
        return result

    def call(self, method: str, **kwargs: Any) -> Any:
        """Call a Bot API method; arguments that are None are left out."""
        return self._request(method, kwargs, self.timeout)

    def get_me(self) -> dict:
        """Return the bot's own user object."""
        return self.call("getMe")

    def send_message(
        self,
        chat_id: int,
        text: str,
        message_thread_id: int | None = None,
        parse_mode: str | None = None,
        reply_to_message_id: int | None = None,
    ) -> dict:
        """Send a text message; a zero thread or reply id counts as none."""
        return self.call(
            "sendMessage",
            chat_id=chat_id,
            text=text,
            message_thread_id=message_thread_id or None,
            parse_mode=parse_mode or None,
            reply_to_message_id=reply_to_message_id or None,
        )

    def delete_message(self, chat_id: int, message_id: int) -> bool:
        """Delete a message."""
        return bool(self.call("deleteMessage", chat_id=chat_id, message_id=message_id))

    def get_chat_administrators(self, chat_id: int) -> list[dict]:
        """Return the administrators of a chat as chat member objects."""
        return list(self.call("getChatAdministrators", chat_id=chat_id))

    def get_updates(
        self, offset: int | None = None, timeout: int = POLL_TIMEOUT
    ) -> list[dict]:
        """Long-poll for updates of the kinds the bot listens to."""
        return list(
            self._request(
                "getUpdates",
                {
                    "offset": offset,
                    "timeout": timeout,
                    "allowed_updates": list(ALLOWED_UPDATES),
                },
                POLL_REQUEST_TIMEOUT,
            )
        )


class Poller:
    """Fetches updates and hands each to a handler; handler errors are logged."""

    def __init__(self, api: BotApi, handler: Callable[[dict], Any]) -> None:
        self.api = api
        self.handler = handler
        self.offset: int | None = None

    def drop_pending(self) -> bool:
        """Discard updates that arrived while the bot was offline."""
        return bool(self.api.call("deleteWebhook", drop_pending_updates=True))

    def poll_once(self) -> list[dict]:
        """Fetch one batch of updates, handle them, and return the batch."""
        updates = self.api.get_updates(offset=self.offset, timeout=POLL_TIMEOUT)
        for update in updates:
            self.offset = int(update["update_id"]) + 1
            try:
                self.handler(update)
            except Exception as exc:
                log.error("произошла ошибка при обработке обновления: %s", exc)
        return updates

    def run(self, stop_event: threading.Event) -> None:
        """Poll until the stop event is set; failed fetches are retried."""
        while not stop_event.is_set():
            try:
                self.poll_once()
            except BotApiError as exc:
                log.warning("getUpdates: %s", exc)
                stop_event.wait(RETRY_DELAY)