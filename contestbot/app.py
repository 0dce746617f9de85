"""Entry point: configure from the environment and run the bot."""

from __future__ import annotations

import argparse
import logging
import os
import signal
import sqlite3
import threading

from .botapi import BotApi, BotApiError, Poller
from .db import connect, ensure_schema
from .handlers import Controller

log = logging.getLogger(__name__)


def run(stop_event: threading.Event, token: str, connection: sqlite3.Connection) -> None:
    """Start the bot and poll for updates until the stop event is set."""
    api = BotApi(token)
    me = api.get_me()

    controller = Controller(connection, api)
    poller = Poller(api, controller.dispatch)
    poller.drop_pending()
    log.info("%s has been started...", me.get("username", ""))

    poller.run(stop_event)


def main(argv: list[str] | None = None) -> int:
    """Run the bot configured by TOKEN, MAIN_DATABASE_DSN and DEBUG."""
    parser = argparse.ArgumentParser(
        prog="contestbot",
        description="Telegram bot that runs invitation contests. "
        "Configured by the TOKEN, MAIN_DATABASE_DSN and DEBUG environment variables.",
    )
    parser.parse_args(argv)

    token = os.environ.get("TOKEN", "")
    if not token:
        log.error("TOKEN environment variable is empty")
        return 1

    dsn = os.environ.get("MAIN_DATABASE_DSN", "")
    if not dsn:
        log.error("MAIN_DATABASE_DSN environment variable is empty")
        return 1

    debug = os.environ.get("DEBUG", "")
    logging.basicConfig(level=logging.DEBUG if debug in ("true", "") else logging.INFO)

    stop_event = threading.Event()

    def _on_signal(signum, frame):
        log.info("Received shutdown signal, shutting down...")
        stop_event.set()

    previous = {
        signum: signal.signal(signum, _on_signal)
        for signum in (signal.SIGINT, signal.SIGTERM)
    }
    try:
        try:
            connection = connect(dsn)
            ensure_schema(connection)
        except sqlite3.Error as exc:
            log.error("%s", exc)
            return 1
        try:
            run(stop_event, token, connection)
        except (BotApiError, sqlite3.Error) as exc:
            log.error("%s", exc)
            return 1
        finally:
            connection.close()
    finally:
        for signum, handler in previous.items():
            signal.signal(signum, handler)

    log.info("Application has shut down gracefully")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())