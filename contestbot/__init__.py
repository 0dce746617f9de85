"""Telegram bot that runs invitation contests in group chats, stored in SQLite."""

__version__ = "0.1.0"