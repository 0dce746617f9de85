"""Errors whose text is meant to be shown to the user."""

from __future__ import annotations

from . import l10n


class UserError(Exception):
    """An error whose message is shown to the user as is."""

    def __init__(self, text: str) -> None:
        super().__init__(text)
        self.text = text

    def __str__(self) -> str:
        return self.text


class UsageError(Exception):
    """An error that also asks for the usage help to be shown."""

    def __init__(self, error: BaseException | None, usage: str) -> None:
        super().__init__(error, usage)
        self.error = error
        self.usage = usage

    def __str__(self) -> str:
        return "" if self.error is None else str(self.error)


class NotFoundError(LookupError):
    """A query that expected a row found none."""


def as_user_error(error: BaseException) -> BaseException:
    """Turn a missing-row error into a user error; pass others through."""
    if isinstance(error, NotFoundError):
        return UserError(l10n.REQUESTED_DATA_NOT_FOUND)
    return error