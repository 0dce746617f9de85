import pytest

from contestbot import l10n
from contestbot.chats import take_chat, upsert_chat
from contestbot.db import connect, ensure_schema
from contestbot.errors import NotFoundError, UserError
from contestbot.model import Chat


@pytest.fixture
def conn():
    connection = connect(":memory:")
    ensure_schema(connection)
    yield connection
    connection.close()


def test_upsert_then_take(conn):
    upsert_chat(conn, Chat(id=-100, title="Contest", username="contest_chat"))
    chat = take_chat(conn, "contest_chat")
    assert (chat.id, chat.title, chat.username) == (-100, "Contest", "contest_chat")
    assert chat.created_at is not None and chat.created_at.year >= 2000


def test_upsert_updates_existing(conn):
    upsert_chat(conn, Chat(id=-100, title="Old", username="old_name"))
    upsert_chat(conn, Chat(id=-100, title="New", username="new_name"))
    assert conn.execute("select count(*) from chats").fetchone()[0] == 1
    chat = take_chat(conn, "new_name")
    assert chat.title == "New"
    with pytest.raises(UserError):
        take_chat(conn, "old_name")


def test_take_missing_chat(conn):
    with pytest.raises(UserError) as info:
        take_chat(conn, "nobody")
    assert str(info.value) == l10n.CHAT_TAKE_NOT_FOUND
    assert isinstance(info.value.__cause__, NotFoundError)


def test_take_is_exact_match(conn):
    upsert_chat(conn, Chat(id=1, title="A", username="abc"))
    with pytest.raises(UserError):
        take_chat(conn, "@abc")