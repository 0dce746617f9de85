import pytest

from contestbot.db import connect, ensure_schema, transaction
from contestbot.model import User
from contestbot.users import upsert_user


@pytest.fixture
def conn():
    connection = connect(":memory:")
    ensure_schema(connection)
    yield connection
    connection.close()


def _load(connection, user_id):
    row = connection.execute(
        "select id, is_bot, first_name, username from users where id = ?", (user_id,)
    ).fetchone()
    return User(id=row["id"], first_name=row["first_name"], username=row["username"], is_bot=row["is_bot"])


def test_insert_user(conn):
    user = User(id=11, first_name="Ann", username="ann", is_bot=False)
    upsert_user(conn, user)
    assert _load(conn, 11) == user


def test_update_user(conn):
    upsert_user(conn, User(id=11, first_name="Ann", username="ann"))
    updated = User(id=11, first_name="Anna", username="anna", is_bot=True)
    upsert_user(conn, updated)
    assert _load(conn, 11) == updated
    assert conn.execute("select count(*) from users").fetchone()[0] == 1


def test_upsert_inside_rolled_back_transaction(conn):
    with pytest.raises(RuntimeError):
        with transaction(conn):
            upsert_user(conn, User(id=3, first_name="Bob"))
            raise RuntimeError("abort")
    assert conn.execute("select count(*) from users").fetchone()[0] == 0