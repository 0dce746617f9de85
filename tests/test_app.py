import json
import threading

import pytest
import responses

from contestbot.app import main, run
from contestbot.botapi import DEFAULT_API_URL, BotApiError
from contestbot.db import connect, ensure_schema


def _url(method):
    return f"{DEFAULT_API_URL}/bottoken/{method}"


@pytest.fixture
def mocked():
    with responses.RequestsMock(assert_all_requests_are_fired=False) as rsps:
        yield rsps


@pytest.fixture
def connection():
    conn = connect(":memory:")
    ensure_schema(conn)
    yield conn
    conn.close()


def test_run_starts_and_stops(mocked, connection):
    mocked.add(responses.POST, _url("getMe"),
               json={"ok": True, "result": {"id": 1, "username": "bot"}})
    mocked.add(responses.POST, _url("deleteWebhook"), json={"ok": True, "result": True})
    stop = threading.Event()
    stop.set()
    assert run(stop, "token", connection) is None
    urls = [call.request.url for call in mocked.calls]
    assert urls == [_url("getMe"), _url("deleteWebhook")]
    assert json.loads(mocked.calls[1].request.body) == {"drop_pending_updates": True}


def test_run_rejected_token_raises(mocked, connection):
    mocked.add(
        responses.POST,
        _url("getMe"),
        status=401,
        json={"ok": False, "error_code": 401, "description": "Unauthorized"},
    )
    with pytest.raises(BotApiError) as info:
        run(threading.Event(), "token", connection)
    assert info.value.error_code == 401


def test_main_without_token(monkeypatch):
    monkeypatch.delenv("TOKEN", raising=False)
    monkeypatch.setenv("MAIN_DATABASE_DSN", ":memory:")
    assert main([]) == 1


def test_main_without_dsn(monkeypatch):
    monkeypatch.setenv("TOKEN", "token")
    monkeypatch.delenv("MAIN_DATABASE_DSN", raising=False)
    assert main([]) == 1


def test_main_fails_when_bot_api_rejects(mocked, monkeypatch):
    monkeypatch.setenv("TOKEN", "token")
    monkeypatch.setenv("MAIN_DATABASE_DSN", ":memory:")
    monkeypatch.setenv("DEBUG", "false")
    mocked.add(
        responses.POST,
        _url("getMe"),
        status=401,
        json={"ok": False, "error_code": 401, "description": "Unauthorized"},
    )
    assert main([]) == 1
    assert len(mocked.calls) == 1


def test_main_rejects_unknown_arguments(monkeypatch):
    monkeypatch.setenv("TOKEN", "token")
    with pytest.raises(SystemExit) as info:
        main(["--bogus"])
    assert info.value.code == 2