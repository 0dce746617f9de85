import json
import logging
import threading

import pytest
import requests
import responses

from contestbot.botapi import (
    ALLOWED_UPDATES,
    BotApi,
    BotApiError,
    Poller,
)

BASE = "http://localhost:8081"


@pytest.fixture
def mocked():
    with responses.RequestsMock(assert_all_requests_are_fired=False) as rsps:
        yield rsps


def _url(method):
    return f"{BASE}/bottoken/{method}"


def _api():
    return BotApi("token", base_url=BASE)


def _body(call):
    return json.loads(call.request.body)


def test_call_returns_result(mocked):
    mocked.add(responses.POST, _url("getMe"),
               json={"ok": True, "result": {"id": 7, "username": "bot"}})
    assert _api().get_me() == {"id": 7, "username": "bot"}


def test_call_drops_none_arguments(mocked):
    mocked.add(responses.POST, _url("someMethod"), json={"ok": True, "result": True})
    assert _api().call("someMethod", a=1, b=None) is True
    assert _body(mocked.calls[0]) == {"a": 1}


def test_error_reported_by_telegram(mocked):
    mocked.add(
        responses.POST,
        _url("getMe"),
        status=401,
        json={"ok": False, "error_code": 401, "description": "Unauthorized"},
    )
    with pytest.raises(BotApiError) as info:
        _api().get_me()
    assert info.value.error_code == 401
    assert info.value.description == "Unauthorized"
    assert info.value.method == "getMe"


def test_network_error_is_wrapped(mocked):
    mocked.add(responses.POST, _url("getMe"), body=requests.ConnectionError("down"))
    with pytest.raises(BotApiError) as info:
        _api().get_me()
    assert info.value.error_code is None


def test_send_message_body(mocked):
    mocked.add(responses.POST, _url("sendMessage"),
               json={"ok": True, "result": {"message_id": 3}})
    result = _api().send_message(-100, "ping", message_thread_id=4)
    assert result == {"message_id": 3}
    assert _body(mocked.calls[0]) == {
        "chat_id": -100,
        "text": "ping",
        "message_thread_id": 4,
    }


def test_send_message_zero_thread_is_omitted(mocked):
    mocked.add(responses.POST, _url("sendMessage"),
               json={"ok": True, "result": {"message_id": 3}})
    result = _api().send_message(5, "hi", message_thread_id=0, parse_mode="MarkdownV2",
                                 reply_to_message_id=9)
    assert result == {"message_id": 3}
    body = _body(mocked.calls[0])
    assert "message_thread_id" not in body
    assert body["parse_mode"] == "MarkdownV2"
    assert body["reply_to_message_id"] == 9


def test_delete_and_administrators(mocked):
    mocked.add(responses.POST, _url("deleteMessage"), json={"ok": True, "result": True})
    mocked.add(
        responses.POST,
        _url("getChatAdministrators"),
        json={"ok": True, "result": [{"status": "creator", "user": {"id": 1}}]},
    )
    api = _api()
    assert api.delete_message(5, 6) is True
    assert api.get_chat_administrators(5) == [{"status": "creator", "user": {"id": 1}}]
    assert _body(mocked.calls[0]) == {"chat_id": 5, "message_id": 6}


def test_get_updates_sends_allowed_updates(mocked):
    mocked.add(responses.POST, _url("getUpdates"), json={"ok": True, "result": []})
    assert _api().get_updates(offset=10) == []
    body = _body(mocked.calls[0])
    assert body["allowed_updates"] == list(ALLOWED_UPDATES)
    assert body["offset"] == 10
    assert body["timeout"] == 5


def test_results_logged_except_empty_list(mocked, caplog):
    mocked.add(responses.POST, _url("getMe"), json={"ok": True, "result": {"id": 1}})
    mocked.add(responses.POST, _url("getUpdates"), json={"ok": True, "result": []})
    api = _api()
    with caplog.at_level(logging.DEBUG, logger="contestbot.botapi"):
        api.get_me()
        api.get_updates()
    messages = [record.getMessage() for record in caplog.records]
    assert messages == ['{"id":1}']


def test_drop_pending_deletes_webhook(mocked):
    mocked.add(responses.POST, _url("deleteWebhook"), json={"ok": True, "result": True})
    assert Poller(_api(), lambda update: None).drop_pending() is True
    assert _body(mocked.calls[0]) == {"drop_pending_updates": True}


def test_poll_once_handles_and_advances_offset(mocked):
    mocked.add(
        responses.POST,
        _url("getUpdates"),
        json={"ok": True, "result": [{"update_id": 40}, {"update_id": 41}]},
    )
    mocked.add(responses.POST, _url("getUpdates"), json={"ok": True, "result": []})
    seen = []

    def handler(update):
        seen.append(update["update_id"])
        if update["update_id"] == 40:
            raise RuntimeError("boom")

    poller = Poller(_api(), handler)
    batch = poller.poll_once()
    assert [u["update_id"] for u in batch] == seen == [40, 41]
    assert poller.offset == 42
    poller.poll_once()
    assert _body(mocked.calls[1])["offset"] == 42


def test_run_stops_when_event_set(mocked):
    mocked.add(responses.POST, _url("getUpdates"),
               json={"ok": True, "result": [{"update_id": 1}]})
    stop = threading.Event()
    handled = []

    def handler(update):
        handled.append(update)
        stop.set()

    poller = Poller(_api(), handler)
    poller.run(stop)
    assert poller.offset == 2
    assert handled == [{"update_id": 1}]
    assert len(mocked.calls) == 1


def test_run_with_event_already_set_makes_no_calls(mocked):
    stop = threading.Event()
    stop.set()
    poller = Poller(_api(), lambda update: None)
    before = poller.offset
    poller.run(stop)
    assert poller.offset == before
    assert len(mocked.calls) == 0