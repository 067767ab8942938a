from __future__ import annotations

import asyncio
import json

import httpx
import pytest
import respx

from app.adapters.registry import AdapterRegistry
from app.adapters.whatsapp import WhatsAppBridgeClient
from app.types import SessionStatus
from tests.fixtures.bridge_events import (
    LINKED_ACCOUNT,
    SEND_URL,
    START_URL,
    STATUS_URL,
    legacy_event,
    sent_message,
    session_status,
)


@respx.mock
def test_send_text_success() -> None:
    adapter = WhatsAppBridgeClient()
    route = respx.post(SEND_URL).mock(return_value=httpx.Response(201, json=sent_message("msg-1")))

    result = asyncio.run(adapter.send_message("94771461925", "Hello!"))

    assert route.called
    request = route.calls.last.request
    sent = json.loads(request.content.decode())
    assert sent == {"session": "default", "chatId": "94771461925@c.us", "text": "Hello!"}
    assert request.headers["X-Api-Key"] == "bridge-key"
    assert result.message_id == "msg-1"


@respx.mock
def test_send_keeps_existing_chat_id() -> None:
    adapter = WhatsAppBridgeClient()
    route = respx.post(SEND_URL).mock(return_value=httpx.Response(201, json={"id": "plain-id"}))

    result = asyncio.run(adapter.send_message("12345@g.us", "Group hello"))

    assert json.loads(route.calls.last.request.content.decode())["chatId"] == "12345@g.us"
    assert result.message_id == "plain-id"


@respx.mock
def test_send_failure_raises() -> None:
    adapter = WhatsAppBridgeClient()
    respx.post(SEND_URL).mock(return_value=httpx.Response(500, json={"error": "session not ready"}))

    with pytest.raises(httpx.HTTPStatusError):
        asyncio.run(adapter.send_message("94771461925", "Hello!"))


def test_send_requires_recipient_and_text() -> None:
    adapter = WhatsAppBridgeClient()
    with pytest.raises(ValueError):
        asyncio.run(adapter.send_message("", "Hello!"))
    with pytest.raises(ValueError):
        asyncio.run(adapter.send_message("94771461925", ""))


@respx.mock
def test_fetch_session_status() -> None:
    adapter = WhatsAppBridgeClient()
    respx.get(STATUS_URL).mock(
        return_value=httpx.Response(200, json={"name": "default", "status": "WORKING", "me": LINKED_ACCOUNT})
    )

    event = asyncio.run(adapter.fetch_session_status())

    assert event.status == SessionStatus.WORKING
    assert event.is_working
    assert event.me == LINKED_ACCOUNT


@respx.mock
def test_fetch_session_status_unknown_value() -> None:
    adapter = WhatsAppBridgeClient()
    respx.get(STATUS_URL).mock(return_value=httpx.Response(200, json={"status": "REBOOTING"}))

    event = asyncio.run(adapter.fetch_session_status())

    assert event.status == SessionStatus.UNKNOWN
    assert event.me is None


@respx.mock
def test_fetch_session_status_non_json_body() -> None:
    adapter = WhatsAppBridgeClient()
    respx.get(STATUS_URL).mock(return_value=httpx.Response(200, text="<html>proxy warming up</html>"))

    event = asyncio.run(adapter.fetch_session_status())

    assert event.status == SessionStatus.UNKNOWN
    assert not event.is_working


@respx.mock
def test_start_session_tolerates_already_started() -> None:
    adapter = WhatsAppBridgeClient()
    route = respx.post(START_URL).mock(return_value=httpx.Response(422, json={"message": "already started"}))

    asyncio.run(adapter.start_session())

    assert json.loads(route.calls.last.request.content.decode()) == {"name": "default"}


@respx.mock
def test_start_session_raises_on_server_error() -> None:
    adapter = WhatsAppBridgeClient()
    respx.post(START_URL).mock(return_value=httpx.Response(500))

    with pytest.raises(httpx.HTTPStatusError):
        asyncio.run(adapter.start_session())


def test_verify_request() -> None:
    adapter = WhatsAppBridgeClient()
    adapter.verify_request("hook-secret")
    adapter.verify_request("Bearer hook-secret")
    with pytest.raises(PermissionError):
        adapter.verify_request("wrong")
    with pytest.raises(PermissionError):
        adapter.verify_request(None)

    adapter.webhook_secret = None
    adapter.verify_request(None)


def test_normalize_native_session_status() -> None:
    adapter = WhatsAppBridgeClient()
    event = adapter.normalize_event(session_status(status="WORKING", me=LINKED_ACCOUNT))
    assert event.event == "session.status"
    assert event.session == "default"
    assert event.status == SessionStatus.WORKING
    assert event.me == LINKED_ACCOUNT


def test_normalize_qr_status() -> None:
    adapter = WhatsAppBridgeClient()
    event = adapter.normalize_event(session_status(status="scan_qr_code"))
    assert event.status == SessionStatus.SCAN_QR_CODE


def test_normalize_legacy_events() -> None:
    adapter = WhatsAppBridgeClient()
    ready = adapter.normalize_event(legacy_event("ready", info=LINKED_ACCOUNT))
    assert ready.status == SessionStatus.WORKING
    assert ready.me == LINKED_ACCOUNT

    qr = adapter.normalize_event(legacy_event("qr", qr="2@abc"))
    assert qr.status == SessionStatus.SCAN_QR_CODE
    assert qr.qr == "2@abc"

    failure = adapter.normalize_event(legacy_event("auth_failure"))
    assert failure.status == SessionStatus.FAILED


def test_normalize_garbage() -> None:
    adapter = WhatsAppBridgeClient()
    event = adapter.normalize_event({"event": 42, "payload": "nope"})
    assert event.status == SessionStatus.UNKNOWN
    assert event.event is None


def test_registry_provides_whatsapp_adapter() -> None:
    adapter = AdapterRegistry.get("whatsapp")
    assert isinstance(adapter, WhatsAppBridgeClient)
    assert adapter.send_endpoint() == SEND_URL
