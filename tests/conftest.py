from typing import Generator

import pytest
from fastapi.testclient import TestClient

from app.adapters.whatsapp import WhatsAppBridgeClient
from app.services.whatsapp_session import WhatsAppSession, get_whatsapp_session
from main import app
from server.config import get_settings
from tests.fixtures.bridge_events import BRIDGE_URL, LINKED_ACCOUNT


@pytest.fixture(autouse=True)
def test_env(monkeypatch: pytest.MonkeyPatch) -> Generator[None, None, None]:
    monkeypatch.setenv("ENV", "test")
    # Safe defaults for the WhatsApp bridge adapter
    monkeypatch.setenv("WHATSAPP_BRIDGE_URL", BRIDGE_URL)
    monkeypatch.setenv("WHATSAPP_SESSION", "default")
    monkeypatch.setenv("WHATSAPP_API_KEY", "bridge-key")
    monkeypatch.setenv("WHATSAPP_WEBHOOK_SECRET", "hook-secret")
    monkeypatch.setenv("WHATSAPP_AUTOSTART", "0")
    monkeypatch.setenv("WHATSAPP_READY_TIMEOUT", "0.2")
    monkeypatch.setenv("WHATSAPP_POLL_INTERVAL", "0.05")
    monkeypatch.setenv("WHATSAPP_STATUS_INTERVAL", "0.01")
    monkeypatch.setenv("NOTIFY_RECIPIENTS", "94771461925,94778808689")
    monkeypatch.setenv("DEFAULT_COUNTRY_CODE", "94")
    monkeypatch.delenv("RECAPTCHA_SECRET_KEY", raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture()
def session() -> WhatsAppSession:
    settings = get_settings()
    return WhatsAppSession(
        WhatsAppBridgeClient(settings),
        ready_timeout=settings.whatsapp_ready_timeout,
        poll_interval=settings.whatsapp_poll_interval,
        status_interval=settings.whatsapp_status_interval,
    )


@pytest.fixture()
def ready_session(session: WhatsAppSession) -> WhatsAppSession:
    session.state.mark_ready(LINKED_ACCOUNT)
    return session


@pytest.fixture()
def client(session: WhatsAppSession) -> Generator[TestClient, None, None]:
    app.dependency_overrides[get_whatsapp_session] = lambda: session
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
