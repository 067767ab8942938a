from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import httpx

from app.types import MessagingClient, SendResult, SessionEvent, SessionStatus
from app.utils import to_chat_id
from server.config import Settings, get_settings

logger = logging.getLogger("formrelay.whatsapp")

# Event names pushed by bridges that wrap whatsapp-web.js directly
_LEGACY_EVENTS: Dict[str, SessionStatus] = {
    "ready": SessionStatus.WORKING,
    "authenticated": SessionStatus.STARTING,
    "qr": SessionStatus.SCAN_QR_CODE,
    "auth_failure": SessionStatus.FAILED,
    "disconnected": SessionStatus.STOPPED,
}


def _parse_status(raw: Any) -> SessionStatus:
    if isinstance(raw, str):
        try:
            return SessionStatus(raw.upper())
        except ValueError:
            return SessionStatus.UNKNOWN
    return SessionStatus.UNKNOWN


class WhatsAppBridgeClient(MessagingClient):
    """WhatsApp Web bridge adapter implementing the MessagingClient protocol.

    The bridge drives a real WhatsApp Web session in a headless browser and
    exposes it over HTTP (WAHA-compatible API). Linking the session requires
    scanning a QR code once; the bridge keeps the browser profile afterwards.

    Notes:
    - Sending: POST /api/sendText with `session`, `chatId`, and `text`.
    - Status: GET /api/sessions/{session}; `WORKING` plus `me` means linked.
    - Webhook verification: optional. If WHATSAPP_WEBHOOK_SECRET is not set,
      verification is skipped.
    """

    def __init__(self, settings: Optional[Settings] = None) -> None:
        settings = settings or get_settings()
        self.base_url = settings.whatsapp_bridge_url.rstrip("/")
        self.session = settings.whatsapp_session
        self.api_key = settings.whatsapp_api_key
        self.webhook_secret = settings.whatsapp_webhook_secret

    def _headers(self) -> Dict[str, str]:
        headers: Dict[str, str] = {"Content-Type": "application/json"}
        if self.api_key:
            headers["X-Api-Key"] = self.api_key
        return headers

    def send_endpoint(self) -> str:
        return f"{self.base_url}/api/sendText"

    def status_endpoint(self) -> str:
        return f"{self.base_url}/api/sessions/{self.session}"

    def start_endpoint(self) -> str:
        return f"{self.base_url}/api/sessions/start"

    def qr_endpoint(self) -> str:
        return f"{self.base_url}/api/{self.session}/auth/qr"

    # --- Outbound ---
    async def send_message(self, recipient: str, text: str) -> SendResult:  # type: ignore[override]
        """Send a text message to one recipient through the bridge."""
        if not recipient:
            raise ValueError("recipient is required")
        if not text:
            raise ValueError("text is required")

        payload = {"session": self.session, "chatId": to_chat_id(recipient), "text": text}

        async with httpx.AsyncClient(timeout=30) as client:
            response = await client.post(self.send_endpoint(), headers=self._headers(), json=payload)
            try:
                response.raise_for_status()
            except httpx.HTTPStatusError as e:
                try:
                    error_detail = e.response.json()
                except ValueError:
                    error_detail = e.response.text
                logger.warning(
                    "WhatsApp bridge rejected message",
                    extra={"chat_id": payload["chatId"], "detail": error_detail},
                )
                raise

        data = response.json() if response.content else {}
        if not isinstance(data, dict):
            data = {}
        message_id = data.get("id")
        if isinstance(message_id, dict):
            message_id = message_id.get("_serialized") or message_id.get("id")
        return SendResult(
            message_id=message_id if isinstance(message_id, str) else None,
            data=data or None,
        )

    # --- Session lifecycle ---
    async def fetch_session_status(self) -> SessionEvent:
        async with httpx.AsyncClient(timeout=10) as client:
            response = await client.get(self.status_endpoint(), headers=self._headers())
            response.raise_for_status()
            try:
                body = response.json()
            except ValueError:
                logger.warning(
                    "WhatsApp bridge returned a non-JSON session status",
                    extra={"status_code": response.status_code},
                )
                return SessionEvent(event="session.status", session=self.session)
        if not isinstance(body, dict):
            body = {}
        return SessionEvent(
            event="session.status",
            session=body.get("name") or self.session,
            status=_parse_status(body.get("status")),
            me=body.get("me") if isinstance(body.get("me"), dict) else None,
        )

    async def start_session(self) -> None:
        """Start the bridge session; an already running session is fine."""
        async with httpx.AsyncClient(timeout=10) as client:
            response = await client.post(
                self.start_endpoint(), headers=self._headers(), json={"name": self.session}
            )
        if response.status_code == 422:
            # Bridge answers 422 when the session is already started
            logger.debug("WhatsApp session already started", extra={"session": self.session})
            return
        response.raise_for_status()

    # --- Webhook verification ---
    def verify_request(self, token: Optional[str]) -> None:
        if not self.webhook_secret:
            return
        provided = token or ""
        if provided.startswith("Bearer "):
            provided = provided[len("Bearer ") :]
        if provided != self.webhook_secret:
            raise PermissionError("Unauthorized webhook")

    # --- Normalization ---
    def normalize_event(self, body: Dict[str, Any]) -> SessionEvent:
        """Normalize a bridge event to SessionEvent.

        Handles the bridge's native shape
        (`{"event": "session.status", "payload": {"status": "WORKING"}, "me": {...}}`)
        and the plain whatsapp-web.js event names (`ready`, `qr`, `auth_failure`, ...).
        """
        if not isinstance(body, dict):
            return SessionEvent()

        event = body.get("event")
        payload = body.get("payload")
        if not isinstance(payload, dict):
            payload = {}

        me = body.get("me") or payload.get("me") or body.get("info")
        if not isinstance(me, dict):
            me = None

        if isinstance(event, str) and event in _LEGACY_EVENTS:
            status = _LEGACY_EVENTS[event]
        else:
            status = _parse_status(payload.get("status") or body.get("status"))

        qr = body.get("qr") or payload.get("qr")

        return SessionEvent(
            event=event if isinstance(event, str) else None,
            session=body.get("session") if isinstance(body.get("session"), str) else self.session,
            status=status,
            me=me,
            qr=qr if isinstance(qr, str) else None,
        )
