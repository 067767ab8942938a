from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Optional

from fastapi import APIRouter, Body, Depends, Header, HTTPException, Security
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from app.routers.forms import staff_recipients
from app.services.whatsapp_session import WhatsAppSession, get_whatsapp_session
from app.types import DirectMessageRequest, DirectMessageResponse, SessionEvent, WhatsAppStatusResponse
from app.utils import normalize_phone_number
from app.utils.formatting import format_direct_message
from server.config import Settings, get_settings

logger = logging.getLogger("formrelay.messaging")

router = APIRouter(prefix="", tags=["messaging"])
security = HTTPBearer(auto_error=False)

TEST_MESSAGE = "Hello! This is a test message from the server."


@router.get("/whatsapp-status")
async def whatsapp_status(
    session: WhatsAppSession = Depends(get_whatsapp_session),
) -> WhatsAppStatusResponse:
    state = session.describe()
    return WhatsAppStatusResponse(
        whatsappReady=state["ready"],
        whatsappInfo=state["info"],
        timestamp=datetime.now(timezone.utc).isoformat(),
    )


@router.post("/sendWhatsAppMessage")
async def send_whatsapp_message(
    payload: DirectMessageRequest,
    settings: Settings = Depends(get_settings),
    session: WhatsAppSession = Depends(get_whatsapp_session),
) -> DirectMessageResponse:
    if not payload.contact_number or not payload.message:
        raise HTTPException(status_code=400, detail="contactNumber and message are required")
    try:
        number = normalize_phone_number(payload.contact_number, settings.default_country_code)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    if not await session.wait_until_ready():
        raise HTTPException(status_code=503, detail="WhatsApp client is not ready")

    try:
        result = await session.client.send_message(
            number, format_direct_message(payload.message, payload.shop_name)
        )
    except Exception as e:
        logger.error(f"Error sending WhatsApp message: {e}", extra={"dest": number})
        raise HTTPException(status_code=502, detail=f"Send error: {e}")

    return DirectMessageResponse(
        message="WhatsApp message sent successfully",
        sentTo=number,
        messageId=result.message_id,
    )


@router.get("/test")
async def send_test_message(
    settings: Settings = Depends(get_settings),
    session: WhatsAppSession = Depends(get_whatsapp_session),
) -> dict[str, Any]:
    """Send a canned message to the first configured recipient."""
    recipients = staff_recipients(settings)
    if not recipients:
        raise HTTPException(status_code=400, detail="No notification recipients configured")
    try:
        await session.client.send_message(recipients[0], TEST_MESSAGE)
    except Exception as e:
        logger.error(f"Error sending WhatsApp test message: {e}")
        raise HTTPException(status_code=502, detail=f"Send error: {e}")
    return {"status": "success", "message": "WhatsApp message sent!"}


@router.post("/webhooks/whatsapp")
async def whatsapp_events(
    payload: dict[str, Any] = Body(..., description="Raw bridge event JSON payload"),
    credentials: HTTPAuthorizationCredentials | None = Security(security),
    x_api_key: Optional[str] = Header(default=None),
    session: WhatsAppSession = Depends(get_whatsapp_session),
) -> dict[str, Any]:
    """Session lifecycle events pushed by the WhatsApp bridge.

    - Verifies the request using the client's `verify_request`
    - Normalizes the payload to `SessionEvent`
    - Hands it to the session, which flips readiness on `WORKING`
      (confirmed against the bridge when no webhook secret is configured)
    """
    token = credentials.credentials if credentials is not None else x_api_key
    try:
        session.client.verify_request(token)
    except PermissionError:
        raise HTTPException(status_code=401, detail="Unauthorized webhook")

    event: SessionEvent = session.client.normalize_event(payload)
    trusted = bool(getattr(session.client, "webhook_secret", None))
    await session.handle_webhook_event(event, trusted=trusted)
    return {"ok": True, "status": event.status.value, "ready": session.ready}
