"""WhatsApp session service.

Owns the messaging client and its readiness state, watches the bridge until
the session is linked, and relays notifications once it is.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Dict, Optional, Sequence

import httpx

from app.adapters.registry import AdapterRegistry
from app.services.dispatcher import NotificationDispatcher, summarize_outcomes
from app.services.readiness import DEFAULT_POLL_INTERVAL, ReadinessGate, ReadinessState
from app.types import MessagingClient, NotificationReport, NotificationStatus, SessionEvent, SessionStatus
from server.config import get_settings

logger = logging.getLogger("formrelay.session")


class WhatsAppSession:
    """Lifecycle owner for the shared WhatsApp client."""

    def __init__(
        self,
        client: MessagingClient,
        *,
        ready_timeout: float = 30.0,
        poll_interval: float = DEFAULT_POLL_INTERVAL,
        status_interval: float = 5.0,
    ) -> None:
        self.client = client
        self.ready_timeout = ready_timeout
        self.status_interval = status_interval
        self.state = ReadinessState()
        self.gate = ReadinessGate(self.state, poll_interval=poll_interval)
        self.dispatcher = NotificationDispatcher(client)
        self._monitor_task: Optional[asyncio.Task] = None

    @property
    def ready(self) -> bool:
        return self.state.ready

    async def start(self) -> None:
        """Start the bridge session and watch it until it is linked."""
        try:
            await self.client.start_session()
        except httpx.HTTPError as e:
            logger.warning(f"Failed to start WhatsApp session: {e}")
        if self._monitor_task is None or self._monitor_task.done():
            self._monitor_task = asyncio.create_task(self._monitor())

    async def close(self) -> None:
        task, self._monitor_task = self._monitor_task, None
        if task is None or task.done():
            return
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass

    async def _monitor(self) -> None:
        while not self.state.ready:
            try:
                event = await self.client.fetch_session_status()
            except (httpx.HTTPError, ValueError) as e:
                logger.warning(f"WhatsApp bridge status unavailable: {e}")
            else:
                self.handle_event(event)
            if self.state.ready:
                break
            await asyncio.sleep(self.status_interval)

    async def handle_webhook_event(self, event: SessionEvent, *, trusted: bool) -> None:
        """Apply a pushed event.

        An unauthenticated WORKING push is only a hint: readiness is set
        from the bridge's own session status instead.
        """
        if trusted or event.status != SessionStatus.WORKING or self.state.ready:
            self.handle_event(event)
            return
        try:
            confirmed = await self.client.fetch_session_status()
        except (httpx.HTTPError, ValueError) as e:
            logger.warning(f"Could not confirm WhatsApp session status: {e}")
            return
        if confirmed.status != SessionStatus.WORKING:
            logger.warning(
                "Ignoring unconfirmed WORKING webhook",
                extra={"bridge_status": confirmed.status.value},
            )
        self.handle_event(confirmed)

    def handle_event(self, event: SessionEvent) -> None:
        """Apply a session event from the bridge (webhook push or status poll)."""
        if event.status == SessionStatus.WORKING:
            if self.state.mark_ready(event.me):
                logger.info("WhatsApp Client is ready!", extra={"client_info": event.me})
        elif event.status == SessionStatus.SCAN_QR_CODE:
            qr_endpoint = getattr(self.client, "qr_endpoint", None)
            where = qr_endpoint() if callable(qr_endpoint) else "the bridge dashboard"
            logger.info(f"QR code received, scan it with WhatsApp mobile app (QR at {where})")
        elif event.status == SessionStatus.FAILED:
            logger.error("Authentication failure", extra={"session": event.session})
        elif self.state.ready and event.status == SessionStatus.STOPPED:
            logger.warning("WhatsApp session reported stopped after it was ready")
        else:
            logger.debug("WhatsApp session event", extra={"status": event.status.value})

    async def wait_until_ready(self, timeout: Optional[float] = None) -> bool:
        return await self.gate.wait_until_ready(self.ready_timeout if timeout is None else timeout)

    async def notify(self, recipients: Sequence[str], text: str) -> NotificationReport:
        """Wait for readiness, then deliver `text` to every recipient.

        An empty recipient list is reported as skipped without waiting.
        """
        if not recipients:
            return NotificationReport(status=NotificationStatus.SKIPPED)
        if not await self.wait_until_ready():
            logger.warning(
                "WhatsApp client is not ready. Messages will not be sent.",
                extra={"recipients": len(recipients)},
            )
            return NotificationReport(status=NotificationStatus.NOT_READY)
        outcomes = await self.dispatcher.dispatch(recipients, text)
        return NotificationReport(status=summarize_outcomes(outcomes), deliveries=outcomes)

    def describe(self) -> Dict[str, Any]:
        return {
            "ready": self.state.ready,
            "info": self.state.info,
            "ready_at": self.state.ready_at.isoformat() if self.state.ready_at else None,
        }


# Global WhatsApp session instance (singleton)
_whatsapp_session: Optional[WhatsAppSession] = None


def get_whatsapp_session() -> WhatsAppSession:
    """Get or create the WhatsApp session instance.

    Returns:
        WhatsAppSession instance
    """
    global _whatsapp_session
    if _whatsapp_session is None:
        settings = get_settings()
        _whatsapp_session = WhatsAppSession(
            AdapterRegistry.get(settings.whatsapp_provider),
            ready_timeout=settings.whatsapp_ready_timeout,
            poll_interval=settings.whatsapp_poll_interval,
            status_interval=settings.whatsapp_status_interval,
        )
    return _whatsapp_session
