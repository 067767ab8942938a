"""Best-effort fan-out of one message to several WhatsApp recipients."""

from __future__ import annotations

import logging
from typing import List, Sequence

from app.types import DeliveryOutcome, DeliveryStatus, MessagingClient, NotificationStatus

logger = logging.getLogger("formrelay.dispatcher")


def _dest_hint(recipient: str, keep: int = 4) -> str:
    recipient = (recipient or "").strip()
    if len(recipient) <= keep:
        return recipient
    return f"...{recipient[-keep:]}"


class NotificationDispatcher:
    """Deliver a rendered message to each recipient independently.

    Deliveries run one after another over the shared client; a failure for
    one recipient is recorded and never stops the rest.
    """

    def __init__(self, client: MessagingClient) -> None:
        self.client = client

    async def dispatch(self, recipients: Sequence[str], message: str) -> List[DeliveryOutcome]:
        outcomes: List[DeliveryOutcome] = []
        for recipient in recipients:
            logger.info("Attempting to send WhatsApp message", extra={"dest": _dest_hint(recipient)})
            try:
                await self.client.send_message(recipient, message)
            except Exception as e:
                logger.error(
                    "Error sending WhatsApp message",
                    extra={"dest": _dest_hint(recipient), "error_type": type(e).__name__, "error": str(e)},
                    exc_info=True,
                )
                outcomes.append(
                    DeliveryOutcome(recipient=recipient, status=DeliveryStatus.FAILED, detail=str(e))
                )
                continue
            logger.info("WhatsApp message sent successfully", extra={"dest": _dest_hint(recipient)})
            outcomes.append(DeliveryOutcome(recipient=recipient, status=DeliveryStatus.SENT))
        return outcomes


def summarize_outcomes(outcomes: Sequence[DeliveryOutcome]) -> NotificationStatus:
    """Collapse per-recipient outcomes into one status for the HTTP response."""
    if not outcomes:
        return NotificationStatus.SKIPPED
    sent = sum(1 for outcome in outcomes if outcome.status == DeliveryStatus.SENT)
    if sent == len(outcomes):
        return NotificationStatus.SUCCESS
    if sent:
        return NotificationStatus.PARTIAL_SUCCESS
    return NotificationStatus.FAILED
