from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from .enums import DeliveryStatus, NotificationStatus


class SendResult(BaseModel):
    """Standardized result returned by adapters after a successful send.

    Attributes:
        message_id: Provider-assigned identifier for the outbound message.
        data: Raw provider response payload for debugging.
    """

    message_id: Optional[str] = None
    data: Optional[Dict[str, Any]] = None


class DeliveryOutcome(BaseModel):
    """Result of one delivery attempt to one recipient.

    Produced per attempt by the dispatcher and returned to the caller for
    inclusion in the HTTP response. Never persisted.

    Attributes:
        recipient: Recipient identifier exactly as passed to the dispatcher.
        status: `sent` or `failed`.
        detail: Error message for failed attempts, otherwise None.

    Example:
        >>> from app.types import DeliveryOutcome, DeliveryStatus
        >>> DeliveryOutcome(recipient="94771461925", status=DeliveryStatus.SENT)
    """

    recipient: str
    status: DeliveryStatus
    detail: Optional[str] = None


class NotificationReport(BaseModel):
    """Aggregate view of one notification, as reported to HTTP clients."""

    status: NotificationStatus
    deliveries: List[DeliveryOutcome] = Field(default_factory=list)


class CaptchaResult(BaseModel):
    """Verification verdict returned by the reCAPTCHA verifier.

    `score` is only present for score-based (v3) keys.
    """

    success: bool
    score: Optional[float] = None
    action: Optional[str] = None
    hostname: Optional[str] = None
    error_codes: List[str] = Field(default_factory=list)
