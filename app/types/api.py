from __future__ import annotations

from typing import Any, Dict, Optional

from pydantic import BaseModel

from .results import NotificationReport


class FormResponse(BaseModel):
    """Standard response schema for form submission endpoints.

    A submission is always acknowledged; delivery problems only show up in
    `notification.status`.

    Attributes:
        success: Indicates the submission itself was accepted.
        message: Human readable summary.
        timestamp: Server receive time (ISO 8601, UTC).
        data: Echo of the accepted submission.
        notification: Aggregate WhatsApp delivery report.

    Example:
        {
          "success": true,
          "message": "Contact form submitted successfully",
          "timestamp": "2025-01-05T10:00:00+00:00",
          "data": {"name": "Ann", "email": "ann@example.com"},
          "notification": {
            "status": "partial_success",
            "deliveries": [
              {"recipient": "94771461925", "status": "sent", "detail": null},
              {"recipient": "000", "status": "failed", "detail": "invalid id"}
            ]
          }
        }
    """

    success: bool = True
    message: str
    timestamp: str
    data: Optional[Dict[str, Any]] = None
    notification: NotificationReport


class DirectMessageResponse(BaseModel):
    success: bool = True
    message: str
    sentTo: str
    messageId: Optional[str] = None


class WhatsAppStatusResponse(BaseModel):
    status: str = "OK"
    whatsappReady: bool
    whatsappInfo: Optional[Dict[str, Any]] = None
    timestamp: str
