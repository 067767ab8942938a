from __future__ import annotations

from enum import Enum


class DeliveryStatus(str, Enum):
    """Outcome of a single delivery attempt to one recipient.

    - SENT: the messaging client accepted the message
    - FAILED: the messaging client signalled an error; see the outcome detail
    """

    SENT = "sent"
    FAILED = "failed"


class NotificationStatus(str, Enum):
    """Aggregate status of one notification across all of its recipients.

    Routers report this in the `notification` block of form responses. It
    never changes the HTTP status code of a form submission.

    Example:
        >>> from app.types import NotificationStatus
        >>> NotificationStatus.PARTIAL_SUCCESS.value
        'partial_success'
    """

    SUCCESS = "success"
    PARTIAL_SUCCESS = "partial_success"
    FAILED = "failed"
    NOT_READY = "not_ready"
    SKIPPED = "skipped"


class SessionStatus(str, Enum):
    """Lifecycle states reported by the WhatsApp Web bridge for a session.

    Only WORKING means the browser session is linked and can deliver
    messages. SCAN_QR_CODE means the session waits for a phone to scan the
    linking QR code.
    """

    STOPPED = "STOPPED"
    STARTING = "STARTING"
    SCAN_QR_CODE = "SCAN_QR_CODE"
    WORKING = "WORKING"
    FAILED = "FAILED"
    UNKNOWN = "UNKNOWN"
