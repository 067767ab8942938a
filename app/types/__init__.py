"""Core types for the form relay service.

This package centralizes enums, form payload models, the messaging client
protocol, and result/event schemas in one place to keep the codebase
discoverable. Most modules should import types from here rather than
directly from submodules.

Usage:
    from app.types import ContactFormSubmission, MessagingClient, DeliveryOutcome
"""

from .enums import DeliveryStatus, NotificationStatus, SessionStatus
from .events import SessionEvent
from .messages import (
    ContactFormSubmission,
    DirectMessageRequest,
    FormSubmission,
    LeadSubmission,
    OrderCompletion,
    OrderItem,
    ShopOrder,
)
from .protocols import MessagingClient
from .results import CaptchaResult, DeliveryOutcome, NotificationReport, SendResult
from .api import DirectMessageResponse, FormResponse, WhatsAppStatusResponse

__all__ = [
    "DeliveryStatus",
    "NotificationStatus",
    "SessionStatus",
    "SessionEvent",
    "FormSubmission",
    "ContactFormSubmission",
    "LeadSubmission",
    "OrderItem",
    "ShopOrder",
    "OrderCompletion",
    "DirectMessageRequest",
    "MessagingClient",
    "SendResult",
    "DeliveryOutcome",
    "NotificationReport",
    "CaptchaResult",
    "FormResponse",
    "DirectMessageResponse",
    "WhatsAppStatusResponse",
]
