"""Services package for the form relay service."""

from .captcha import RecaptchaVerifier
from .dispatcher import NotificationDispatcher, summarize_outcomes
from .readiness import ReadinessGate, ReadinessState
from .whatsapp_session import WhatsAppSession, get_whatsapp_session

__all__ = [
    "NotificationDispatcher",
    "ReadinessGate",
    "ReadinessState",
    "RecaptchaVerifier",
    "WhatsAppSession",
    "get_whatsapp_session",
    "summarize_outcomes",
]
