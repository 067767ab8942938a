from __future__ import annotations

from typing import Any, Dict, Optional

from pydantic import BaseModel

from .enums import SessionStatus


class SessionEvent(BaseModel):
    """Adapter-agnostic session lifecycle event from the WhatsApp bridge.

    Both webhook pushes and status polls are mapped to this model so the
    session manager never sees bridge-specific payload shapes.

    Attributes:
        event: Bridge event name (e.g., "session.status", "ready").
        session: Name of the bridge session the event belongs to.
        status: Normalized session status.
        me: Linked account metadata, available once the handshake completed.
        qr: Raw QR payload when the bridge pushes one.

    Example:
        >>> from app.types import SessionEvent, SessionStatus
        >>> SessionEvent(status=SessionStatus.WORKING, me={"id": "94770000000@c.us"})
    """

    event: Optional[str] = None
    session: Optional[str] = None
    status: SessionStatus = SessionStatus.UNKNOWN
    me: Optional[Dict[str, Any]] = None
    qr: Optional[str] = None

    @property
    def is_working(self) -> bool:
        return self.status == SessionStatus.WORKING
