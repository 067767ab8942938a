from __future__ import annotations

from typing import Any, Dict, Optional, Protocol

from .events import SessionEvent
from .results import SendResult


class MessagingClient(Protocol):
    """Protocol for messaging providers backing the notification relay.

    Concrete implementations encapsulate the provider's HTTP surface and
    event normalization so the session manager and routers stay
    provider-agnostic.

    Responsibilities:
        - Deliver a text message to one recipient, raising on failure
        - Report and start the provider session (the readiness handshake)
        - Verify incoming event webhooks
        - Normalize provider event bodies to `SessionEvent`

    Minimal example:
        >>> from app.types import MessagingClient, SendResult, SessionEvent
        >>> class EchoClient(MessagingClient):
        ...     async def send_message(self, recipient: str, text: str) -> SendResult:
        ...         return SendResult(message_id="echo")
        ...     async def fetch_session_status(self) -> SessionEvent:
        ...         return SessionEvent()
        ...     async def start_session(self) -> None:
        ...         return None
        ...     def verify_request(self, token: Optional[str]) -> None:
        ...         return None
        ...     def normalize_event(self, body: Dict[str, Any]) -> SessionEvent:
        ...         return SessionEvent()
    """

    async def send_message(self, recipient: str, text: str) -> SendResult:
        """Send `text` to `recipient`.

        Implementations raise on any failure; the dispatcher converts the
        error into a failed delivery outcome.
        """
        ...

    async def fetch_session_status(self) -> SessionEvent:
        """Return the provider's current session state."""
        ...

    async def start_session(self) -> None:
        """Ask the provider to start (or resume) its session."""
        ...

    def verify_request(self, token: Optional[str]) -> None:
        """Raise PermissionError if an incoming event request is not authorized."""
        ...

    def normalize_event(self, body: Dict[str, Any]) -> SessionEvent:
        """Normalize an inbound event payload to a common shape."""
        ...
