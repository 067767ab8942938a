from __future__ import annotations

from typing import Dict

from app.types import MessagingClient
from app.adapters.whatsapp import WhatsAppBridgeClient


class AdapterRegistry:
    """Registry for messaging clients by name.

    Enables plugging in alternative WhatsApp bridges without changing the
    session manager or router logic.
    """

    _registry: Dict[str, type[MessagingClient]] = {
        "whatsapp": WhatsAppBridgeClient,
    }

    @classmethod
    def get(cls, name: str) -> MessagingClient:
        provider_cls = cls._registry.get(name)
        if provider_cls is None:
            raise KeyError(f"Unknown messaging adapter: {name}")
        return provider_cls()

    @classmethod
    def register(cls, name: str, adapter_cls: type[MessagingClient]) -> None:
        cls._registry[name] = adapter_cls
