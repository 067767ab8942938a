"""Utility functions for the form relay service."""

from .phone import CHAT_ID_SUFFIX, normalize_phone_number, to_chat_id

__all__ = [
    "CHAT_ID_SUFFIX",
    "normalize_phone_number",
    "to_chat_id",
]
