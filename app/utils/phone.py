"""Phone number helpers for WhatsApp recipients."""

from __future__ import annotations

import re

CHAT_ID_SUFFIX = "@c.us"

_SEPARATORS = re.compile(r"[\s\-\(\)\+]")


def normalize_phone_number(raw: str, country_code: str = "94") -> str:
    """Normalize a local or international phone number to WhatsApp form.

    Spaces, dashes, parentheses, and `+` are removed. A leading trunk `0` is
    replaced by the country code, and a number without the country code gets
    it prepended.

    Examples:
        >>> normalize_phone_number("077 146 1925")
        '94771461925'
        >>> normalize_phone_number("+94 (77) 146-1925")
        '94771461925'
        >>> normalize_phone_number("771461925")
        '94771461925'
    """
    clean = _SEPARATORS.sub("", str(raw))
    if not clean:
        raise ValueError("phone number is empty")

    if clean.startswith("0"):
        clean = country_code + clean[1:]
    elif not clean.startswith(country_code):
        clean = country_code + clean
    return clean


def to_chat_id(number: str) -> str:
    """Return the WhatsApp chat id for a normalized number.

    Identifiers that already carry a network suffix (`@c.us`, `@g.us`) are
    returned unchanged.
    """
    if "@" in number:
        return number
    return number + CHAT_ID_SUFFIX
