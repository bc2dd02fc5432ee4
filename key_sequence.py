"""Parsing of the comma separated key sequence typed by the user."""

from __future__ import annotations

from typing import List


def parse_key_sequence(text: str) -> List[str]:
    """Split ``text`` on commas into trimmed, non-empty key tokens.

    Case is preserved so the tokens can be shown as typed; key lookup is
    case-insensitive further down. Never raises: blank input (or ``None``)
    gives an empty list.
    """
    if not text:
        return []
    return [token.strip() for token in text.split(",") if token.strip()]
