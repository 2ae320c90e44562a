"""Hex string helpers for storage keys and values."""

from __future__ import annotations

import re

_HEX_PATTERN = re.compile(r"^0x[0-9a-fA-F]*$")


def is_hex_string(value: object) -> bool:
    """Return True for ``0x``-prefixed strings with an even hex body."""
    if not isinstance(value, str) or not _HEX_PATTERN.match(value):
        return False
    return len(value) % 2 == 0


def normalize_hex_body(raw_value: str) -> str:
    """Strip whitespace and an optional ``0x`` marker, lowercasing the body."""
    body = raw_value.strip().lower()
    if body.startswith("0x"):
        body = body[2:]
    return body
