"""Parsing of CAN identifiers and payloads typed as hexadecimal text."""

from __future__ import annotations

import re

__all__ = ["HexFormatError", "parse_id", "parse_data"]

# An extended CAN identifier is written as exactly eight hexadecimal digits.
_ID_PATTERN = re.compile(r"[0-9a-fA-F]{8}")

# Pairs of hexadecimal digits, each optionally preceded by one whitespace.
_DATA_PATTERN = re.compile(r"(?:\s?[0-9a-fA-F]{2})+", re.ASCII)
_BYTE_PATTERN = re.compile(r"[0-9a-fA-F]{2}")


class HexFormatError(ValueError):
    """Raised when an identifier or payload is not in the expected format."""


def parse_id(text: str) -> int:
    """Return the identifier written as eight hexadecimal digits in ``text``."""
    if not _ID_PATTERN.fullmatch(text):
        raise HexFormatError(f"the introduced ID has wrong format: {text!r}")
    return int(text, 16)


def parse_data(text: str) -> bytes:
    """Return the bytes written as hexadecimal pairs in ``text``.

    Each pair may be preceded by a single whitespace character.
    """
    if not _DATA_PATTERN.fullmatch(text):
        raise HexFormatError(f"the introduced data has wrong format: {text!r}")
    return bytes(int(pair, 16) for pair in _BYTE_PATTERN.findall(text))