"""Outbound chat line formatting.

IRC lines cannot contain CR/LF and are capped at 512 bytes including the
command prefix, so every reply is flattened and clipped before sending.
"""

from __future__ import annotations

import re

# Leaves room for "PRIVMSG #channel :" plus the server-added prefix.
MAX_TEXT_BYTES = 400

_LINE_BREAKS = re.compile(r"[\r\n]+")


def flatten_line(text: str) -> str:
    return _LINE_BREAKS.sub(" ", text)


def clip_line(text: str, max_bytes: int = MAX_TEXT_BYTES) -> str:
    """Clip *text* to *max_bytes* of UTF-8 without splitting a character."""

    encoded = text.encode("utf-8")
    if len(encoded) <= max_bytes:
        return text
    clipped = encoded[: max_bytes - len("…".encode("utf-8"))]
    return clipped.decode("utf-8", errors="ignore") + "…"


def format_line(text: str, max_bytes: int = MAX_TEXT_BYTES) -> str:
    """Return *text* as a single protocol-safe line."""

    return clip_line(flatten_line(text), max_bytes)
