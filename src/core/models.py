"""Core domain models.

These dataclasses are shared across the core and adapters to avoid tight
coupling to any IRC-specific types.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class ConnectionTarget:
    """Parsed bot destination, e.g. ``ircs://nick:pw@irc.example.net/chan``."""

    secure: bool
    host: str
    port: int
    nickname: Optional[str]
    password: Optional[str]
    path: str
    channel: str

    @property
    def server(self) -> str:
        return f"{self.host}:{self.port}"


@dataclass(frozen=True)
class InboundMessage:
    """A single channel message delivered by the session adapter."""

    channel: str
    sender_nick: str
    text: str


@dataclass(frozen=True)
class ReplyLine:
    """A line sent back to the channel for a successfully resolved link."""

    channel: str
    text: str

    @classmethod
    def for_title(cls, channel: str, title: str, hostname: str) -> "ReplyLine":
        return cls(channel=channel, text=f"{title} | {hostname}")
