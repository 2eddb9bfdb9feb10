"""Ports (interfaces) used by the core.

Ports define the minimal contracts for the chat session and the title
resolver so that the core can be reused with different backends.
"""

from __future__ import annotations

from typing import Protocol

import httpx

from core.deadline import Deadline
from core.models import InboundMessage


class ChatSessionPort(Protocol):
    """Chat operations the core is allowed to perform."""

    def join(self, channel: str) -> None:
        ...

    def send(self, channel: str, text: str) -> None:
        ...

    def is_connected(self) -> bool:
        ...

    def disconnect(self, reason: str) -> None:
        ...


class TitleResolverPort(Protocol):
    """Resolve one URL to a page title or raise a ``TitleError``."""

    async def resolve(self, url: httpx.URL, deadline: Deadline) -> str:
        ...


class SessionEvents(Protocol):
    """Events the session adapter pushes into the core."""

    def on_connected(self) -> None:
        ...

    def on_disconnected(self) -> None:
        ...

    def on_joined(self, channel: str) -> None:
        ...

    def on_parted(self, channel: str) -> None:
        ...

    def on_kicked(self, channel: str, by: str, reason: str) -> None:
        ...

    async def on_message(self, message: InboundMessage) -> None:
        ...
