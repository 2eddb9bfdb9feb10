"""IRC-to-core message mapping adapter.

This keeps irc-library details (events, nick masks) out of the core.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

from core.models import InboundMessage


@dataclass(frozen=True)
class KickDetails:
    channel: str
    nick: str
    by: str
    reason: str


def source_nick(source: Any) -> str:
    """Return the nick part of an event source, or ``""`` for servers."""

    if source is None:
        return ""
    nick = getattr(source, "nick", None)
    if nick:
        return str(nick)
    # Bare strings (no ``!user@host``) are either a nick or a server name.
    return str(source).split("!", 1)[0]


def same_nick(left: Optional[str], right: Optional[str]) -> bool:
    if not left or not right:
        return False
    return left.lower() == right.lower()


def is_own_event(connection: Any, event: Any) -> bool:
    """True when the event was caused by the bot's own nick."""

    return same_nick(source_nick(event.source), connection.get_nickname())


def build_inbound_message(event: Any) -> InboundMessage:
    """Build a core InboundMessage from a ``pubmsg`` event."""

    arguments = event.arguments or []
    return InboundMessage(
        channel=event.target,
        sender_nick=source_nick(event.source),
        text=arguments[0] if arguments else "",
    )


def kick_details(event: Any) -> KickDetails:
    """Unpack a ``kick`` event (target=channel, arguments=[nick, reason])."""

    arguments = event.arguments or []
    return KickDetails(
        channel=event.target,
        nick=arguments[0] if arguments else "",
        by=str(event.source or ""),
        reason=arguments[1] if len(arguments) > 1 else "",
    )
