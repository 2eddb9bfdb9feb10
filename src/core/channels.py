"""Channel name and connection target helpers."""

from __future__ import annotations

from urllib.parse import unquote, urlsplit

from core.errors import ConfigurationError
from core.models import ConnectionTarget

CHANNEL_PREFIX = "#"

DEFAULT_PORTS = {"irc": 6667, "ircs": 6697}


def normalize_channel(path: str) -> str:
    """Turn a URL path into a channel name.

    One leading ``/`` is stripped. An empty remainder returns ``""`` which
    callers must treat as a fatal configuration error. A name that already
    starts with ``#`` (e.g. decoded from ``%23foo``) is returned unchanged.
    """

    name = path[1:] if path.startswith("/") else path
    if not name:
        return ""
    if name.startswith(CHANNEL_PREFIX):
        return name
    return f"{CHANNEL_PREFIX}{name}"


def parse_connection_target(raw: str) -> ConnectionTarget:
    """Parse ``scheme://[nick[:password]@]host[:port]/channel``."""

    if not raw:
        raise ConfigurationError("missing IRC URL")

    try:
        parts = urlsplit(raw)
        port = parts.port
    except ValueError as e:
        raise ConfigurationError(f"unable to parse argument as URL: {e}") from e

    scheme = parts.scheme.lower()
    if scheme not in DEFAULT_PORTS:
        raise ConfigurationError("IRC URL scheme must be 'irc' or 'ircs'")

    host = parts.hostname
    if not host:
        raise ConfigurationError("missing host in IRC URL")

    # Fragments are not part of the channel; urlsplit already strips them.
    path = unquote(parts.path)
    channel = normalize_channel(path)
    if not channel:
        raise ConfigurationError("missing channel in IRC URL")

    nickname = unquote(parts.username) if parts.username else None
    password = unquote(parts.password) if parts.password is not None else None

    return ConnectionTarget(
        secure=scheme == "ircs",
        host=host,
        port=port or DEFAULT_PORTS[scheme],
        nickname=nickname,
        password=password,
        path=path,
        channel=channel,
    )
