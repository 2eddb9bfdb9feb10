"""HTTP client factory for titlebot.

One ``httpx.AsyncClient`` is created at startup and shared by every title
lookup; it is stateless per request and closed when the bot shuts down.
"""

from __future__ import annotations

import logging
from typing import Optional

import httpx

from core.config import TitleConfig


def request_headers(titles: TitleConfig) -> dict[str, str]:
    """Headers sent on both the HEAD and the GET phase."""

    return {
        "User-Agent": titles.user_agent,
        "Accept": "text/html",
        "Accept-Charset": "utf-8",
        "Accept-Language": "en",
    }


def build_http_client(
    titles: TitleConfig,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> httpx.AsyncClient:
    """Create the shared async HTTP client.

    Timeouts are left to the per-message deadline, so the client itself has
    none. ``transport`` lets tests plug in ``httpx.MockTransport``.
    """

    logging.getLogger(__name__).debug("Initializing HTTP client")

    return httpx.AsyncClient(
        headers=request_headers(titles),
        follow_redirects=True,
        max_redirects=titles.max_redirects,
        timeout=None,
        transport=transport,
    )
