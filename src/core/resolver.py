"""Two-phase title resolution (HEAD, then GET) for a single link.

The HEAD phase rejects non-HTML targets before any body is downloaded, so
images, videos and archives that happen to be linked in chat cost one small
request. Only when the server advertises HTML (or refuses HEAD with 405) is
the page fetched and its first ``<title>`` extracted.

Both phases share the caller's deadline. Nothing is retried.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Optional

import httpx
from bs4 import BeautifulSoup

from core.deadline import Deadline
from core.errors import BadStatus, NetworkFailure, NoTitle, UnsupportedContentType

LOGGER = logging.getLogger(__name__)

HTML_MEDIA_TYPE = "text/html"

# 405 is tolerated for servers that reject HEAD but serve GET.
ACCEPTED_HEAD_STATUSES = frozenset({200, 405})


def is_html_content_type(content_type: Optional[str]) -> bool:
    """Return True for ``text/html`` or ``text/html;<params>``.

    The comparison is case-sensitive on the header value as received.
    """

    if content_type is None:
        return False
    return content_type == HTML_MEDIA_TYPE or content_type.startswith(f"{HTML_MEDIA_TYPE};")


def extract_title(html: bytes) -> str:
    """Return the trimmed text of the first <title> element, or ``""``."""

    soup = BeautifulSoup(html, "html.parser")
    title = soup.find("title")
    if title is None:
        return ""
    return title.get_text().strip()


class TitleResolver:
    """Resolve page titles through a shared ``httpx.AsyncClient``."""

    def __init__(self, client: httpx.AsyncClient) -> None:
        self._client = client

    async def resolve(self, url: httpx.URL, deadline: Deadline) -> str:
        """Return the page title for *url* or raise a ``TitleError``."""

        head = await self._request("HEAD", url, deadline)
        content_type = head.headers.get("Content-Type")
        if not is_html_content_type(content_type):
            raise UnsupportedContentType(content_type)
        if head.status_code not in ACCEPTED_HEAD_STATUSES:
            raise BadStatus(head.status_code)

        page = await self._request("GET", url, deadline)
        title = extract_title(page.content)
        if not title:
            raise NoTitle()
        return title

    async def _request(self, method: str, url: httpx.URL, deadline: Deadline) -> httpx.Response:
        remaining = deadline.remaining()
        if remaining <= 0:
            raise NetworkFailure(f"{method} {url}: deadline exceeded")

        LOGGER.debug("%s %s (%.1fs left)", method, url, remaining)
        try:
            return await asyncio.wait_for(self._client.request(method, url), timeout=remaining)
        except asyncio.TimeoutError as e:
            raise NetworkFailure(f"{method} {url}: deadline exceeded") from e
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            raise NetworkFailure(f"{method} {url}: {e}") from e
