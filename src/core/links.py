"""Link extraction from free-form chat text (core domain)."""

from __future__ import annotations

import re
from typing import Iterator

import httpx

# Word boundaries keep trailing punctuation ("see http://x.org/a!") out of
# the match while still allowing any non-whitespace inside the link.
URL_PATTERN = re.compile(r"\b(https?://\S*)\b", re.IGNORECASE)

MAX_PORT = 65535


def find_candidate_links(text: str) -> list[str]:
    """Return URL-shaped substrings in order of appearance, duplicates kept."""

    return URL_PATTERN.findall(text)


def extract_links(text: str) -> Iterator[httpx.URL]:
    """Yield each candidate that parses as a URL.

    Candidates that fail to parse are dropped silently; malformed chat text
    is not an error.
    """

    for candidate in find_candidate_links(text):
        try:
            url = httpx.URL(candidate)
            # httpx decodes IDNA labels lazily, on first access to ``host``.
            host = url.host
        except (httpx.InvalidURL, UnicodeError):
            continue
        if not host:
            continue
        if url.port is not None and not 0 < url.port <= MAX_PORT:
            continue
        yield url
