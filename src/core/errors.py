"""Error taxonomy for configuration and title resolution."""

from __future__ import annotations

from typing import Optional


class ConfigurationError(Exception):
    """Invalid startup configuration (bad target URL, missing channel)."""


class TitleError(Exception):
    """Base class for every classified title resolution failure."""


class UnsupportedContentType(TitleError):
    """The HEAD phase advertised something other than HTML."""

    def __init__(self, content_type: Optional[str]) -> None:
        super().__init__(f"unsupported content type: {content_type!r}")
        self.content_type = content_type


class NoTitle(TitleError):
    """The page has no <title> or the title is blank."""

    def __init__(self) -> None:
        super().__init__("empty or no title")


class BadStatus(TitleError):
    """The HEAD phase returned a status other than 200 or 405."""

    def __init__(self, status_code: int) -> None:
        super().__init__(f"non-OK status code: {status_code}")
        self.status_code = status_code


class NetworkFailure(TitleError):
    """Transport error or deadline expiry during either phase."""

    def __init__(self, detail: str) -> None:
        super().__init__(detail)
        self.detail = detail


# Expected outcomes for arbitrary user links; never surfaced to operators.
ROUTINE_FAILURES = (UnsupportedContentType, NoTitle)
