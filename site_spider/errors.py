# site_spider/errors.py
"""
Exception hierarchy for SiteSpider.

Link-level and page-level failures stay local to the task that produced them;
only configuration errors raised before the crawl starts are fatal.
"""
from __future__ import annotations

from typing import Optional

__all__ = (
    "SiteSpiderError",
    "ResolutionError",
    "InvalidTransition",
    "FetchError",
    "FetchTimeout",
    "ConnectionFailed",
    "HTTPStatusError",
    "MalformedResponse",
    "OffsiteRedirect",
)


class SiteSpiderError(Exception):
    """Base class for all project errors."""


class ResolutionError(SiteSpiderError, ValueError):
    """A raw link could not be turned into an absolute http(s) URL."""

    def __init__(self, raw: str, reason: str) -> None:
        self.raw = raw
        self.reason = reason
        super().__init__(f"{reason}: {raw!r}")


class InvalidTransition(SiteSpiderError, RuntimeError):
    """Visited registry state change outside unclaimed -> claimed -> done."""


class FetchError(SiteSpiderError):
    """Network or transport failure while retrieving a page."""

    kind = "fetch"

    def __init__(self, url: str, message: str) -> None:
        self.url = url
        self.message = message
        super().__init__(message)

    def __str__(self) -> str:
        return f"{self.kind}: {self.message}"


class FetchTimeout(FetchError):
    kind = "timeout"


class ConnectionFailed(FetchError):
    kind = "connection"


class HTTPStatusError(FetchError):
    """Non-2xx response."""

    kind = "status"

    def __init__(self, url: str, status: int, reason: Optional[str] = None) -> None:
        self.status = status
        super().__init__(url, f"HTTP {status}" + (f" {reason}" if reason else ""))


class MalformedResponse(FetchError):
    kind = "malformed"


class OffsiteRedirect(FetchError):
    """The server redirected the page to a URL outside the crawl boundary."""

    kind = "redirect"

    def __init__(self, url: str, location: str) -> None:
        self.location = location
        super().__init__(url, f"redirected out of scope to {location}")
