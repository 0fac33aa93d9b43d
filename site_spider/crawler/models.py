# site_spider/crawler/models.py
"""
Data models for the SiteSpider crawler.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import NewType, Optional, Tuple

from site_spider.errors import FetchError

NormalizedURL = NewType("NormalizedURL", str)


@dataclass(slots=True, frozen=True)
class PageBody:
    """Fetched page: the URL it was finally served from (after redirects) and its text."""

    url: str
    text: str = ""


@dataclass(slots=True, frozen=True)
class CrawlTask:
    """A claimed URL waiting on the frontier. Depth and parent are bookkeeping only."""

    url: NormalizedURL
    depth: int = 0
    parent: Optional[NormalizedURL] = None


@dataclass(slots=True)
class CrawlResult:
    """Outcome of visiting one page."""

    url: NormalizedURL
    depth: int = 0
    parent: Optional[NormalizedURL] = None
    links: Tuple[NormalizedURL, ...] = ()
    unresolved: Tuple[str, ...] = ()
    error: Optional[FetchError] = None
    extraction_failed: bool = field(default=False)
    final_url: Optional[NormalizedURL] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def partial(self) -> bool:
        """Page fetched, but some of its links (or the extraction itself) were lost."""
        return self.ok and (self.extraction_failed or bool(self.unresolved))

    def to_dict(self) -> dict:
        return {
            "url": self.url,
            "depth": self.depth,
            "parent": self.parent,
            "final_url": self.final_url,
            "ok": self.ok,
            "partial": self.partial,
            "links": list(self.links),
            "unresolved": list(self.unresolved),
            "error": None if self.error is None else str(self.error),
        }
