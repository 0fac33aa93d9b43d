# site_spider/crawler/scope.py
"""
Same-site filter: keeps the crawl on the seed's scheme and host.
"""
from __future__ import annotations

from dataclasses import dataclass
from urllib.parse import urlsplit

from site_spider.crawler.models import NormalizedURL
from site_spider.crawler.resolver import normalize_url

__all__ = ("ScopeBoundary", "in_scope")


@dataclass(slots=True, frozen=True)
class ScopeBoundary:
    """Origin of the seed URL; fixed for the whole run."""

    scheme: str
    netloc: str

    @classmethod
    def from_url(cls, url: str) -> ScopeBoundary:
        parts = urlsplit(normalize_url(url))
        return cls(parts.scheme, parts.netloc)

    def __str__(self) -> str:
        return f"{self.scheme}://{self.netloc}"


def in_scope(boundary: ScopeBoundary, candidate: NormalizedURL) -> bool:
    """Exact scheme + host[:port] match. Subdomains and http/https mixes are out."""
    parts = urlsplit(candidate)
    return parts.scheme == boundary.scheme and parts.netloc == boundary.netloc
