# site_spider/crawler/link_extractor.py
"""
Link extraction strategies for SiteSpider.

An extractor only pulls raw ``href`` values out of page text; resolving them
to absolute URLs and filtering them is the crawler's job.
"""
from __future__ import annotations

import re
from typing import List, Protocol

from bs4 import BeautifulSoup
from bs4.element import Tag

__all__ = ("LinkExtractor", "HtmlLinkExtractor", "RegexLinkExtractor", "get_extractor")


class LinkExtractor(Protocol):
    def extract_links(self, body: str) -> List[str]:
        """Return raw link strings found in *body*."""
        ...


class HtmlLinkExtractor:
    """BeautifulSoup-based extraction of ``href`` attributes, in document order."""

    TAGS = ("a", "area", "link")

    def __init__(self, parser: str = "html.parser") -> None:
        self.parser = parser

    def extract_links(self, body: str) -> List[str]:
        soup = BeautifulSoup(body, self.parser)
        links: List[str] = []
        for tag in soup.find_all(self.TAGS, href=True):
            if not isinstance(tag, Tag):
                continue
            href_val = tag.get("href")
            if not isinstance(href_val, str):
                continue
            raw = href_val.strip()
            if raw:
                links.append(raw)
        return links


class RegexLinkExtractor:
    """Pattern match on ``href="..."`` / ``href='...'``; no parsing at all."""

    _HREF_RE = re.compile(r"""href\s*=\s*(?:"([^"]*)"|'([^']*)')""", re.IGNORECASE)

    def extract_links(self, body: str) -> List[str]:
        links: List[str] = []
        for match in self._HREF_RE.finditer(body):
            raw = (match.group(1) if match.group(1) is not None else match.group(2)).strip()
            if raw:
                links.append(raw)
        return links


_EXTRACTORS = {
    "html": HtmlLinkExtractor,
    "regex": RegexLinkExtractor,
}


def get_extractor(name: str) -> LinkExtractor:
    """Build the extractor registered under *name* (``html`` or ``regex``)."""
    try:
        return _EXTRACTORS[name]()
    except KeyError:
        raise ValueError(f"unknown extractor {name!r}, expected one of {sorted(_EXTRACTORS)}") from None
