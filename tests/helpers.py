# File: tests/helpers.py
"""Shared test doubles: in-memory fetcher, page builder, local aiohttp server."""
from __future__ import annotations

import asyncio
from collections import Counter
from contextlib import asynccontextmanager
from typing import AsyncIterator, Dict, Union

from aiohttp import web

from site_spider.crawler.models import PageBody
from site_spider.errors import HTTPStatusError

SEED = "https://example.com/"


def html(*hrefs: str) -> str:
    """Minimal page body with one anchor per href."""
    anchors = "".join(f'<a href="{h}">{h}</a>' for h in hrefs)
    return f"<html><body>{anchors}</body></html>"


class GraphFetcher:
    """
    In-memory fetcher over a url -> body mapping.

    A string value is served from the requested URL; a PageBody value stands
    for a redirect to its own URL. An exception instance is raised instead of
    returned; unknown URLs raise a 404 HTTPStatusError.
    """

    def __init__(self, pages: Dict[str, Union[str, PageBody, BaseException]], delay: float = 0.0) -> None:
        self.pages = pages
        self.delay = delay
        self.calls: Counter[str] = Counter()
        self.in_flight = 0
        self.max_in_flight = 0

    async def fetch(self, url: str) -> PageBody:
        self.calls[url] += 1
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            await asyncio.sleep(self.delay)
            page = self.pages.get(url)
            if page is None:
                raise HTTPStatusError(url, 404, "Not Found")
            if isinstance(page, BaseException):
                raise page
            if isinstance(page, PageBody):
                return page
            return PageBody(url, page)
        finally:
            self.in_flight -= 1


@asynccontextmanager
async def serve_app(app: web.Application) -> AsyncIterator[str]:
    """Start *app* on a free local port, yield its base URL, ensure cleanup."""
    runner = web.AppRunner(app)
    await runner.setup()
    site = web.TCPSite(runner, "127.0.0.1", 0)
    await site.start()
    try:
        port = runner.addresses[0][1]
        yield f"http://127.0.0.1:{port}"
    finally:
        await runner.cleanup()
