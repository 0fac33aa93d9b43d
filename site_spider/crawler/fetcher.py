# site_spider/crawler/fetcher.py
"""
Fetcher module: retrieves page bodies over HTTP and maps every failure to a
typed :class:`~site_spider.errors.FetchError`.

Redirects are followed by aiohttp; the returned :class:`PageBody` carries the
URL the body was finally served from, which is the base for its links.
"""
from __future__ import annotations

import asyncio
from typing import Optional, Protocol, Sequence

from aiohttp import (
    ClientConnectionError,
    ClientError,
    ClientPayloadError,
    ClientResponseError,
    ClientSession,
)

from site_spider.config import CrawlerConfig
from site_spider.crawler.models import PageBody
from site_spider.errors import (
    ConnectionFailed,
    FetchError,
    FetchTimeout,
    HTTPStatusError,
    MalformedResponse,
)
from site_spider.logger import logger

__all__ = ("Fetcher", "HttpFetcher", "RETRY_STATUS")

RETRY_STATUS: Sequence[int] = tuple(range(500, 600)) + (429,)
_TEXT_TYPES = ("text/", "application/xhtml", "application/xml")


class Fetcher(Protocol):
    async def fetch(self, url: str) -> PageBody:
        """Return the page at *url* (final URL and text) or raise FetchError."""
        ...


class HttpFetcher:
    """aiohttp fetcher with an optional bounded retry on 5xx/429 and connection errors."""

    def __init__(
        self,
        session: ClientSession,
        config: CrawlerConfig,
        retry_status: Sequence[int] = RETRY_STATUS,
        backoff_base: float = 1.0,
    ) -> None:
        self.session = session
        self.config = config
        self._retry_status = retry_status
        self._backoff_base = backoff_base

    async def fetch(self, url: str) -> PageBody:
        attempts = 0
        while True:
            try:
                return await self._get(url)
            except (HTTPStatusError, ConnectionFailed) as exc:
                retryable = not isinstance(exc, HTTPStatusError) or exc.status in self._retry_status
                attempts += 1
                if not retryable or attempts > self.config.retry_times:
                    raise
                # exponential backoff, cap at 60s
                backoff = min(self._backoff_base * 2 ** (attempts - 1), 60)
                logger.debug("Retry %d/%d for %s after %.2f s (%s)", attempts, self.config.retry_times, url, backoff, exc)
                await asyncio.sleep(backoff)

    async def _get(self, url: str) -> PageBody:
        try:
            async with self.session.get(url, raise_for_status=False) as resp:
                if not 200 <= resp.status < 300:
                    raise HTTPStatusError(url, resp.status, resp.reason)
                mime = resp.headers.get("Content-Type", "").split(";", 1)[0].strip().lower()
                if mime and not mime.startswith(_TEXT_TYPES) and "html" not in mime:
                    # binary resources carry no links
                    logger.debug("Skipping body of %s (%s)", url, mime)
                    return PageBody(str(resp.url))
                return PageBody(str(resp.url), await resp.text(errors="replace"))
        except asyncio.TimeoutError as exc:
            raise FetchTimeout(url, f"no response within {self.config.timeout:g}s") from exc
        except ClientConnectionError as exc:
            raise ConnectionFailed(url, _describe(exc)) from exc
        except (ClientPayloadError, ClientResponseError, UnicodeDecodeError) as exc:
            raise MalformedResponse(url, _describe(exc)) from exc
        except ClientError as exc:
            raise FetchError(url, _describe(exc)) from exc


def _describe(exc: Optional[BaseException]) -> str:
    text = str(exc) if exc is not None else ""
    return text or type(exc).__name__
