# === FILE: site_spider/crawler/crawler.py ===
from __future__ import annotations

import asyncio
import enum
import logging
import time
from typing import AsyncIterator, Callable, List, Optional, Tuple

from aiohttp import ClientSession, ClientTimeout, TCPConnector

from site_spider.config import CrawlerConfig
from site_spider.crawler.fetcher import Fetcher, HttpFetcher
from site_spider.crawler.link_extractor import LinkExtractor, get_extractor
from site_spider.crawler.models import CrawlResult, CrawlTask, NormalizedURL, PageBody
from site_spider.crawler.registry import VisitedRegistry
from site_spider.crawler.resolver import normalize_url, resolve
from site_spider.crawler.scope import ScopeBoundary, in_scope
from site_spider.errors import FetchError, MalformedResponse, OffsiteRedirect, ResolutionError

__all__ = ("AsyncCrawler", "CrawlState")

ResultCallback = Callable[[CrawlResult], None]


class CrawlState(enum.Enum):
    IDLE = "idle"
    RUNNING = "running"
    DRAINING = "draining"
    TERMINATED = "terminated"


class AsyncCrawler:
    """
    Асинхронный краулер: обход в пределах одного сайта пулом воркеров.

    The frontier is an ``asyncio.Queue`` consumed by ``config.concurrency``
    workers. A worker puts the children of a page on the queue before it
    calls ``task_done()`` for the page itself, so ``queue.join()`` returns
    only when the frontier is empty and no page is in flight.
    """

    def __init__(
        self,
        config: CrawlerConfig,
        fetcher: Optional[Fetcher] = None,
        extractor: Optional[LinkExtractor] = None,
        on_result: Optional[ResultCallback] = None,
    ) -> None:
        self.config = config
        # an unusable seed aborts here, before any worker exists
        self.seed: NormalizedURL = normalize_url(str(config.seed_url))
        self.boundary = ScopeBoundary.from_url(self.seed)
        self.concurrency: int = config.concurrency
        self.fetcher = fetcher
        self.extractor: LinkExtractor = extractor or get_extractor(config.extractor)
        self.on_result = on_result
        self.registry = VisitedRegistry()
        self.state = CrawlState.IDLE
        self.abandoned = 0
        self.session: Optional[ClientSession] = None
        self.logger = logging.getLogger("SiteSpider")
        self._stop = asyncio.Event()

    async def __aenter__(self) -> AsyncCrawler:
        if self.fetcher is None:
            self.session = ClientSession(
                timeout=ClientTimeout(total=self.config.timeout),
                headers={"User-Agent": self.config.user_agent},
                connector=TCPConnector(limit=self.concurrency),
                raise_for_status=False,
            )
            self.fetcher = HttpFetcher(self.session, self.config)
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        if self.session and not self.session.closed:
            await self.session.close()

    # ------------------------------------------------------------------ #
    # Public API
    # ------------------------------------------------------------------ #

    def stop(self) -> None:
        """Cooperative shutdown: finish current pages, claim nothing new."""
        if not self._stop.is_set():
            self.logger.info("Остановка обхода: %d страниц в работе", self.registry.in_flight)
            self._stop.set()

    @property
    def stopping(self) -> bool:
        return self._stop.is_set()

    async def crawl(self) -> List[CrawlResult]:
        return [result async for result in self.stream()]

    async def stream(self) -> AsyncIterator[CrawlResult]:
        """Yield results as pages complete."""
        self._check_ready()
        out: asyncio.Queue[Optional[CrawlResult]] = asyncio.Queue()
        runner = asyncio.create_task(self._run(out.put_nowait))
        runner.add_done_callback(lambda _: out.put_nowait(None))
        try:
            while True:
                result = await out.get()
                if result is None:
                    break
                yield result
            await runner
        finally:
            if not runner.done():
                self.stop()
                await runner

    # ------------------------------------------------------------------ #
    # Orchestration
    # ------------------------------------------------------------------ #

    def _check_ready(self) -> None:
        if self.state is not CrawlState.IDLE:
            raise RuntimeError(f"crawler already used (state: {self.state.value})")
        if self.fetcher is None:
            raise RuntimeError("Fetcher not initialized, use 'async with AsyncCrawler(...)'")

    async def _run(self, sink: ResultCallback) -> None:
        self.state = CrawlState.RUNNING
        self.logger.info("Старт обхода: %s (воркеров: %d)", self.seed, self.concurrency)
        start = time.monotonic()
        emitted = 0

        def publish(result: CrawlResult) -> None:
            nonlocal emitted
            emitted += 1
            if self.on_result is not None:
                self.on_result(result)
            sink(result)

        queue: asyncio.Queue[CrawlTask] = asyncio.Queue()
        self.registry.try_claim(self.seed)
        queue.put_nowait(CrawlTask(self.seed))

        workers = [
            asyncio.create_task(self._worker(queue, publish), name=f"site-spider-worker-{i}")
            for i in range(self.concurrency)
        ]
        joiner = asyncio.create_task(queue.join())
        try:
            # workers only return early when something inside them blew up
            await asyncio.wait([joiner, *workers], return_when=asyncio.FIRST_COMPLETED)
        finally:
            self.state = CrawlState.DRAINING
            joiner.cancel()
            for w in workers:
                w.cancel()
            outcomes = await asyncio.gather(*workers, return_exceptions=True)
            self._release_pending(queue)
            self.state = CrawlState.TERMINATED

        for outcome in outcomes:
            if isinstance(outcome, Exception):
                raise outcome

        duration = time.monotonic() - start
        self.logger.info(
            "Завершено: %d страниц за %.2f с (%.2f стр/с)",
            emitted, duration, emitted / duration if duration else 0,
        )
        if self.abandoned:
            self.logger.info("Не обработано после остановки: %d", self.abandoned)

    async def _worker(self, queue: asyncio.Queue[CrawlTask], publish: ResultCallback) -> None:
        while True:
            task = await queue.get()
            try:
                if self._stop.is_set():
                    self._abandon(task)
                    continue
                result = await self._visit(task, queue)
                publish(result)
            finally:
                queue.task_done()

    def _release_pending(self, queue: asyncio.Queue[CrawlTask]) -> None:
        while not queue.empty():
            self._abandon(queue.get_nowait())
            queue.task_done()

    def _abandon(self, task: CrawlTask) -> None:
        self.registry.mark_done(task.url)
        self.abandoned += 1
        self.logger.debug("Skipped %s (crawl stopping)", task.url)

    # ------------------------------------------------------------------ #
    # One page
    # ------------------------------------------------------------------ #

    async def _visit(self, task: CrawlTask, queue: asyncio.Queue[CrawlTask]) -> CrawlResult:
        result = CrawlResult(url=task.url, depth=task.depth, parent=task.parent)
        try:
            self.logger.debug("Fetching %s (depth %d)", task.url, task.depth)
            try:
                page = await self.fetcher.fetch(task.url)
            except FetchError as exc:
                self.logger.warning("Failed %s: %s", task.url, exc)
                result.error = exc
                return result
            except Exception as exc:
                self.logger.exception("Fetcher crashed on %s", task.url)
                result.error = FetchError(task.url, f"{type(exc).__name__}: {exc}")
                return result

            base = self._landing_url(task, page, result)
            if base is None:
                return result

            raw_links = self._extract(base, page.text, result)
            links, unresolved = self._resolve_links(base, raw_links)
            result.links = tuple(links)
            result.unresolved = tuple(unresolved)

            if self.config.max_depth is None or task.depth < self.config.max_depth:
                for link in links:
                    self._admit(link, task, queue)
            return result
        finally:
            self.registry.mark_done(task.url)

    def _landing_url(self, task: CrawlTask, page: PageBody, result: CrawlResult) -> Optional[NormalizedURL]:
        """
        URL the page was actually served from, used as the base for its links.

        None (with ``result.error`` set) when a redirect left the crawl boundary.
        """
        try:
            landed = normalize_url(page.url)
        except ResolutionError as exc:
            self.logger.warning("Failed %s: unusable final URL %r", task.url, page.url)
            result.error = MalformedResponse(task.url, f"unusable final URL ({exc.reason})")
            return None
        if landed == task.url:
            return landed

        result.final_url = landed
        if not in_scope(self.boundary, landed):
            result.error = OffsiteRedirect(task.url, landed)
            self.logger.warning("Failed %s: %s", task.url, result.error)
            return None
        # the redirect target counts as visited, later links to it are not refetched
        if self.registry.try_claim(landed):
            self.registry.mark_done(landed)
        self.logger.debug("Redirected %s -> %s", task.url, landed)
        return landed

    def _extract(self, url: str, body: str, result: CrawlResult) -> List[str]:
        try:
            return list(self.extractor.extract_links(body))
        except Exception as exc:
            self.logger.warning("Link extraction failed on %s: %s", url, exc)
            result.extraction_failed = True
            return []

    def _resolve_links(self, base: str, raw_links: List[str]) -> Tuple[List[NormalizedURL], List[str]]:
        links: List[NormalizedURL] = []
        seen = set()
        unresolved: List[str] = []
        for raw in raw_links:
            try:
                url = resolve(base, raw)
            except ResolutionError as exc:
                self.logger.debug("Dropped link on %s: %s", base, exc)
                unresolved.append(raw)
                continue
            if not in_scope(self.boundary, url):
                self.logger.debug("Out of scope: %s", url)
                continue
            if url not in seen:
                seen.add(url)
                links.append(url)
        return links, unresolved

    def _admit(self, link: NormalizedURL, parent: CrawlTask, queue: asyncio.Queue[CrawlTask]) -> None:
        if self._stop.is_set():
            return
        if self.config.max_pages is not None and self.registry.claimed_total >= self.config.max_pages:
            return
        if self.registry.try_claim(link):
            queue.put_nowait(CrawlTask(link, parent.depth + 1, parent.url))
