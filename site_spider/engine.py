# File: site_spider/engine.py
"""site_spider.engine: Запуск обхода и агрегация результатов для CLI и тестов."""

from __future__ import annotations

import asyncio
from typing import Callable, List, Optional

from site_spider.aggregator import CrawlReport, aggregate_results
from site_spider.config import CrawlerConfig, load_config
from site_spider.crawler.crawler import AsyncCrawler
from site_spider.crawler.fetcher import Fetcher
from site_spider.crawler.models import CrawlResult
from site_spider.logger import logger

__all__ = ["Engine", "start_crawl"]


async def start_crawl(
    cfg: CrawlerConfig,
    *,
    stop_after: Optional[float] = None,
    on_result: Optional[Callable[[CrawlResult], None]] = None,
    fetcher: Optional[Fetcher] = None,
) -> List[CrawlResult]:
    """
    Запускает AsyncCrawler в контексте и возвращает список CrawlResult.

    Parameters
    ----------
    cfg : CrawlerConfig
        Конфигурация обхода.
    stop_after : float, optional
        Через сколько секунд попросить краулер остановиться (мягко: текущие
        страницы дорабатываются, новые ссылки не берутся).
    on_result : callable, optional
        Вызывается для каждой страницы сразу по завершении.
    fetcher : Fetcher, optional
        Подмена сетевого слоя (для тестов).
    """
    async with AsyncCrawler(cfg, fetcher=fetcher, on_result=on_result) as crawler:
        deadline = None
        if stop_after is not None:
            deadline = asyncio.get_running_loop().call_later(stop_after, crawler.stop)
        try:
            return await crawler.crawl()
        finally:
            if deadline is not None:
                deadline.cancel()


class Engine:
    """Фасад: загрузка конфига, синхронный запуск обхода и агрегация результатов."""

    @staticmethod
    def load_config(path: Optional[str], **overrides) -> CrawlerConfig:
        return load_config(path, **overrides)

    def __init__(self, config: CrawlerConfig, fetcher: Optional[Fetcher] = None) -> None:
        self.config = config
        self.fetcher = fetcher

    def start_crawl(self, stop_after: Optional[float] = None) -> CrawlReport:
        """Запускает обход в новом event loop и возвращает агрегированный отчёт."""
        logger.info("Starting crawl…")
        try:
            results = asyncio.run(start_crawl(self.config, stop_after=stop_after, fetcher=self.fetcher))
        except Exception as exc:
            logger.error("Crawl failed: %s", exc)
            raise
        return aggregate_results(results, seed=str(self.config.seed_url))
