# site_spider/crawler/__init__.py
"""Crawl engine: resolver, scope filter, visited registry and orchestrator."""
from site_spider.crawler.crawler import AsyncCrawler, CrawlState
from site_spider.crawler.fetcher import Fetcher, HttpFetcher
from site_spider.crawler.link_extractor import HtmlLinkExtractor, LinkExtractor, RegexLinkExtractor
from site_spider.crawler.models import CrawlResult, CrawlTask, NormalizedURL, PageBody
from site_spider.crawler.registry import ClaimState, VisitedRegistry
from site_spider.crawler.resolver import normalize_url, resolve
from site_spider.crawler.scope import ScopeBoundary, in_scope

__all__ = [
    "AsyncCrawler",
    "CrawlState",
    "Fetcher",
    "HttpFetcher",
    "LinkExtractor",
    "HtmlLinkExtractor",
    "RegexLinkExtractor",
    "CrawlResult",
    "CrawlTask",
    "NormalizedURL",
    "PageBody",
    "ClaimState",
    "VisitedRegistry",
    "normalize_url",
    "resolve",
    "ScopeBoundary",
    "in_scope",
]
