# File: tests/test_engine.py
import asyncio

import pytest

from helpers import SEED, GraphFetcher, html
from site_spider.crawler.models import PageBody
from site_spider.engine import Engine, start_crawl


def test_engine_returns_aggregated_report(make_config):
    fetcher = GraphFetcher({SEED: html("/a", "/gone"), f"{SEED}a": html("/")})
    report = Engine(make_config(), fetcher=fetcher).start_crawl()

    assert report.seed == SEED
    assert {p["url"] for p in report.pages} == {SEED, f"{SEED}a"}
    assert [e["url"] for e in report.errors] == [f"{SEED}gone"]
    assert report.stats["visited"] == 3


@pytest.mark.asyncio()
async def test_start_crawl_streams_through_callback(make_config):
    fetcher = GraphFetcher({SEED: html("/a"), f"{SEED}a": html()})
    streamed = []
    results = await start_crawl(make_config(), on_result=lambda r: streamed.append(r.url), fetcher=fetcher)
    assert streamed == [r.url for r in results]


@pytest.mark.asyncio()
async def test_stop_after_deadline(make_config):
    # endless chain: every page links to the next one
    class Chain:
        def __init__(self):
            self.calls = 0

        async def fetch(self, url):
            self.calls += 1
            await asyncio.sleep(0.01)
            n = int(url.rsplit("/", 1)[-1] or 0)
            return PageBody(url, html(f"/{n + 1}"))

    chain = Chain()
    results = await asyncio.wait_for(
        start_crawl(make_config(concurrency=2), stop_after=0.1, fetcher=chain),
        timeout=5,
    )
    assert 1 <= len(results) == chain.calls
    assert len(results) < 100
