# File: tests/test_registry.py
import asyncio
import threading

import pytest

from site_spider.crawler.registry import ClaimState, VisitedRegistry
from site_spider.errors import InvalidTransition

URL = "https://example.com/a"


def test_claim_lifecycle():
    registry = VisitedRegistry()
    assert registry.state(URL) is ClaimState.UNCLAIMED
    assert registry.try_claim(URL) is True
    assert registry.state(URL) is ClaimState.CLAIMED
    assert registry.in_flight == 1

    registry.mark_done(URL)
    assert registry.state(URL) is ClaimState.DONE
    assert registry.in_flight == 0
    assert URL in registry
    assert len(registry) == 1


def test_second_claim_fails_even_after_done():
    registry = VisitedRegistry()
    assert registry.try_claim(URL)
    assert not registry.try_claim(URL)
    registry.mark_done(URL)
    assert not registry.try_claim(URL)
    assert registry.claimed_total == 1


@pytest.mark.parametrize("prepare", ["nothing", "done"])
def test_mark_done_requires_claim(prepare):
    registry = VisitedRegistry()
    if prepare == "done":
        registry.try_claim(URL)
        registry.mark_done(URL)
    with pytest.raises(InvalidTransition):
        registry.mark_done(URL)


def test_claim_is_atomic_across_threads():
    registry = VisitedRegistry()
    urls = [f"https://example.com/p{i}" for i in range(50)]
    wins = []
    barrier = threading.Barrier(8)

    def racer():
        barrier.wait()
        won = [u for u in urls if registry.try_claim(u)]
        wins.extend(won)

    threads = [threading.Thread(target=racer) for _ in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert sorted(wins) == sorted(urls)
    assert registry.claimed_total == len(urls)


@pytest.mark.asyncio()
async def test_claim_once_across_tasks():
    registry = VisitedRegistry()

    async def discoverer():
        await asyncio.sleep(0)
        return registry.try_claim("https://example.com/hub")

    outcomes = await asyncio.gather(*(discoverer() for _ in range(100)))
    assert outcomes.count(True) == 1
