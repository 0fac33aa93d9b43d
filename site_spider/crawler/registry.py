# site_spider/crawler/registry.py
"""
Visited registry: the single synchronization point of a crawl run.

Each normalized URL moves through ``UNCLAIMED -> CLAIMED -> DONE`` exactly
once. The check and the insert of :meth:`VisitedRegistry.try_claim` happen
under one lock acquisition, so concurrent discoverers of the same link can
never both win the claim.
"""
from __future__ import annotations

import enum
import threading
from typing import Dict

from site_spider.crawler.models import NormalizedURL
from site_spider.errors import InvalidTransition

__all__ = ("ClaimState", "VisitedRegistry")


class ClaimState(enum.Enum):
    UNCLAIMED = "unclaimed"
    CLAIMED = "claimed"
    DONE = "done"


class VisitedRegistry:
    """Mutex-guarded map of URL -> ClaimState, created once per run."""

    def __init__(self) -> None:
        self._states: Dict[str, ClaimState] = {}
        self._lock = threading.Lock()
        self._claimed_total = 0
        self._done_total = 0

    def try_claim(self, url: NormalizedURL) -> bool:
        """Reserve *url* for exactly one worker. False if it was seen before."""
        with self._lock:
            if url in self._states:
                return False
            self._states[url] = ClaimState.CLAIMED
            self._claimed_total += 1
            return True

    def mark_done(self, url: NormalizedURL) -> None:
        """Close the claim on *url*; done is terminal."""
        with self._lock:
            state = self._states.get(url, ClaimState.UNCLAIMED)
            if state is not ClaimState.CLAIMED:
                raise InvalidTransition(f"cannot mark {url} done from state {state.value}")
            self._states[url] = ClaimState.DONE
            self._done_total += 1

    def state(self, url: NormalizedURL) -> ClaimState:
        with self._lock:
            return self._states.get(url, ClaimState.UNCLAIMED)

    @property
    def claimed_total(self) -> int:
        """Number of successful claims so far (claimed or done)."""
        return self._claimed_total

    @property
    def in_flight(self) -> int:
        """Claimed but not yet done."""
        with self._lock:
            return self._claimed_total - self._done_total

    def __contains__(self, url: object) -> bool:
        with self._lock:
            return url in self._states

    def __len__(self) -> int:
        return self._claimed_total
