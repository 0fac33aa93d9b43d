# File: tests/conftest.py
import pytest

from helpers import SEED
from site_spider.config import CrawlerConfig


def pytest_configure(config):
    """Register custom markers so that `--strict-markers` does not fail."""
    config.addinivalue_line(
        "markers",
        "slow: marks tests as slow (deselect with '-m \"not slow\"')",
    )


@pytest.fixture()
def make_config():
    """Factory for CrawlerConfig with the example.com seed by default."""

    def _make(**overrides) -> CrawlerConfig:
        data = {"seed_url": SEED, "concurrency": 4, "timeout": 2.0}
        data.update(overrides)
        return CrawlerConfig(**data)

    return _make
