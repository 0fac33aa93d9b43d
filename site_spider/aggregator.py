# File: site_spider/aggregator.py
"""site_spider.aggregator: Сводный отчёт по результатам обхода."""

from __future__ import annotations

import json
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, Iterable, List, Optional, TypedDict

from site_spider.crawler.models import CrawlResult


class PageInfo(TypedDict):
    """Информация о посещённой странице."""

    url: str
    depth: int
    parent: Optional[str]
    final_url: Optional[str]
    links: List[str]
    unresolved: List[str]
    partial: bool


class ErrorInfo(TypedDict):
    """Страница, которую не удалось загрузить."""

    url: str
    parent: Optional[str]
    kind: str
    cause: str


@dataclass(slots=True)
class CrawlReport:
    """Результаты обхода: успешные страницы, ошибки и счётчики."""

    seed: str = ""
    pages: List[PageInfo] = field(default_factory=list)
    errors: List[ErrorInfo] = field(default_factory=list)
    stats: Dict[str, int] = field(default_factory=dict)

    def json(self, *, pretty: bool = False) -> str:
        return json.dumps(asdict(self), ensure_ascii=False, indent=2 if pretty else None)


def aggregate_results(results: Iterable[CrawlResult], seed: str = "") -> CrawlReport:
    """Собирает результаты CrawlResult в CrawlReport (в порядке завершения)."""
    report = CrawlReport(seed=seed)
    distinct_links = set()
    partial = 0
    for res in results:
        if res.ok:
            report.pages.append(
                {
                    "url": res.url,
                    "depth": res.depth,
                    "parent": res.parent,
                    "final_url": res.final_url,
                    "links": list(res.links),
                    "unresolved": list(res.unresolved),
                    "partial": res.partial,
                }
            )
            distinct_links.update(res.links)
            partial += int(res.partial)
        else:
            report.errors.append(
                {
                    "url": res.url,
                    "parent": res.parent,
                    "kind": getattr(res.error, "kind", "fetch"),
                    "cause": getattr(res.error, "message", str(res.error)),
                }
            )
    report.stats = {
        "visited": len(report.pages) + len(report.errors),
        "succeeded": len(report.pages),
        "failed": len(report.errors),
        "partial": partial,
        "distinct_links": len(distinct_links),
    }
    return report


def report_to_dict(report: CrawlReport) -> Dict[str, Any]:
    return asdict(report)


__all__ = ["CrawlReport", "PageInfo", "ErrorInfo", "aggregate_results", "report_to_dict"]
