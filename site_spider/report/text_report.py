# site_spider/report/text_report.py
"""Plain-text rendering of a single crawl result, one block per page."""
from __future__ import annotations

from site_spider.crawler.models import CrawlResult


def format_result(result: CrawlResult) -> str:
    """
    ``url`` followed by ``  * link`` lines; failed pages get an error marker
    instead of links, partial pages a note with the number of dropped links.
    """
    if not result.ok:
        return f"{result.url}  [ERROR: {result.error}]"
    lines = [result.url]
    lines.extend(f"  * {link}" for link in result.links)
    if result.extraction_failed:
        lines.append("  ! link extraction failed")
    elif result.unresolved:
        lines.append(f"  ! {len(result.unresolved)} link(s) dropped")
    return "\n".join(lines)
