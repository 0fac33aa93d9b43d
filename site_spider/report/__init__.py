# File: site_spider/report/__init__.py
"""site_spider.report: Рендеринг результатов обхода (текст, JSON, HTML)."""

from site_spider.report.html_report import render_html
from site_spider.report.json_report import render_json
from site_spider.report.text_report import format_result

__all__ = ["render_json", "render_html", "format_result"]
