# File: tests/test_report.py
import json

from site_spider.aggregator import aggregate_results
from site_spider.crawler.models import CrawlResult
from site_spider.errors import ConnectionFailed, HTTPStatusError
from site_spider.report.html_report import render_html
from site_spider.report.json_report import render_json
from site_spider.report.text_report import format_result

ROOT = "https://example.com/"


def _results():
    return [
        CrawlResult(ROOT, links=(f"{ROOT}a", f"{ROOT}b"), unresolved=("mailto:x@y.z",)),
        CrawlResult(f"{ROOT}a", depth=1, parent=ROOT, links=(f"{ROOT}b",)),
        CrawlResult(f"{ROOT}b", depth=1, parent=ROOT, error=HTTPStatusError(f"{ROOT}b", 500, "Server Error")),
        CrawlResult(f"{ROOT}c", depth=1, parent=ROOT, error=ConnectionFailed(f"{ROOT}c", "refused")),
    ]


def test_aggregate_results():
    report = aggregate_results(_results(), seed=ROOT)
    assert [p["url"] for p in report.pages] == [ROOT, f"{ROOT}a"]
    assert report.pages[0]["partial"] is True
    assert report.errors[0] == {"url": f"{ROOT}b", "parent": ROOT, "kind": "status", "cause": "HTTP 500 Server Error"}
    assert report.errors[1]["kind"] == "connection"
    assert report.stats == {"visited": 4, "succeeded": 2, "failed": 2, "partial": 1, "distinct_links": 2}
    assert json.loads(report.json())["seed"] == ROOT


def test_format_result_success_and_error():
    ok, _, failed, _ = _results()
    assert format_result(ok).splitlines() == [
        ROOT,
        f"  * {ROOT}a",
        f"  * {ROOT}b",
        "  ! 1 link(s) dropped",
    ]
    assert format_result(failed) == f"{ROOT}b  [ERROR: status: HTTP 500 Server Error]"


def test_format_result_extraction_failure():
    res = CrawlResult(ROOT, extraction_failed=True)
    assert format_result(res) == f"{ROOT}\n  ! link extraction failed"


def test_render_json(tmp_path):
    out = render_json(aggregate_results(_results(), seed=ROOT), tmp_path / "nested" / "report.json")
    data = json.loads(out.read_text(encoding="utf-8"))
    assert data["stats"]["visited"] == 4
    assert data["pages"][1]["parent"] == ROOT


def test_render_html_default_template(tmp_path):
    out = render_html(aggregate_results(_results(), seed=ROOT), None, tmp_path / "report.html")
    text = out.read_text(encoding="utf-8")
    assert "<h1>SiteSpider report</h1>" in text
    assert "HTTP 500 Server Error" in text
    assert f"{ROOT}a" in text


def test_render_html_custom_template(tmp_path):
    tpl = tmp_path / "tpl"
    tpl.mkdir()
    (tpl / "report.html.j2").write_text("{{ stats.visited }} pages from {{ seed }}", encoding="utf-8")
    out = render_html(aggregate_results(_results(), seed=ROOT), tpl, tmp_path / "r.html")
    assert out.read_text(encoding="utf-8") == f"4 pages from {ROOT}"
