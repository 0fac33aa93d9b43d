# File: tests/test_link_extractor.py
import pytest

from site_spider.crawler.link_extractor import (
    HtmlLinkExtractor,
    RegexLinkExtractor,
    get_extractor,
)

PAGE = """
<html>
<head><link rel="stylesheet" href="/style.css"></head>
<body>
  <a href="https://wikipedia.org">Wiki</a><a href='https://wikipedia.org/index.html'>Index</a>
  <a href="relative/page.html">rel</a>
  <a name="anchor-without-href">nothing</a>
  <a href="   ">blank</a>
  <map><area href="/area-target" alt="x"></map>
  <a href="mailto:someone@example.com">mail</a>
</body>
</html>
"""


@pytest.mark.parametrize("extractor", [HtmlLinkExtractor(), RegexLinkExtractor()])
def test_no_links(extractor):
    assert extractor.extract_links("nothing to see here") == []


@pytest.mark.parametrize("extractor", [HtmlLinkExtractor(), RegexLinkExtractor()])
def test_links_in_document_order(extractor):
    links = extractor.extract_links(PAGE)
    assert links == [
        "/style.css",
        "https://wikipedia.org",
        "https://wikipedia.org/index.html",
        "relative/page.html",
        "/area-target",
        "mailto:someone@example.com",
    ]


def test_regex_single_attribute():
    assert RegexLinkExtractor().extract_links('href="https://wikipedia.org"') == ["https://wikipedia.org"]


def test_regex_multiple_links_on_one_line():
    text = '<a href="https://wikipedia.org"/><a HREF = "https://wikipedia.org/index.html"/>'
    assert RegexLinkExtractor().extract_links(text) == [
        "https://wikipedia.org",
        "https://wikipedia.org/index.html",
    ]


def test_html_extractor_ignores_href_text_outside_tags():
    text = '<p>write href="/not-a-link" in your markup</p><a href="/real">x</a>'
    assert HtmlLinkExtractor().extract_links(text) == ["/real"]


def test_get_extractor():
    assert isinstance(get_extractor("html"), HtmlLinkExtractor)
    assert isinstance(get_extractor("regex"), RegexLinkExtractor)
    with pytest.raises(ValueError):
        get_extractor("dom")
