# site_spider/crawler/resolver.py
"""
URL resolution and normalization for SiteSpider.

Every URL that reaches the visited registry or the scope filter goes through
:func:`normalize_url` first, so two spellings of the same page share one key:

* scheme and host are lower-cased, default ports (80/443) are dropped;
* an internationalized host is IDNA-encoded (``bücher.de`` -> ``xn--bcher-kva.de``);
* an empty path becomes ``/`` and ``.``/``..`` segments are removed;
* the fragment is stripped, the query string is kept verbatim;
* a trailing slash is kept as written.

:func:`resolve` turns a raw ``href`` value into such a URL, using the page
it was found on as the base (RFC 3986 reference resolution via ``urljoin``).
"""
from __future__ import annotations

import re
from typing import List
from urllib.parse import urljoin, urlsplit, urlunsplit

from site_spider.crawler.models import NormalizedURL
from site_spider.errors import ResolutionError

__all__ = ("normalize_url", "resolve", "ALLOWED_SCHEMES")

ALLOWED_SCHEMES = frozenset(("http", "https"))
_DEFAULT_PORTS = {"http": 80, "https": 443}
_SCHEME_RE = re.compile(r"^([A-Za-z][A-Za-z0-9+.\-]*):")


def _remove_dot_segments(path: str) -> str:
    if not path:
        return "/"
    segments = path.split("/")
    out: List[str] = []
    for seg in segments:
        if seg == ".":
            continue
        if seg == "..":
            # never pop the leading "" that stands for the root
            if len(out) > 1:
                out.pop()
            continue
        out.append(seg)
    result = "/".join(out)
    if segments[-1] in (".", ".."):
        result += "/"
    if not result.startswith("/"):
        result = "/" + result
    return result


def normalize_url(url: str) -> NormalizedURL:
    """Canonicalize an absolute http(s) URL; raises ResolutionError otherwise."""
    raw = url.strip()
    try:
        parts = urlsplit(raw)
        port = parts.port
    except ValueError as exc:
        raise ResolutionError(url, f"unparseable URL ({exc})") from exc

    scheme = parts.scheme.lower()
    if not scheme:
        raise ResolutionError(url, "missing scheme")
    if scheme not in ALLOWED_SCHEMES:
        raise ResolutionError(url, f"unsupported scheme {scheme!r}")

    host = parts.hostname
    if not host:
        raise ResolutionError(url, "missing host")
    if not host.isascii():
        try:
            host = host.encode("idna").decode("ascii")
        except UnicodeError as exc:
            raise ResolutionError(url, f"invalid host {host!r}") from exc
    netloc = f"[{host}]" if ":" in host else host
    if port is not None and port != _DEFAULT_PORTS[scheme]:
        netloc = f"{netloc}:{port}"
    if "@" in parts.netloc:
        netloc = f"{parts.netloc.rpartition('@')[0]}@{netloc}"

    path = _remove_dot_segments(parts.path)
    return NormalizedURL(urlunsplit((scheme, netloc, path, parts.query, "")))


def resolve(base: str, raw: str) -> NormalizedURL:
    """
    Resolve *raw* (an href value) against *base* (the page it was found on).

    * ``https://host/x`` - already absolute, only re-normalized;
    * ``//host/x``       - scheme-relative, takes the base scheme;
    * ``/x``             - path-absolute on the base host;
    * ``x``, ``../x``    - relative to the directory of the base path.

    Empty links, non-http(s) schemes (``mailto:``, ``javascript:``...) and
    links without a host raise :class:`ResolutionError`.
    """
    if raw is None or not raw.strip():
        raise ResolutionError(raw or "", "empty link")
    link = raw.strip()

    match = _SCHEME_RE.match(link)
    if match:
        scheme = match.group(1).lower()
        if scheme not in ALLOWED_SCHEMES:
            raise ResolutionError(link, f"unsupported scheme {scheme!r}")
        return normalize_url(link)

    return normalize_url(urljoin(base, link))
