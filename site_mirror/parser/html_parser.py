# === FILE: site_mirror/parser/html_parser.py ===
"""HTML parsing for SiteMirror.

Thin wrapper over :class:`bs4.BeautifulSoup` that turns any parser failure into
:class:`~site_mirror.errors.ParseError` naming the page it came from. The
returned soup is the queryable document every other component works on.
"""
from __future__ import annotations

from collections.abc import Sequence

from bs4 import BeautifulSoup

from site_mirror.errors import ParseError

__all__: Sequence[str] = ("parse_html",)

_FEATURES = "html.parser"


def parse_html(html: str, url: str) -> BeautifulSoup:
    """Parse *html* fetched from *url* into a document."""
    try:
        return BeautifulSoup(html, _FEATURES)
    except Exception as exc:  # html.parser may raise AssertionError and friends
        raise ParseError(url, str(exc) or type(exc).__name__) from exc
