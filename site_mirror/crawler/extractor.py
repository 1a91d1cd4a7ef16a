# site_mirror/crawler/extractor.py
"""
Asset extraction: stylesheets, scripts and followable links of one page.
"""
from __future__ import annotations

import asyncio
from typing import Dict, List, Optional, Protocol

from bs4 import BeautifulSoup
from bs4.element import Tag

from site_mirror.crawler.models import AssetFailure, AssetKind, PageAssets
from site_mirror.crawler.urls import LinkScope, is_prefix_match, resolve
from site_mirror.errors import FetchError, MalformedURL
from site_mirror.logger import logger

__all__ = ("TextFetcher", "extract_assets", "extract_css", "extract_js", "extract_links")


class TextFetcher(Protocol):
    async def fetch(self, url: str) -> str: ...


async def _fetch_asset(
    fetcher: TextFetcher, url: str, kind: AssetKind, failures: List[AssetFailure]
) -> Optional[str]:
    try:
        return await fetcher.fetch(url)
    except FetchError as exc:
        logger.warning("Skipping %s %s: %s", kind, url, exc.reason)
        failures.append(AssetFailure(url, kind, exc.reason))
        return None


def _resolve_asset(
    base_url: str, ref: str, kind: AssetKind, failures: List[AssetFailure]
) -> Optional[str]:
    try:
        return resolve(base_url, ref)
    except MalformedURL as exc:
        logger.warning("Skipping %s %r on %s: %s", kind, ref, base_url, exc.reason)
        failures.append(AssetFailure(ref, kind, exc.reason))
        return None


async def extract_css(
    doc: BeautifulSoup, base_url: str, fetcher: TextFetcher, failures: List[AssetFailure]
) -> str:
    """External stylesheets first, then inline <style> blocks; each followed by a newline."""
    urls: List[str] = []
    for tag in doc.find_all("link", rel="stylesheet", href=True):
        if not isinstance(tag, Tag):
            continue
        url = _resolve_asset(base_url, str(tag["href"]), "stylesheet", failures)
        if url is not None:
            urls.append(url)

    bodies = await asyncio.gather(*(_fetch_asset(fetcher, u, "stylesheet", failures) for u in urls))
    parts = [body + "\n" for body in bodies if body is not None]
    parts.extend(tag.get_text() + "\n" for tag in doc.find_all("style"))
    return "".join(parts)


async def extract_js(
    doc: BeautifulSoup, base_url: str, fetcher: TextFetcher, failures: List[AssetFailure]
) -> str:
    """Every <script> in document order: fetched body for ``src``, inline text otherwise."""
    slots: List[Optional[str]] = []
    pending: Dict[int, str] = {}
    for tag in doc.find_all("script"):
        if not isinstance(tag, Tag):
            continue
        src = tag.get("src")
        if src is None:
            slots.append(tag.get_text() + "\n")
            continue
        url = _resolve_asset(base_url, str(src), "script", failures)
        if url is not None:
            pending[len(slots)] = url
            slots.append(None)

    bodies = await asyncio.gather(*(_fetch_asset(fetcher, u, "script", failures) for u in pending.values()))
    for index, body in zip(pending, bodies):
        if body is not None:
            slots[index] = body + "\n"
    return "".join(s for s in slots if s is not None)


def extract_links(doc: BeautifulSoup, base_url: str, scope: LinkScope = is_prefix_match) -> List[str]:
    """
    Resolve every <a href> against *base_url* and keep those *scope* accepts.

    Document order, duplicates included.
    """
    links: List[str] = []
    for tag in doc.find_all("a", href=True):
        if not isinstance(tag, Tag):
            continue
        href = str(tag["href"])
        try:
            absolute = resolve(base_url, href)
        except MalformedURL as exc:
            logger.warning("Skipping link %r on %s: %s", href, base_url, exc.reason)
            continue
        if scope(absolute, base_url):
            links.append(absolute)
    return links


async def extract_assets(
    doc: BeautifulSoup,
    base_url: str,
    fetcher: TextFetcher,
    scope: LinkScope = is_prefix_match,
) -> PageAssets:
    """Collect aggregated CSS, aggregated JS and in-scope links of *doc*."""
    failures: List[AssetFailure] = []
    css = await extract_css(doc, base_url, fetcher, failures)
    js = await extract_js(doc, base_url, fetcher, failures)
    links = extract_links(doc, base_url, scope)
    return PageAssets(css=css, js=js, links=links, failures=failures)
