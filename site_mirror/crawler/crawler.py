# === FILE: site_mirror/crawler/crawler.py ===
from __future__ import annotations

import asyncio
import time
from pathlib import Path
from typing import List, Optional, Set, Tuple, Union

from aiohttp import ClientSession, ClientTimeout

from site_mirror.crawler.extractor import TextFetcher, extract_assets
from site_mirror.crawler.fetcher import Fetcher
from site_mirror.crawler.models import PageAssets, PageFailure, PageResult
from site_mirror.crawler.persister import write_assets, write_html
from site_mirror.crawler.urls import (
    LinkScope,
    canonical_url,
    get_scope,
    is_prefix_match,
    legacy_child_dirname,
    page_dirname,
)
from site_mirror.errors import MirrorError
from site_mirror.logger import logger
from site_mirror.parser import parse_html
from site_mirror.report import MirrorReport

__all__ = ("visit_page", "crawl_page", "MirrorCrawler")

_QueueItem = Tuple[str, Path, int]


async def visit_page(
    page_url: str,
    directory: Union[str, Path],
    fetcher: TextFetcher,
    scope: LinkScope = is_prefix_match,
) -> PageAssets:
    """
    Mirror a single page: fetch, store HTML, parse, extract, store CSS and JS.

    Nothing is written when the fetch fails. The HTML is stored before parsing.
    """
    html = await fetcher.fetch(page_url)
    write_html(directory, html)
    doc = parse_html(html, page_url)
    assets = await extract_assets(doc, page_url, fetcher, scope)
    write_assets(directory, assets.css, assets.js)
    logger.info("Found %d links on %s", len(assets.links), page_url)
    return assets


async def crawl_page(
    page_url: str,
    directory: Union[str, Path],
    fetcher: TextFetcher,
    *,
    scope: LinkScope = is_prefix_match,
    depth: int = 0,
) -> List[PageResult]:
    """
    Recursive descent: mirror *page_url*, then every extracted link in order.

    Each child lands in ``directory / legacy_child_dirname(page_url, link)``.
    There is no visited set and no depth limit, so a link cycle recurses
    without bound. Any MirrorError aborts the whole descent.
    """
    directory = Path(directory)
    assets = await visit_page(page_url, directory, fetcher, scope)
    results = [PageResult(page_url, directory, depth, assets.links, assets.failures)]
    for link in assets.links:
        child = directory / legacy_child_dirname(page_url, link)
        results.extend(await crawl_page(link, child, fetcher, scope=scope, depth=depth + 1))
    return results


class MirrorCrawler:
    """Worklist mirror with a visited set, isolated page failures and bounded concurrency."""

    def __init__(self, config, fetcher: Optional[TextFetcher] = None) -> None:
        self.config = config
        self.fetcher = fetcher
        self.scope: LinkScope = get_scope(config.scope)
        self.visited: Set[str] = set()
        self.session: Optional[ClientSession] = None
        self.logger = logger

    async def __aenter__(self) -> MirrorCrawler:
        if self.fetcher is None:
            headers = {"User-Agent": self.config.user_agent} if self.config.user_agent else None
            self.session = ClientSession(timeout=ClientTimeout(total=self.config.timeout), headers=headers)
            self.fetcher = Fetcher(
                self.session,
                strict_status=self.config.strict_status,
                retry_times=self.config.retry_times,
            )
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        if self.session and not self.session.closed:
            await self.session.close()

    @property
    def output_dir(self) -> Path:
        return Path(self.config.output_dir)

    def _require_fetcher(self) -> TextFetcher:
        if self.fetcher is None:
            raise RuntimeError("Session not initialized")
        return self.fetcher

    async def run_recursive(self) -> MirrorReport:
        """Plain recursive descent from the root; the first error propagates."""
        fetcher = self._require_fetcher()
        root = self.config.root
        self.logger.info("Mirroring (recursive): %s -> %s", root, self.output_dir)
        start = time.monotonic()
        pages = await crawl_page(root, self.output_dir, fetcher, scope=self.scope)
        report = MirrorReport(root, self.output_dir, pages=pages, duration=time.monotonic() - start)
        self.logger.info("Done: %d pages in %.2f s", len(report.pages), report.duration)
        return report

    async def run(self) -> MirrorReport:
        """Mirror every reachable in-scope page once; failed pages are reported, not raised."""
        self._require_fetcher()
        root = canonical_url(self.config.root)
        self.logger.info("Mirroring: %s -> %s", root, self.output_dir)
        start = time.monotonic()
        report = MirrorReport(root, self.output_dir)
        queue: asyncio.Queue[_QueueItem] = asyncio.Queue()
        self.visited.add(root)
        await queue.put((root, self.output_dir, 0))
        workers = [asyncio.create_task(self._worker(queue, report)) for _ in range(self.config.concurrency)]
        await queue.join()
        for w in workers:
            w.cancel()
        await asyncio.gather(*workers, return_exceptions=True)
        report.duration = time.monotonic() - start
        self.logger.info(
            "Done: %d pages, %d failed, %d assets skipped in %.2f s",
            len(report.pages), len(report.failures), report.asset_failure_count, report.duration,
        )
        return report

    async def _worker(self, queue: asyncio.Queue[_QueueItem], report: MirrorReport) -> None:
        while True:
            try:
                url, directory, depth = await queue.get()
            except asyncio.CancelledError:
                break
            try:
                assets = await visit_page(url, directory, self.fetcher, self.scope)
            except MirrorError as exc:
                self.logger.error("%s", exc)
                report.failures.append(PageFailure(url, directory, type(exc).__name__, str(exc)))
            except Exception as exc:
                self.logger.exception("Unexpected error on %s", url)
                report.failures.append(PageFailure(url, directory, type(exc).__name__, str(exc)))
            else:
                report.pages.append(PageResult(url, directory, depth, assets.links, assets.failures))
                self._enqueue_links(queue, url, directory, depth, assets.links)
            finally:
                queue.task_done()

    def _enqueue_links(
        self,
        queue: asyncio.Queue[_QueueItem],
        page_url: str,
        directory: Path,
        depth: int,
        links: List[str],
    ) -> None:
        max_depth = self.config.max_depth
        max_pages = self.config.max_pages
        if max_depth is not None and depth >= max_depth:
            return
        for link in links:
            key = canonical_url(link)
            if key in self.visited:
                continue
            if max_pages is not None and len(self.visited) >= max_pages:
                self.logger.debug("Page limit %d reached, not following %s", max_pages, key)
                return
            self.visited.add(key)
            queue.put_nowait((key, self.child_directory(page_url, directory, key), depth + 1))

    def child_directory(self, page_url: str, directory: Path, link: str) -> Path:
        """Where *link*, found on *page_url* stored in *directory*, is stored."""
        if self.config.naming == "relative":
            return directory / legacy_child_dirname(page_url, link)
        return self.output_dir / page_dirname(link)
