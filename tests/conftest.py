# File: tests/conftest.py
from __future__ import annotations

from collections.abc import AsyncIterator
from pathlib import Path
from typing import Callable, Dict, Optional
from urllib.parse import urldefrag

import pytest
from aiohttp import web

from site_mirror.config import MirrorConfig
from site_mirror.errors import FetchError


class FetchBudgetExceeded(Exception):
    """Raised by FakeFetcher once more fetches than allowed were made."""


class FakeFetcher:
    """
    In-memory HTTP capability: maps URLs (fragment ignored) to bodies.
    Unknown URLs fail like a 404 would.
    """

    def __init__(self, pages: Dict[str, str], budget: Optional[int] = None) -> None:
        self.pages = dict(pages)
        self.budget = budget
        self.calls: list[str] = []

    async def fetch(self, url: str) -> str:
        self.calls.append(url)
        if self.budget is not None and len(self.calls) > self.budget:
            raise FetchBudgetExceeded(url)
        try:
            return self.pages[urldefrag(url)[0]]
        except KeyError:
            raise FetchError(url, "HTTP 404", status=404) from None


@pytest.fixture()
def make_fetcher() -> Callable[..., FakeFetcher]:
    """Return the FakeFetcher constructor."""
    return FakeFetcher


@pytest.fixture()
def budget_error() -> type:
    return FetchBudgetExceeded


@pytest.fixture()
def output_dir(tmp_path: Path) -> Path:
    return tmp_path / "output"


@pytest.fixture()
def make_config(output_dir: Path) -> Callable[..., MirrorConfig]:
    """Build a MirrorConfig writing below tmp_path; keyword arguments override fields."""

    def _make(root_url: str, **kwargs) -> MirrorConfig:
        kwargs.setdefault("output_dir", output_dir)
        return MirrorConfig(root_url=root_url, **kwargs)

    return _make


async def serve_app(app: web.Application, port: int) -> AsyncIterator[str]:
    """Start *app* on *port*, yield base URL, ensure cleanup."""
    runner = web.AppRunner(app)
    await runner.setup()
    site = web.TCPSite(runner, "127.0.0.1", port)
    await site.start()
    try:
        yield f"http://127.0.0.1:{port}"
    finally:
        await runner.cleanup()


@pytest.fixture()
def serve() -> Callable[[web.Application, int], AsyncIterator[str]]:
    return serve_app
