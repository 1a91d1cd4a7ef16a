# File: tests/test_fetcher.py
from __future__ import annotations

import pytest
from aiohttp import ClientSession, web
from site_mirror.crawler.fetcher import Fetcher
from site_mirror.errors import FetchError


def flaky_app(failures: int, calls: dict) -> web.Application:
    app = web.Application()

    async def flaky(_):
        calls["n"] += 1
        if calls["n"] <= failures:
            return web.Response(status=500)
        return web.Response(text="<h1>Recover</h1>", content_type="text/html")

    app.router.add_get("/flaky", flaky)
    return app


@pytest.mark.asyncio()
async def test_retry_on_server_error(serve, unused_tcp_port):
    calls = {"n": 0}
    async for base in serve(flaky_app(2, calls), unused_tcp_port):
        async with ClientSession() as session:
            text = await Fetcher(session, retry_times=3, backoff=0).fetch(f"{base}/flaky")
    assert text == "<h1>Recover</h1>"
    assert calls["n"] == 3


@pytest.mark.asyncio()
async def test_server_error_without_retries(serve, unused_tcp_port):
    calls = {"n": 0}
    async for base in serve(flaky_app(1, calls), unused_tcp_port):
        async with ClientSession() as session:
            with pytest.raises(FetchError) as info:
                await Fetcher(session).fetch(f"{base}/flaky")
    assert info.value.status == 500
    assert calls["n"] == 1


@pytest.mark.asyncio()
async def test_retries_exhausted(serve, unused_tcp_port):
    calls = {"n": 0}
    async for base in serve(flaky_app(5, calls), unused_tcp_port):
        async with ClientSession() as session:
            with pytest.raises(FetchError) as info:
                await Fetcher(session, retry_times=2, backoff=0).fetch(f"{base}/flaky")
    assert info.value.status == 500
    assert calls["n"] == 3


@pytest.mark.asyncio()
async def test_lenient_status_returns_body(serve, unused_tcp_port):
    app = web.Application()

    async def missing(_):
        return web.Response(status=404, text="not here")

    app.router.add_get("/missing", missing)
    async for base in serve(app, unused_tcp_port):
        async with ClientSession() as session:
            assert await Fetcher(session, strict_status=False).fetch(f"{base}/missing") == "not here"
            with pytest.raises(FetchError):
                await Fetcher(session).fetch(f"{base}/missing")


@pytest.mark.asyncio()
async def test_connection_refused(unused_tcp_port):
    async with ClientSession() as session:
        with pytest.raises(FetchError) as info:
            await Fetcher(session).fetch(f"http://127.0.0.1:{unused_tcp_port}/")
    assert info.value.status is None
