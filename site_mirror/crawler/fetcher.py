# site_mirror/crawler/fetcher.py
"""
Fetcher module: the HTTP capability of the mirror, with optional retry/backoff.
"""
from __future__ import annotations

import asyncio
from typing import Sequence

from aiohttp import ClientError, ClientSession

from site_mirror.errors import FetchError
from site_mirror.logger import logger

__all__ = ("Fetcher", "RETRY_STATUS")

RETRY_STATUS: Sequence[int] = tuple(range(500, 600)) + (429,)


class Fetcher:
    """Fetches page and asset bodies as text, raising FetchError on failure."""

    def __init__(
        self,
        session: ClientSession,
        *,
        strict_status: bool = True,
        retry_times: int = 0,
        retry_status: Sequence[int] = RETRY_STATUS,
        backoff: float = 1.0,
    ) -> None:
        self.session = session
        self.strict_status = strict_status
        self.retry_times = retry_times
        self._retry_status = retry_status
        self._backoff = backoff

    async def fetch(self, url: str) -> str:
        """
        Return the decoded body of *url*.

        With ``strict_status`` any non-2xx answer is a FetchError; without it
        the body is returned whatever the status.
        """
        attempts = 0
        while True:
            try:
                async with self.session.get(url) as resp:
                    status = resp.status
                    if status in self._retry_status and attempts < self.retry_times:
                        raise ClientError(f"retryable status {status}")
                    if self.strict_status and not 200 <= status < 300:
                        raise FetchError(url, f"HTTP {status}", status=status)
                    return await resp.text(errors="replace")
            except asyncio.TimeoutError as exc:
                # no retry on timeout
                raise FetchError(url, "request timed out") from exc
            except ClientError as exc:
                attempts += 1
                if attempts > self.retry_times:
                    raise FetchError(url, str(exc) or type(exc).__name__) from exc
                # exponential backoff, cap at 60s
                delay = min(self._backoff * 2 ** (attempts - 1), 60)
                logger.debug("Retry %d/%d for %s after %.2f s", attempts, self.retry_times, url, delay)
                await asyncio.sleep(delay)
