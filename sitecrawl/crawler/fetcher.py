# sitecrawl/crawler/fetcher.py
"""
Fetcher module: one HTTP GET per URL, body fully buffered.
"""
from __future__ import annotations

import asyncio

from aiohttp import ClientError, ClientSession, ClientTimeout

from sitecrawl.config import CrawlerConfig
from sitecrawl.errors import FetchError


def open_session(config: CrawlerConfig) -> ClientSession:
    """Create the shared session used by every worker of a crawl."""
    return ClientSession(
        timeout=ClientTimeout(total=config.timeout),
        headers={"User-Agent": config.user_agent},
        raise_for_status=False,
    )


class Fetcher:
    """Performs GET requests over a shared aiohttp session."""

    def __init__(self, session: ClientSession) -> None:
        self.session = session

    async def fetch(self, url: str) -> bytes:
        """
        GET *url* and return the whole response body.

        Raises FetchError on transport errors, timeouts and non-2xx statuses.
        """
        try:
            async with self.session.get(url) as resp:
                if not 200 <= resp.status < 300:
                    raise FetchError(url, f"HTTP {resp.status}")
                return await resp.read()
        except asyncio.TimeoutError as exc:
            raise FetchError(url, "timed out") from exc
        except ClientError as exc:
            raise FetchError(url, str(exc) or type(exc).__name__) from exc
