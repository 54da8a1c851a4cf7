# File: tests/conftest.py
import asyncio
import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Dict, List, Optional, Union

import pytest
from aiohttp import web
from aiohttp.test_utils import unused_port

from sitecrawl.errors import FetchError
from sitecrawl.logger import LOGGER_NAME

Entry = Union[str, int]


def html(*hrefs: str) -> str:
    """Build a minimal document whose body links to *hrefs*."""
    anchors = "".join(f'<a href="{h}">{h}</a>' for h in hrefs)
    return f"<html><head><title>t</title></head><body>{anchors}</body></html>"


class FakeFetcher:
    """
    In-memory fetcher keyed by canonical URL.

    Records every call and the peak number of concurrent fetches. A missing
    URL raises FetchError; an Exception value is raised as is.
    """

    def __init__(
        self,
        pages: Dict[str, Union[str, Exception]],
        delays: Optional[Dict[str, float]] = None,
        default_delay: float = 0.01,
    ) -> None:
        self.pages = pages
        self.delays = delays or {}
        self.default_delay = default_delay
        self.calls: List[str] = []
        self.active = 0
        self.peak = 0

    async def fetch(self, url: str) -> bytes:
        self.calls.append(url)
        self.active += 1
        self.peak = max(self.peak, self.active)
        try:
            await asyncio.sleep(self.delays.get(url, self.default_delay))
            entry = self.pages.get(url)
            if entry is None:
                raise FetchError(url, "HTTP 404")
            if isinstance(entry, Exception):
                raise entry
            return entry.encode("utf-8")
        finally:
            self.active -= 1


def make_site(pages: Dict[str, Entry]) -> web.Application:
    """aiohttp app serving *pages* (path -> HTML text or bare status code)."""
    app = web.Application()

    async def handle(request: web.Request) -> web.Response:
        entry = pages.get(request.path)
        if entry is None:
            raise web.HTTPNotFound()
        if isinstance(entry, int):
            return web.Response(status=entry)
        return web.Response(text=entry, content_type="text/html")

    app.router.add_get("/{tail:.*}", handle)
    return app


@asynccontextmanager
async def _serve_app(app: web.Application) -> AsyncIterator[str]:
    """Start *app* on a free port, yield base URL, ensure cleanup."""
    port = unused_port()
    runner = web.AppRunner(app)
    await runner.setup()
    site = web.TCPSite(runner, "127.0.0.1", port)
    await site.start()
    try:
        yield f"http://127.0.0.1:{port}"
    finally:
        await runner.cleanup()


@pytest.fixture()
def serve_site():
    """Return ``serve(pages)``, an async context manager yielding the base URL."""
    return lambda pages: _serve_app(make_site(pages))


@pytest.fixture()
def crawl_log(caplog):
    """caplog wired to the project logger, which does not propagate."""
    lg = logging.getLogger(LOGGER_NAME)
    lg.addHandler(caplog.handler)
    try:
        yield caplog
    finally:
        lg.removeHandler(caplog.handler)
