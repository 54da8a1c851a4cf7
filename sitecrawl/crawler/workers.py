# sitecrawl/crawler/workers.py
"""
Fixed-size pool of fetch workers.

Each worker takes a URL from the dispatch queue, fetches and parses it, and
reports the outcome through the report callback. A ``None`` on the queue
tells the worker to exit.
"""
from __future__ import annotations

import asyncio
from typing import Callable, Iterable, List, Optional, Protocol, Tuple

from sitecrawl.errors import FetchError, ParseError
from sitecrawl.logger import logger
from sitecrawl.normalizer import Normalizer, normalize_url
from sitecrawl.parser.html_parser import Page

ReportFn = Callable[[str, Iterable[str], bool], None]


class SupportsFetch(Protocol):
    async def fetch(self, url: str) -> bytes: ...


class WorkerPool:
    """N concurrent tasks sharing one dispatch queue."""

    def __init__(
        self,
        size: int,
        dispatch: asyncio.Queue[Optional[str]],
        fetcher: SupportsFetch,
        report: ReportFn,
        normalizer: Normalizer = normalize_url,
    ) -> None:
        if size < 1:
            raise ValueError("size must be >= 1")
        self.size = size
        self.dispatch = dispatch
        self._fetcher = fetcher
        self._report = report
        self._normalizer = normalizer
        self._tasks: List[asyncio.Task[None]] = []

    def start(self) -> None:
        if self._tasks:
            raise RuntimeError("worker pool already started")
        self._tasks = [
            asyncio.create_task(self._worker(), name=f"sitecrawl-worker-{i}")
            for i in range(self.size)
        ]

    async def join(self) -> None:
        await asyncio.gather(*self._tasks)

    def cancel(self) -> None:
        for task in self._tasks:
            task.cancel()

    async def reap(self) -> None:
        """Wait for cancelled workers to unwind."""
        await asyncio.gather(*self._tasks, return_exceptions=True)

    async def _worker(self) -> None:
        while True:
            url = await self.dispatch.get()
            if url is None:
                break
            try:
                urls, ok = await self._process(url)
            except Exception:
                logger.exception("worker error: %s", url)
                urls, ok = [], False
            self._report(url, urls, ok)

    async def _process(self, url: str) -> Tuple[List[str], bool]:
        try:
            body = await self._fetcher.fetch(url)
        except FetchError as exc:
            logger.warning("worker error: http: %s", exc)
            return [], False

        page = Page(url, body, self._normalizer)
        try:
            return page.parse(), True
        except ParseError as exc:
            logger.warning("worker error: parser: %s: cannot parse HTML: %s", url, exc)
            return [], False
