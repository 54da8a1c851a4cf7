# sitecrawl/crawler/frontier.py
"""
The frontier and the actor that owns it.

:class:`FrontierActor` is the only code that reads or writes the frontier
and the in-flight counter. Everything else talks to it through its inbox,
which it drains one message at a time, so no lock is needed.
"""
from __future__ import annotations

import asyncio
import time
from collections import deque
from typing import Deque, Dict, Iterable, Iterator, Optional

from sitecrawl.crawler.models import CrawlStats, Message, Report, Schedule
from sitecrawl.logger import logger

__all__ = ("Frontier", "FrontierActor")


class Frontier:
    """Canonical URL -> dispatched flag.

    Entries are never removed and a flag only goes from False to True.
    Undispatched URLs are handed out in discovery order.
    """

    def __init__(self) -> None:
        self._urls: Dict[str, bool] = {}
        self._pending: Deque[str] = deque()

    def add(self, url: str) -> bool:
        """Insert *url* as unvisited. Returns False if it was already known."""
        if url in self._urls:
            return False
        self._urls[url] = False
        self._pending.append(url)
        return True

    def next_unvisited(self) -> Optional[str]:
        """Mark the oldest unvisited URL dispatched and return it."""
        if not self._pending:
            return None
        url = self._pending.popleft()
        self._urls[url] = True
        return url

    @property
    def has_unvisited(self) -> bool:
        return bool(self._pending)

    def snapshot(self) -> Dict[str, bool]:
        return dict(self._urls)

    def __contains__(self, url: object) -> bool:
        return url in self._urls

    def __len__(self) -> int:
        return len(self._urls)

    def __iter__(self) -> Iterator[str]:
        return iter(self._urls)


class FrontierActor:
    """Single owner of the frontier; schedules work and detects termination.

    Parameters
    ----------
    seed
        Canonical seed URL, inserted as the first unvisited entry.
    dispatch
        Queue the workers receive URLs from. The actor closes it by putting
        one ``None`` per worker once the crawl is complete.
    capacity
        Number of workers, i.e. the in-flight limit.
    """

    def __init__(self, seed: str, dispatch: asyncio.Queue[Optional[str]], capacity: int) -> None:
        if capacity < 1:
            raise ValueError("capacity must be >= 1")
        self.seed = seed
        self.capacity = capacity
        self._dispatch = dispatch
        self._inbox: asyncio.Queue[Message] = asyncio.Queue()
        self._frontier = Frontier()
        self._frontier.add(seed)
        self._in_flight = 0
        self._stats = CrawlStats()
        self._done = asyncio.Event()

    # ------------------------------------------------------------------ #
    # Mailbox                                                            #
    # ------------------------------------------------------------------ #

    def send(self, message: Message) -> None:
        self._inbox.put_nowait(message)

    def report(self, url: str, urls: Iterable[str] = (), ok: bool = True) -> None:
        """Called by a worker when it is done with *url*."""
        self.send(Report(url, tuple(urls), ok))

    # ------------------------------------------------------------------ #
    # Read-only views                                                    #
    # ------------------------------------------------------------------ #

    @property
    def in_flight(self) -> int:
        return self._in_flight

    @property
    def stats(self) -> CrawlStats:
        return self._stats

    @property
    def done(self) -> bool:
        return self._done.is_set()

    def snapshot(self) -> Dict[str, bool]:
        return self._frontier.snapshot()

    async def wait(self) -> None:
        await self._done.wait()

    # ------------------------------------------------------------------ #
    # Message loop                                                       #
    # ------------------------------------------------------------------ #

    async def run(self) -> None:
        started = time.monotonic()
        logger.info("Crawl started: %s (%d workers)", self.seed, self.capacity)
        self.send(Schedule())
        while True:
            message = await self._inbox.get()
            try:
                self._handle(message)
            except Exception:
                logger.exception("crawler error: cannot handle %r", message)
            if self._finished():
                break
        try:
            await self._close_dispatch()
        finally:
            self._stats.elapsed = time.monotonic() - started
            logger.info(
                "Crawl finished: %d URLs, %d pages, %d failed in %.2f s",
                len(self._frontier),
                self._stats.pages,
                len(self._stats.failed),
                self._stats.elapsed,
            )
            self._done.set()

    def _handle(self, message: Message) -> None:
        if isinstance(message, Schedule):
            self._schedule()
        elif isinstance(message, Report):
            self._on_report(message)
        else:
            raise TypeError(f"unknown message type {type(message).__name__}")

    def _on_report(self, report: Report) -> None:
        if self._in_flight == 0:
            raise RuntimeError(f"report for {report.url} with nothing in flight")
        self._in_flight -= 1
        self._stats.pages += 1
        if not report.ok:
            self._stats.failed.append(report.url)
        added = sum(1 for url in report.urls if self._frontier.add(url))
        logger.debug("%s: %d links, %d new", report.url, len(report.urls), added)
        self._schedule()

    def _schedule(self) -> None:
        while self._in_flight < self.capacity:
            url = self._frontier.next_unvisited()
            if url is None:
                break
            self._in_flight += 1
            self._stats.peak_in_flight = max(self._stats.peak_in_flight, self._in_flight)
            # never blocks: queued URLs <= in-flight <= capacity == maxsize
            self._dispatch.put_nowait(url)
            logger.debug("dispatched %s (in flight: %d)", url, self._in_flight)

    def _finished(self) -> bool:
        return not self._frontier.has_unvisited and self._in_flight == 0

    async def _close_dispatch(self) -> None:
        # a URL reported before a worker took it can still occupy a slot
        for _ in range(self.capacity):
            await self._dispatch.put(None)
