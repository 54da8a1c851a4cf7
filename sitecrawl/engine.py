# File: sitecrawl/engine.py
"""sitecrawl.engine: wires the frontier actor, the worker pool and the fetcher."""

from __future__ import annotations

import asyncio
from typing import Dict, Optional

from aiohttp import ClientSession

from sitecrawl.config import CrawlerConfig
from sitecrawl.crawler.fetcher import Fetcher, open_session
from sitecrawl.crawler.frontier import FrontierActor
from sitecrawl.crawler.models import CrawlStats
from sitecrawl.crawler.workers import SupportsFetch, WorkerPool
from sitecrawl.logger import logger
from sitecrawl.normalizer import Normalizer, canonical_seed, normalize_url

__all__ = ["CrawlHandle", "start", "crawl"]


class CrawlHandle:
    """A running crawl. Await :meth:`wait` for the final frontier."""

    def __init__(
        self,
        actor: FrontierActor,
        pool: WorkerPool,
        session: Optional[ClientSession] = None,
    ) -> None:
        self._actor = actor
        self._pool = pool
        self._session = session
        self._actor_task = asyncio.create_task(actor.run(), name="sitecrawl-frontier")
        pool.start()

    @property
    def seed(self) -> str:
        return self._actor.seed

    @property
    def stats(self) -> CrawlStats:
        return self._actor.stats

    @property
    def in_flight(self) -> int:
        return self._actor.in_flight

    @property
    def done(self) -> bool:
        return self._actor.done

    def frontier(self) -> Dict[str, bool]:
        """Snapshot of URL -> visited flag."""
        return self._actor.snapshot()

    def cancel(self) -> None:
        """Abort the crawl: stop the actor and every worker."""
        self._actor_task.cancel()
        self._pool.cancel()

    async def wait(self) -> Dict[str, bool]:
        """Block until the crawl terminates and return the final frontier.

        If the caller is cancelled while waiting, the crawl is cancelled too
        and its tasks are reaped before the cancellation propagates.
        """
        try:
            await self._actor_task
            await self._pool.join()
        except asyncio.CancelledError:
            logger.warning("Crawl of %s cancelled", self.seed)
            self.cancel()
            await self._pool.reap()
            raise
        except Exception:
            self._pool.cancel()
            await self._pool.reap()
            raise
        finally:
            await self._close_session()
        return self.frontier()

    async def _close_session(self) -> None:
        if self._session is not None and not self._session.closed:
            await self._session.close()


async def start(
    seed_url: str,
    workers: Optional[int] = None,
    *,
    config: Optional[CrawlerConfig] = None,
    fetcher: Optional[SupportsFetch] = None,
    normalizer: Normalizer = normalize_url,
) -> CrawlHandle:
    """Launch a crawl of *seed_url* with *workers* concurrent fetches.

    *workers* defaults to ``config.workers``. Without an explicit *fetcher*
    an aiohttp session is opened from *config* and closed by
    :meth:`CrawlHandle.wait`. Raises :class:`~sitecrawl.errors.InvalidSeedURL`
    before anything is started.
    """
    seed = canonical_seed(seed_url)
    cfg = config or CrawlerConfig()
    size = cfg.workers if workers is None else workers
    if size < 1:
        raise ValueError(f"workers must be >= 1, got {size}")

    session: Optional[ClientSession] = None
    if fetcher is None:
        session = open_session(cfg)
        fetcher = Fetcher(session)

    dispatch: asyncio.Queue[Optional[str]] = asyncio.Queue(maxsize=size)
    actor = FrontierActor(seed, dispatch, size)
    pool = WorkerPool(size, dispatch, fetcher, actor.report, normalizer)
    return CrawlHandle(actor, pool, session)


async def crawl(seed_url: str, workers: Optional[int] = None, **kwargs) -> Dict[str, bool]:
    """Run a crawl to completion and return URL -> visited flag."""
    handle = await start(seed_url, workers, **kwargs)
    return await handle.wait()

