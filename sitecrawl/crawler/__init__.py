# File: sitecrawl/crawler/__init__.py
"""sitecrawl.crawler: frontier actor, worker pool and HTTP fetcher."""

from .fetcher import Fetcher, open_session
from .frontier import Frontier, FrontierActor
from .models import CrawlStats, Report, Schedule
from .workers import WorkerPool

__all__ = [
    "CrawlStats",
    "Fetcher",
    "Frontier",
    "FrontierActor",
    "Report",
    "Schedule",
    "WorkerPool",
    "open_session",
]
