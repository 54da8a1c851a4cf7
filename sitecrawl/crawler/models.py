# sitecrawl/crawler/models.py
"""
Messages exchanged with the frontier actor, and crawl statistics.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Union


@dataclass(frozen=True, slots=True)
class Schedule:
    """Ask the actor to hand out unvisited URLs up to the worker capacity."""


@dataclass(frozen=True, slots=True)
class Report:
    """Outcome of one dispatched URL, sent by a worker."""

    url: str
    urls: tuple[str, ...] = ()
    ok: bool = True


Message = Union[Schedule, Report]


@dataclass(slots=True)
class CrawlStats:
    pages: int = 0
    failed: list[str] = field(default_factory=list)
    peak_in_flight: int = 0
    elapsed: float = 0.0
