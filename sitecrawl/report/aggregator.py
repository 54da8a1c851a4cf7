# File: sitecrawl/report/aggregator.py
"""sitecrawl.report.aggregator: builds the crawl summary from the final frontier."""

from __future__ import annotations

import json
from dataclasses import asdict, dataclass, field
from typing import Mapping

from sitecrawl.crawler.models import CrawlStats


@dataclass(slots=True)
class CrawlReport:
    """Result of one crawl: every known URL plus counters."""

    seed: str
    urls: list[str] = field(default_factory=list)
    failed: list[str] = field(default_factory=list)
    pages: int = 0
    peak_in_flight: int = 0
    elapsed: float = 0.0

    def as_dict(self) -> dict:
        return asdict(self)

    def json(self, *, pretty: bool = False) -> str:
        return json.dumps(self.as_dict(), ensure_ascii=False, indent=2 if pretty else None)


def build_report(seed: str, frontier: Mapping[str, bool], stats: CrawlStats) -> CrawlReport:
    """Collect the frontier snapshot and actor statistics into a CrawlReport.

    URLs keep frontier (discovery) order.
    """
    return CrawlReport(
        seed=seed,
        urls=list(frontier),
        failed=list(stats.failed),
        pages=stats.pages,
        peak_in_flight=stats.peak_in_flight,
        elapsed=round(stats.elapsed, 3),
    )
