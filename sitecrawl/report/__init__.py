# File: sitecrawl/report/__init__.py
"""sitecrawl.report: crawl summary and its JSON / HTML renderings."""

from __future__ import annotations

from .aggregator import CrawlReport, build_report
from .html_report import render_html
from .json_report import render_json

__all__ = ["CrawlReport", "build_report", "render_json", "render_html"]
