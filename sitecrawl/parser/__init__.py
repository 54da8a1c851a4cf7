# File: sitecrawl/parser/__init__.py
"""sitecrawl.parser: HTML link extraction."""

from .html_parser import Page, ParserState, iter_hrefs

__all__ = ["Page", "ParserState", "iter_hrefs"]
