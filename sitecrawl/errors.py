# sitecrawl/errors.py
"""
Exception types raised by the crawler.

Only :class:`InvalidSeedURL` is meant to reach the caller; everything else is
caught at page or link level and turned into "no discoveries".
"""
from __future__ import annotations

__all__ = (
    "CrawlError",
    "MalformedURL",
    "InvalidSeedURL",
    "SchemeMismatch",
    "ParseError",
    "BodyNotFound",
    "FetchError",
)


class CrawlError(Exception):
    """Base class for sitecrawl errors."""


class MalformedURL(CrawlError):
    """A link or seed that cannot be parsed as a URL."""

    def __init__(self, url: str, reason: str) -> None:
        super().__init__(f"malformed URL {url!r}: {reason}")
        self.url = url
        self.reason = reason


class InvalidSeedURL(MalformedURL):
    """The seed is not an absolute http(s) URL with a host."""


class SchemeMismatch(CrawlError):
    """A same-host link switches between http and https."""

    def __init__(self, url: str, scheme: str, expected: str) -> None:
        super().__init__(f"scheme of {url!r} is {scheme}, it was {expected}")
        self.url = url
        self.scheme = scheme
        self.expected = expected


class ParseError(CrawlError):
    """The page body could not be parsed."""


class BodyNotFound(ParseError):
    def __init__(self) -> None:
        super().__init__("body not found")


class FetchError(CrawlError):
    """Transport failure or non-2xx status for a GET."""

    def __init__(self, url: str, reason: str) -> None:
        super().__init__(f"cannot GET {url}: {reason}")
        self.url = url
        self.reason = reason
