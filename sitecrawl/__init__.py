# sitecrawl/__init__.py
"""
sitecrawl package initializer.
Defines package version and exposes the crawl API.
"""
__version__ = "0.1.0"

from sitecrawl.engine import CrawlHandle, crawl, start
from sitecrawl.errors import (
    BodyNotFound,
    CrawlError,
    FetchError,
    InvalidSeedURL,
    MalformedURL,
    ParseError,
    SchemeMismatch,
)
from sitecrawl.normalizer import canonical_seed, normalize_url

__all__ = [
    "__version__",
    "BodyNotFound",
    "CrawlError",
    "CrawlHandle",
    "FetchError",
    "InvalidSeedURL",
    "MalformedURL",
    "ParseError",
    "SchemeMismatch",
    "canonical_seed",
    "crawl",
    "normalize_url",
    "start",
]
