# === FILE: sitecrawl/parser/html_parser.py ===
"""HTML link extraction for sitecrawl.

A page is read as a stream of start-tag tokens and walked by a two-state
machine:

* ``SEEK_BODY``   – skip tokens until the ``<body>`` start tag;
* ``SEEK_ANCHOR`` – collect the ``href`` of every ``<a>`` start tag.

Running out of tokens while still looking for the body raises
:class:`~sitecrawl.errors.BodyNotFound`; running out while collecting anchors
is the normal end of the document.

BeautifulSoup with the stdlib ``"html.parser"`` builder is the tokenizer. That
builder keeps the document as written and never invents a ``<body>``.
"""
from __future__ import annotations

from collections.abc import Iterator, Sequence
from dataclasses import dataclass, field
from enum import Enum
from typing import BinaryIO, Union

from bs4 import BeautifulSoup
from bs4.element import Tag

from sitecrawl.errors import BodyNotFound, MalformedURL, ParseError, SchemeMismatch
from sitecrawl.logger import logger
from sitecrawl.normalizer import Normalizer, normalize_url

__all__: Sequence[str] = ("ParserState", "Page", "iter_hrefs")

Markup = Union[bytes, str, BinaryIO]


class ParserState(Enum):
    SEEK_BODY = "seek-body"
    SEEK_ANCHOR = "seek-anchor"


def _read(stream: Markup) -> Union[bytes, str]:
    if isinstance(stream, (bytes, str)):
        return stream
    try:
        return stream.read()
    except OSError as exc:
        raise ParseError(f"cannot read document: {exc}") from exc


def _start_tags(markup: Union[bytes, str]) -> Iterator[Tag]:
    """Yield start-tag tokens in document order."""
    soup = BeautifulSoup(markup, "html.parser")
    for node in soup.descendants:
        if isinstance(node, Tag):
            yield node


def iter_hrefs(stream: Markup) -> Iterator[str]:
    """Yield raw ``href`` values of anchors found after ``<body>``.

    No normalization is applied. Raises :class:`BodyNotFound` once the
    document is exhausted without a body start tag.
    """
    state = ParserState.SEEK_BODY
    for tag in _start_tags(_read(stream)):
        if state is ParserState.SEEK_BODY:
            if tag.name == "body":
                state = ParserState.SEEK_ANCHOR
            continue

        if tag.name != "a":
            continue
        href = tag.get("href")
        if isinstance(href, str):
            yield href

    if state is ParserState.SEEK_BODY:
        raise BodyNotFound()


@dataclass(slots=True)
class Page:
    """One fetched document and the same-host URLs discovered in it.

    ``url`` is the page's own canonical URL and the base every link is
    normalized against.
    """

    url: str
    body: Markup
    normalizer: Normalizer = normalize_url
    urls: list[str] = field(default_factory=list)

    def parse(self) -> list[str]:
        """Run the parser to completion and return the discovered URLs.

        A link the normalizer rejects is logged and skipped; it does not fail
        the page. :class:`ParseError` (including :class:`BodyNotFound`)
        propagates. Parsing again replaces :attr:`urls`.
        """
        urls: list[str] = []
        for href in iter_hrefs(self.body):
            try:
                url = self.normalizer(href, self.url)
            except (MalformedURL, SchemeMismatch) as exc:
                logger.warning("html parser: cannot handle link %s: %s", href, exc)
                continue
            if url:
                urls.append(url)
        self.urls = urls
        return urls
