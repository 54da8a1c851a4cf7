# sitecrawl/normalizer.py
"""
URL normalization: the identity under which the frontier deduplicates pages.

:func:`normalize_url` turns a raw ``href`` plus the URL of the page it was
found on into a canonical string, or ``None`` when the link is out of scope.
Two links that name the same resource must produce the identical string.

The function is pure. Callers that need a different rule set pass their own
callable with the same signature (see :data:`Normalizer`).
"""
from __future__ import annotations

import posixpath
import re
from typing import Callable, Optional
from urllib.parse import SplitResult, urlsplit, urlunsplit

from sitecrawl.errors import InvalidSeedURL, MalformedURL, SchemeMismatch

__all__ = ("Normalizer", "ALLOWED_SCHEMES", "normalize_url", "canonical_seed")

Normalizer = Callable[[str, str], Optional[str]]

ALLOWED_SCHEMES = frozenset({"http", "https"})

_CONTROL_RE = re.compile(r"[\x00-\x1f\x7f]")
_BAD_ESCAPE_RE = re.compile(r"%(?![0-9A-Fa-f]{2})")


def _parse(url: str) -> SplitResult:
    if _CONTROL_RE.search(url):
        raise MalformedURL(url, "control character in URL")
    if _BAD_ESCAPE_RE.search(url):
        raise MalformedURL(url, "invalid percent escape")
    try:
        parts = urlsplit(url)
        parts.port  # raises ValueError on a non-numeric or out-of-range port
    except ValueError as exc:
        raise MalformedURL(url, str(exc)) from exc
    return parts


def _authority(parts: SplitResult) -> str:
    """host[:port] without userinfo, lower-cased. An empty port is dropped."""
    host = parts.hostname or ""
    if ":" in host:
        host = f"[{host}]"
    return host if parts.port is None else f"{host}:{parts.port}"


def _clean_path(path: str) -> str:
    cleaned = posixpath.normpath(path)
    # normpath keeps a leading "//" (POSIX implementation-defined)
    if cleaned.startswith("//"):
        cleaned = "/" + cleaned.lstrip("/")
    return "" if cleaned == "/" else cleaned


def normalize_url(link: str, base: str) -> Optional[str]:
    """Return the canonical form of *link* found on page *base*.

    Returns ``None`` for links that are skipped: other hosts, non-http
    schemes, fragment-only references. Raises :class:`MalformedURL` for an
    unparsable link and :class:`SchemeMismatch` for an http/https switch on
    the same host.
    """
    base_parts = urlsplit(base)
    parts = _parse(link.strip())

    if not (parts.scheme or parts.netloc or parts.path or parts.query):
        # "#frag" or "": the page itself
        return None

    host = _authority(base_parts)
    if parts.netloc and _authority(parts) != host:
        return None

    if parts.scheme:
        if parts.scheme not in ALLOWED_SCHEMES:
            return None
        if parts.scheme != base_parts.scheme:
            raise SchemeMismatch(link, parts.scheme, base_parts.scheme)

    path = parts.path
    if parts.netloc and not path:
        path = "/"
    elif not path.startswith("/"):
        path = posixpath.join(base_parts.path or "/", path)

    return urlunsplit((base_parts.scheme, host, _clean_path(path), parts.query, ""))


def canonical_seed(seed: str) -> str:
    """Validate a seed URL and return its canonical form.

    The seed must be absolute, use http or https and name a host; anything
    else raises :class:`InvalidSeedURL`.
    """
    if not seed or not seed.strip():
        raise InvalidSeedURL(seed, "empty seed")
    seed = seed.strip()
    try:
        parts = _parse(seed)
    except MalformedURL as exc:
        raise InvalidSeedURL(seed, exc.reason) from exc
    if parts.scheme not in ALLOWED_SCHEMES:
        raise InvalidSeedURL(seed, "scheme must be http or https")
    if not parts.hostname:
        raise InvalidSeedURL(seed, "missing host")
    return normalize_url(seed, seed)  # type: ignore[return-value]
