# site_mirror/crawler/urls.py
"""
URL resolution, link scope and directory naming utilities for SiteMirror.
"""
from __future__ import annotations

import hashlib
import re
from typing import Callable, Dict, Optional
from urllib.parse import SplitResult, urljoin, urlsplit, urlunsplit

from site_mirror.errors import MalformedURL

__all__ = (
    "LinkScope",
    "resolve",
    "is_prefix_match",
    "is_same_origin",
    "get_scope",
    "canonical_url",
    "legacy_child_dirname",
    "page_dirname",
)

#: predicate deciding whether a resolved link belongs to the page it was found on
LinkScope = Callable[[str, str], bool]

_DEFAULT_PORTS: Dict[str, int] = {"http": 80, "https": 443}
_UNSAFE_RE = re.compile(r"[^A-Za-z0-9._-]+")
_SLUG_MAX = 60
_DIGEST_LEN = 10


def _split(value: str) -> SplitResult:
    try:
        return urlsplit(value)
    except ValueError as exc:
        raise MalformedURL(value, str(exc)) from exc


def resolve(base: str, ref: str) -> str:
    """
    Resolve *ref* (absolute or relative) against the absolute URL *base*.

    Raises MalformedURL if *base* is not absolute or either value cannot be parsed.
    """
    parsed = _split(base)
    if not parsed.scheme or not parsed.netloc:
        raise MalformedURL(base, "base URL must be absolute")
    _split(ref)
    try:
        return urljoin(base, ref)
    except ValueError as exc:
        raise MalformedURL(ref, str(exc)) from exc


def is_prefix_match(url: str, base: str) -> bool:
    """
    Keep *url* when its string starts with *base*.

    Plain string comparison: ``https://ex.compage`` and
    ``https://ex.com.attacker.net`` both pass for base ``https://ex.com``.
    """
    return url.startswith(base)


def _origin(parsed: SplitResult) -> Optional[tuple]:
    scheme = parsed.scheme.lower()
    if scheme not in _DEFAULT_PORTS or not parsed.hostname:
        return None
    try:
        port = parsed.port or _DEFAULT_PORTS[scheme]
    except ValueError:
        return None
    return scheme, parsed.hostname.lower(), port


def is_same_origin(url: str, base: str) -> bool:
    """Keep *url* when scheme, host and effective port equal those of *base*."""
    try:
        target = _origin(urlsplit(url))
        origin = _origin(urlsplit(base))
    except ValueError:
        return False
    return target is not None and target == origin


_SCOPES: Dict[str, LinkScope] = {"prefix": is_prefix_match, "origin": is_same_origin}


def get_scope(name: str) -> LinkScope:
    """Return the scope predicate registered under *name* (``prefix`` or ``origin``)."""
    try:
        return _SCOPES[name]
    except KeyError:
        raise ValueError(f"Unknown link scope: {name!r}") from None


def canonical_url(url: str) -> str:
    """
    Key naming the page behind *url*.

    The fragment is dropped, scheme and host are lowercased and an empty path
    becomes "/", so ``https://EX.com`` and ``https://ex.com/#top`` are one page.
    """
    parsed = _split(url)
    return urlunsplit(
        (parsed.scheme.lower(), parsed.netloc.lower(), parsed.path or "/", parsed.query, "")
    )


def legacy_child_dirname(page_url: str, link: str) -> str:
    """
    Name a child directory after the part of *link* that follows *page_url*.

    ``("https://ex.com/shop", "https://ex.com/shop/item/5")`` gives ``"_item_5"``.
    Distinct links can collide and the result may hold characters that are
    unsafe on some filesystems; see :func:`page_dirname`.
    """
    return link.removeprefix(page_url).replace("/", "_")


def page_dirname(url: str) -> str:
    """
    Collision-resistant, filesystem-safe directory name for *url*.

    A readable slug of path and query followed by a short SHA-1 digest of the
    whole URL, so the name depends on nothing but the URL itself.
    """
    parsed = _split(url)
    label = parsed.path.strip("/")
    if parsed.query:
        label = f"{label}_{parsed.query}"
    slug = _UNSAFE_RE.sub("_", label)[:_SLUG_MAX].strip("._") or "index"
    digest = hashlib.sha1(url.encode("utf-8")).hexdigest()[:_DIGEST_LEN]
    return f"{slug}-{digest}"
