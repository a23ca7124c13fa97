"""
Link resolution and domain scoping for the SeoScout crawler.
"""
from __future__ import annotations

import logging
from typing import Iterable, List, Optional
from urllib.parse import urljoin, urlparse

from seo_scout.crawler.models import InvalidStartUrl

__all__ = ("SKIP_PREFIXES", "resolve_link", "in_scope", "hostname_of", "filter_links")

logger = logging.getLogger("SeoScout")

#: hrefs that never point to a crawlable page
SKIP_PREFIXES = ("#", "mailto:", "tel:")


def resolve_link(href: Optional[str], seed_url: str) -> Optional[str]:
    """
    Turn a raw ``href`` into a candidate URL.

    Root-relative hrefs are joined to the seed URL, not to the page they were
    found on. Anything else that is not skipped is returned unchanged, so a
    path-relative href stays relative and later fails the scope check.
    """
    if not href or href.startswith(SKIP_PREFIXES):
        return None
    if href.startswith("/"):
        try:
            return urljoin(seed_url, href)
        except ValueError:
            logger.debug("Cannot resolve %r against %s", href, seed_url)
            return None
    return href


def in_scope(url: str, scope_hostname: str) -> bool:
    """True iff the hostname of *url* is exactly *scope_hostname*."""
    try:
        parsed = urlparse(url)
        host = parsed.hostname
        parsed.port  # ValueError for a non-numeric or out-of-range port
    except ValueError:
        logger.debug("Malformed link dropped: %r", url)
        return False
    return host is not None and host == scope_hostname


def hostname_of(url: str) -> str:
    """Hostname of an absolute http(s) URL; raises :class:`InvalidStartUrl` otherwise."""
    try:
        parsed = urlparse(url)
        host = parsed.hostname
        parsed.port  # ValueError for a non-numeric or out-of-range port
    except (TypeError, ValueError) as exc:
        raise InvalidStartUrl(f"Cannot parse start URL {url!r}: {exc}") from exc
    if parsed.scheme not in ("http", "https") or not host:
        raise InvalidStartUrl(f"Start URL must be an absolute http(s) URL, got {url!r}")
    return host


def filter_links(hrefs: Iterable[str], seed_url: str, scope_hostname: str) -> List[str]:
    """Resolve *hrefs* and keep only in-scope URLs, preserving document order."""
    links: List[str] = []
    for href in hrefs:
        url = resolve_link(href, seed_url)
        if url is not None and in_scope(url, scope_hostname):
            links.append(url)
    return links
