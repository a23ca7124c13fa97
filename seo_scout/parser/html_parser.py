"""HTML signal extraction for SeoScout.

:func:`extract_signals` turns raw markup into a :class:`PageSignals` record with
the SEO-relevant fields the crawler reports:

* title — text of the first ``<title>`` or ``""``.
* description — ``<meta name="description">`` content or ``""``.
* h1 / h2 — number of ``<h1>`` / ``<h2>`` elements.
* canonical — ``<link rel="canonical">`` href or ``""``.
* noindex — whether ``<meta name="robots">`` content contains ``noindex``.
* links — raw ``<a href>`` values in document order, unfiltered.
* images_without_alt — ``<img>`` elements with a missing or empty ``alt``.

Missing elements only ever produce the defaults above; the parser never raises
on broken markup.
"""
from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Optional, Union

from bs4 import BeautifulSoup
from bs4.element import Tag
from bs4.exceptions import ParserRejectedMarkup

__all__: Sequence[str] = ("PageSignals", "extract_signals")

logger = logging.getLogger("SeoScout")


@dataclass(frozen=True, slots=True)
class PageSignals:
    """SEO signals of a single HTML document."""

    title: str = ""
    description: str = ""
    h1: int = 0
    h2: int = 0
    canonical: str = ""
    noindex: bool = False
    links: tuple[str, ...] = field(default_factory=tuple)
    images_without_alt: int = 0


def _attr(tag: Optional[Tag], name: str) -> str:
    """Attribute value as text; multi-valued attributes are joined with spaces."""
    if not isinstance(tag, Tag):
        return ""
    value = tag.get(name)
    if value is None:
        return ""
    if isinstance(value, list):
        return " ".join(value)
    return str(value)


def _find_meta(soup: BeautifulSoup, name: str) -> Optional[Tag]:
    tag = soup.find("meta", attrs={"name": name})
    return tag if isinstance(tag, Tag) else None


def _find_canonical(soup: BeautifulSoup) -> Optional[Tag]:
    # rel is multi-valued in bs4; only the exact value rel="canonical" counts
    for tag in soup.find_all("link", rel=True):
        if isinstance(tag, Tag) and tag.get("rel") == ["canonical"]:
            return tag
    return None


def extract_signals(html: Union[str, bytes, None]) -> PageSignals:
    """Parse *html* and return its :class:`PageSignals`."""
    if html is None:
        return PageSignals()
    if isinstance(html, bytes):
        html = html.decode("utf-8", errors="replace")

    try:
        soup = BeautifulSoup(html, "html.parser")
    except ParserRejectedMarkup as exc:
        logger.debug("Unparseable markup, using defaults: %s", exc)
        return PageSignals()

    title_tag = soup.find("title")
    title = title_tag.get_text().strip() if isinstance(title_tag, Tag) else ""

    links: list[str] = []
    for tag in soup.find_all("a", href=True):
        href = _attr(tag, "href")
        links.append(href)

    images_without_alt = sum(
        1 for img in soup.find_all("img") if isinstance(img, Tag) and not _attr(img, "alt").strip()
    )

    return PageSignals(
        title=title,
        description=_attr(_find_meta(soup, "description"), "content"),
        h1=len(soup.find_all("h1")),
        h2=len(soup.find_all("h2")),
        canonical=_attr(_find_canonical(soup), "href"),
        noindex="noindex" in _attr(_find_meta(soup, "robots"), "content"),
        links=tuple(links),
        images_without_alt=images_without_alt,
    )
