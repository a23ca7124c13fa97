"""
Data models for the SeoScout crawler.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional, Union

#: status value of a record whose fetch failed without an HTTP response
ERROR_MARKER = "error"

Status = Union[int, str]


@dataclass(frozen=True, slots=True)
class FrontierItem:
    """A URL waiting in the crawl queue together with its link distance from the seed."""

    url: str
    depth: int


@dataclass(frozen=True, slots=True)
class FetchResult:
    """Completed 2xx response: numeric status and decoded body."""

    status: int
    body: str


@dataclass(frozen=True, slots=True)
class PageRecord:
    """One line of the crawl report, produced for every visited URL.

    Content fields stay ``None`` when the fetch failed.
    """

    url: str
    status: Status
    depth: int
    title: Optional[str] = None
    description: Optional[str] = None
    h1: Optional[int] = None
    h2: Optional[int] = None
    canonical: Optional[str] = None
    noindex: Optional[bool] = None
    images_without_alt: Optional[int] = None

    @property
    def ok(self) -> bool:
        return isinstance(self.status, int) and 200 <= self.status < 300

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"url": self.url, "status": self.status}
        for key in ("title", "description", "h1", "h2", "canonical", "noindex", "images_without_alt"):
            value = getattr(self, key)
            if value is not None:
                data[key] = value
        data["depth"] = self.depth
        return data


class InvalidStartUrl(ValueError):
    """Raised before crawling when the start URL is not an absolute http(s) URL."""


class FetchError(Exception):
    """Base class for page-scoped fetch failures."""

    def __init__(self, url: str, message: str, status: Optional[int] = None) -> None:
        super().__init__(f"{url}: {message}")
        self.url = url
        self.status = status

    @property
    def record_status(self) -> Status:
        """Status to store in the failure record: HTTP code if known, else the marker."""
        return self.status if self.status is not None else ERROR_MARKER


class FetchTimeout(FetchError):
    """The request did not complete within the fetch timeout."""


class FetchTransportError(FetchError):
    """DNS, connection, TLS or any other client-side failure."""


class FetchHttpError(FetchError):
    """The response completed with a non-2xx status code."""
