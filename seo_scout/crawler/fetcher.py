"""
Fetcher module: one bounded-timeout GET per call, no retries.
"""
from __future__ import annotations

import asyncio
import logging

from aiohttp import ClientError, ClientSession, ClientTimeout

from seo_scout.crawler.models import FetchHttpError, FetchResult, FetchTimeout, FetchTransportError

DEFAULT_TIMEOUT = 10.0

logger = logging.getLogger("SeoScout")


class Fetcher:
    """Performs single HTTP GET requests on a shared aiohttp session."""

    def __init__(self, session: ClientSession, timeout: float = DEFAULT_TIMEOUT) -> None:
        self.session = session
        self.timeout = ClientTimeout(total=timeout)

    async def fetch(self, url: str) -> FetchResult:
        """
        Fetch *url* and return its status and body.

        Raises FetchTimeout, FetchTransportError or FetchHttpError; redirects are
        followed by aiohttp itself.
        """
        try:
            async with self.session.get(url, timeout=self.timeout, raise_for_status=False) as resp:
                logger.debug("GET %s -> %s", url, resp.status)
                if not 200 <= resp.status < 300:
                    raise FetchHttpError(url, f"HTTP {resp.status}", status=resp.status)
                body = await resp.text(errors="replace")
                return FetchResult(resp.status, body)
        except asyncio.TimeoutError as exc:
            raise FetchTimeout(url, f"timed out after {self.timeout.total}s") from exc
        except ClientError as exc:
            raise FetchTransportError(url, str(exc) or type(exc).__name__) from exc
