from __future__ import annotations

import asyncio
import logging
import time
from collections import deque
from typing import Any, Deque, List, Optional, Set, Tuple

from aiohttp import ClientSession

from seo_scout.config import CrawlConfig
from seo_scout.crawler.fetcher import Fetcher
from seo_scout.crawler.models import FetchError, FrontierItem, PageRecord
from seo_scout.crawler.urls import filter_links, hostname_of
from seo_scout.parser.html_parser import extract_signals

__all__ = ("SiteCrawler", "crawl_site")

_Visit = Tuple[FrontierItem, PageRecord, List[str]]


class SiteCrawler:
    """
    Breadth-first same-host crawler that produces one PageRecord per visited URL.

    Frontier, visited set and report belong to the instance, so several crawlers
    can run side by side. With ``concurrency > 1`` up to that many pages are
    fetched at once, but the report keeps the sequential visit order.
    """

    def __init__(self, config: CrawlConfig) -> None:
        self.config = config
        self.frontier: Deque[FrontierItem] = deque()
        self.visited: Set[str] = set()
        self.report: List[PageRecord] = []
        self.scope_hostname: str = ""
        self.session: Optional[ClientSession] = None
        self.fetcher: Optional[Fetcher] = None
        self.logger = logging.getLogger("SeoScout")

    async def __aenter__(self) -> SiteCrawler:
        self.session = ClientSession(
            headers={"User-Agent": self.config.user_agent},
            raise_for_status=False,
        )
        self.fetcher = Fetcher(self.session, timeout=self.config.timeout)
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        if self.session and not self.session.closed:
            await self.session.close()

    async def crawl(self, stop_event: Optional[asyncio.Event] = None) -> List[PageRecord]:
        """
        Crawl from ``config.start_url`` and return the report in visit order.

        The crawl stops early, keeping what was already recorded, when
        ``config.max_runtime`` elapses or *stop_event* is set. Both are checked
        only between rounds, so no dequeued URL is left without a record.
        """
        if self.fetcher is None:
            raise RuntimeError("Session not initialized")
        start_url = self.config.start_url
        self.scope_hostname = hostname_of(start_url)
        self.frontier = deque([FrontierItem(start_url, 0)])
        self.visited = set()
        self.report = []

        self.logger.info("Старт обхода: %s (max_depth=%d)", start_url, self.config.max_depth)
        start = time.monotonic()
        deadline = start + self.config.max_runtime if self.config.max_runtime else None

        while self.frontier:
            if stop_event is not None and stop_event.is_set():
                self.logger.warning("Обход остановлен по запросу, в очереди %d URL", len(self.frontier))
                break
            if deadline is not None and time.monotonic() >= deadline:
                self.logger.warning(
                    "Обход прерван по лимиту %.1f с, в очереди %d URL",
                    self.config.max_runtime,
                    len(self.frontier),
                )
                break
            batch = self._next_batch()
            if not batch:
                continue
            visits = await asyncio.gather(*(self._visit(item) for item in batch))
            for item, record, links in visits:
                self.report.append(record)
                self._enqueue(links, item.depth + 1)

        duration = time.monotonic() - start
        self.logger.info(
            "Завершено: %d страниц за %.2f с (%.2f стр/с)",
            len(self.report),
            duration,
            len(self.report) / duration if duration else 0,
        )
        return self.report

    def _next_batch(self) -> List[FrontierItem]:
        """Pop up to ``concurrency`` fetchable items, marking each visited as it is taken."""
        batch: List[FrontierItem] = []
        while self.frontier and len(batch) < self.config.concurrency:
            item = self.frontier.popleft()
            if item.url in self.visited or item.depth > self.config.max_depth:
                continue
            self.visited.add(item.url)
            batch.append(item)
        return batch

    def _enqueue(self, links: List[str], depth: int) -> None:
        for link in links:
            if link not in self.visited:
                self.frontier.append(FrontierItem(link, depth))

    async def _visit(self, item: FrontierItem) -> _Visit:
        """Fetch and extract one page; fetch failures become an error record with no links."""
        assert self.fetcher is not None
        try:
            result = await self.fetcher.fetch(item.url)
        except FetchError as exc:
            self.logger.warning("Failed %s: %s", item.url, exc)
            return item, PageRecord(url=item.url, status=exc.record_status, depth=item.depth), []

        signals = extract_signals(result.body)
        record = PageRecord(
            url=item.url,
            status=result.status,
            depth=item.depth,
            title=signals.title,
            description=signals.description,
            h1=signals.h1,
            h2=signals.h2,
            canonical=signals.canonical,
            noindex=signals.noindex,
            images_without_alt=signals.images_without_alt,
        )
        links = filter_links(signals.links, self.config.start_url, self.scope_hostname)
        self.logger.debug("%s [%s] depth=%d, %d in-scope links", item.url, result.status, item.depth, len(links))
        return item, record, links


async def crawl_site(start_url: str, max_depth: int = 3, **options: Any) -> List[PageRecord]:
    """Crawl *start_url* with a fresh crawler and return its report."""
    hostname_of(start_url)
    config = CrawlConfig(start_url=start_url, max_depth=max_depth, **options)
    async with SiteCrawler(config) as crawler:
        return await crawler.crawl()
