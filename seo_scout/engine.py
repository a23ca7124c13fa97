"""seo_scout.engine: Orchestration layer: обход сайта, аудит и агрегация результатов."""

from __future__ import annotations

import asyncio
from typing import List, Optional

from seo_scout.aggregator import CrawlReport, aggregate_report
from seo_scout.audit import AuditIssue, audit_pages
from seo_scout.config import CrawlConfig
from seo_scout.crawler.crawler import SiteCrawler
from seo_scout.logger import logger

__all__ = ["Engine", "run_audit"]


async def run_audit(
    config: CrawlConfig,
    *,
    audit: bool = True,
    stop_event: Optional[asyncio.Event] = None,
) -> CrawlReport:
    """
    Обходит сайт, проверяет успешные страницы и возвращает CrawlReport.

    Parameters
    ----------
    config : CrawlConfig
        Конфигурация обхода.
    audit : bool
        False — только обход, без проверок страниц.
    stop_event : asyncio.Event, optional
        Внешний сигнал остановки обхода.
    """
    async with SiteCrawler(config) as crawler:
        records = await crawler.crawl(stop_event=stop_event)
        issues: List[AuditIssue] = []
        if audit:
            issues = await audit_pages(records, config, crawler.fetcher)
    return aggregate_report(config.start_url, records, issues)


class Engine:
    """Синхронный фасад: запуск обхода и агрегация результатов."""

    def __init__(self, config: CrawlConfig, *, audit: bool = True) -> None:
        """Инициализирует Engine с заданной конфигурацией обхода."""
        self.config = config
        self.audit = audit

    def run(self, timeout: Optional[float] = None) -> CrawlReport:
        """Синхронно запускает обход (с общим таймаутом, если задан) и возвращает отчёт."""
        logger.info("Starting crawl…")
        try:
            return asyncio.run(asyncio.wait_for(run_audit(self.config, audit=self.audit), timeout=timeout))
        except asyncio.TimeoutError:
            logger.error("Crawl did not finish within %s seconds", timeout)
            raise
        except Exception as exc:
            logger.error("Crawl failed: %s", exc)
            raise
