"""seo_scout.audit: SEO issues detected from crawl records.

Only successful pages (HTTP 200) are audited, at most ``audit_limit`` of them in
visit order. 404 pages are reported for the whole crawl.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional

from seo_scout.config import CrawlConfig
from seo_scout.crawler.fetcher import Fetcher
from seo_scout.crawler.models import FetchError, FetchHttpError, PageRecord
from seo_scout.crawler.robots import RobotsTxtRules, robots_url_for
from seo_scout.logger import logger

__all__ = [
    "AuditIssue",
    "MISSING_TITLE",
    "MISSING_DESCRIPTION",
    "MULTIPLE_H1",
    "NO_H2",
    "IMAGES_WITHOUT_ALT",
    "NOINDEX",
    "BLOCKED_BY_ROBOTS",
    "ROBOTS_UNREACHABLE",
    "NOT_FOUND",
    "audit_record",
    "audit_pages",
    "select_pages",
]

MISSING_TITLE = "missing_title"
MISSING_DESCRIPTION = "missing_description"
MULTIPLE_H1 = "multiple_h1"
NO_H2 = "no_h2"
IMAGES_WITHOUT_ALT = "images_without_alt"
NOINDEX = "noindex"
BLOCKED_BY_ROBOTS = "blocked_by_robots"
ROBOTS_UNREACHABLE = "robots_unreachable"
NOT_FOUND = "not_found"


@dataclass(frozen=True, slots=True)
class AuditIssue:
    """Одна найденная проблема на странице."""

    kind: str
    url: str
    count: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"kind": self.kind, "url": self.url}
        if self.count is not None:
            data["count"] = self.count
        return data


def select_pages(records: Iterable[PageRecord], limit: int) -> List[PageRecord]:
    """Первые *limit* страниц со статусом 200 в порядке обхода."""
    return [r for r in records if r.status == 200][:limit]


def audit_record(record: PageRecord) -> List[AuditIssue]:
    """Проверки, не требующие сети: title, description, заголовки, alt, noindex."""
    issues: List[AuditIssue] = []
    if not record.title:
        issues.append(AuditIssue(MISSING_TITLE, record.url))
    if not record.description:
        issues.append(AuditIssue(MISSING_DESCRIPTION, record.url))
    if (record.h1 or 0) > 1:
        issues.append(AuditIssue(MULTIPLE_H1, record.url, record.h1))
    if not record.h2:
        issues.append(AuditIssue(NO_H2, record.url))
    if record.images_without_alt:
        issues.append(AuditIssue(IMAGES_WITHOUT_ALT, record.url, record.images_without_alt))
    if record.noindex:
        issues.append(AuditIssue(NOINDEX, record.url))
    return issues


async def _load_robots(fetcher: Fetcher, start_url: str) -> tuple[Optional[RobotsTxtRules], bool]:
    """Returns (rules, reachable). A non-2xx robots.txt allows everything."""
    robots_url = robots_url_for(start_url)
    try:
        result = await fetcher.fetch(robots_url)
    except FetchHttpError as exc:
        logger.debug("robots.txt %s -> HTTP %s", robots_url, exc.status)
        return None, True
    except FetchError as exc:
        logger.warning("Error loading robots.txt: %s", exc)
        return None, False
    return RobotsTxtRules(result.body), True


async def audit_pages(
    records: List[PageRecord],
    config: CrawlConfig,
    fetcher: Optional[Fetcher] = None,
) -> List[AuditIssue]:
    """
    Audit the crawl report.

    robots.txt is fetched once through *fetcher*; without a fetcher or with
    ``check_robots`` off the robots checks are skipped.
    """
    pages = select_pages(records, config.audit_limit)
    rules: Optional[RobotsTxtRules] = None
    reachable = True
    if pages and fetcher is not None and config.check_robots:
        rules, reachable = await _load_robots(fetcher, config.start_url)

    issues: List[AuditIssue] = []
    for record in pages:
        if not reachable:
            issues.append(AuditIssue(ROBOTS_UNREACHABLE, record.url))
        elif rules is not None and not rules.can_fetch(config.user_agent, record.url):
            issues.append(AuditIssue(BLOCKED_BY_ROBOTS, record.url))
        issues.extend(audit_record(record))

    issues.extend(AuditIssue(NOT_FOUND, r.url) for r in records if r.status == 404)
    logger.info("Аудит: %d страниц, %d проблем", len(pages), len(issues))
    return issues
