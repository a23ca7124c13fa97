"""seo_scout.aggregator: Модуль агрегатора отчетов обхода."""

from __future__ import annotations

import json
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional, TypedDict

from seo_scout.audit import AuditIssue
from seo_scout.crawler.models import PageRecord


class CrawlSummary(TypedDict):
    """Сводка по обходу."""

    pages: int
    ok: int
    failed: int
    max_depth_reached: int


@dataclass(slots=True)
class CrawlReport:
    """Результаты обхода сайта: страницы, проблемы аудита и битые ссылки."""

    start_url: str
    pages: List[Dict[str, Any]] = field(default_factory=list)
    issues: List[Dict[str, Any]] = field(default_factory=list)
    urls_404: List[str] = field(default_factory=list)
    summary: Optional[CrawlSummary] = None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    def json(self, *, pretty: bool = False) -> str:
        """Возвращает JSON-представление CrawlReport."""
        return json.dumps(self.to_dict(), ensure_ascii=False, indent=2 if pretty else None)


def _summarize(records: List[PageRecord]) -> CrawlSummary:
    ok = sum(1 for r in records if r.ok)
    return {
        "pages": len(records),
        "ok": ok,
        "failed": len(records) - ok,
        "max_depth_reached": max((r.depth for r in records), default=0),
    }


def aggregate_report(
    start_url: str,
    records: List[PageRecord],
    issues: Optional[List[AuditIssue]] = None,
) -> CrawlReport:
    """Собирает все части отчёта в CrawlReport."""
    issues = issues or []
    return CrawlReport(
        start_url=start_url,
        pages=[r.to_dict() for r in records],
        issues=[i.to_dict() for i in issues],
        urls_404=[r.url for r in records if r.status == 404],
        summary=_summarize(records),
    )


__all__ = ["CrawlReport", "CrawlSummary", "aggregate_report"]
