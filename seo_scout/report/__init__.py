"""seo_scout.report: Сохранение отчёта обхода в JSON и HTML."""

from __future__ import annotations

from seo_scout.report.html_report import DEFAULT_TEMPLATE_DIR, render_html
from seo_scout.report.json_report import render_json

__all__ = ["DEFAULT_TEMPLATE_DIR", "render_json", "render_html"]
