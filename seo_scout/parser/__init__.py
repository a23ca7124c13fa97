"""seo_scout.parser: извлечение SEO-сигналов из HTML."""

from .html_parser import PageSignals, extract_signals

__all__ = ["PageSignals", "extract_signals"]
