"""
SeoScout package initializer.
Defines package version and exposes the crawler API and CLI.
"""
__version__ = "0.1.0"

from seo_scout.config import CrawlConfig, load_config
from seo_scout.crawler.crawler import SiteCrawler, crawl_site
from seo_scout.crawler.models import ERROR_MARKER, InvalidStartUrl, PageRecord
from seo_scout.cli import cli

__all__ = [
    "__version__",
    "CrawlConfig",
    "load_config",
    "SiteCrawler",
    "crawl_site",
    "PageRecord",
    "ERROR_MARKER",
    "InvalidStartUrl",
    "cli",
]
