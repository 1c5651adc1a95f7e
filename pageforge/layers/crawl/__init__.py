"""Crawl Layer - URL naming and breadth-first site crawling."""

from pageforge.layers.crawl.path_analyzer import package_name, page_class_name, url_path
from pageforge.layers.crawl.site_crawler import CrawlResult, CrawlState, SiteCrawler

__all__ = [
    "package_name",
    "page_class_name",
    "url_path",
    "CrawlResult",
    "CrawlState",
    "SiteCrawler",
]
