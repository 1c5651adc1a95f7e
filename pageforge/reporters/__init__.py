"""Reporters - Crawl summaries."""

from pageforge.reporters.crawl_report import CrawlReport

__all__ = ["CrawlReport"]
