#!/usr/bin/env python3
"""
Site Crawl Example
==================

This example crawls a site breadth-first and writes one page-object
module per page, plus crawl_report.json.

Usage:
    python examples/crawl_site.py https://example.com 2
"""

import logging
import sys

from pageforge import GeneratorConfig, PageParser
from pageforge.core import browser_session


def main():
    """Crawl the given URL to the given depth."""
    url = sys.argv[1] if len(sys.argv) > 1 else "https://example.com"
    depth = int(sys.argv[2]) if len(sys.argv) > 2 else 2

    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(message)s")

    config = GeneratorConfig(max_depth=depth, output_dir="./generated_pages")

    with browser_session(headless=config.headless) as driver:
        parser = PageParser(driver, config)
        files = parser.save_all_to_files(config.output_dir, url)

    print()
    print(f"Wrote {len(files)} page objects:")
    for path in files:
        print(f"  {path}")


if __name__ == "__main__":
    main()
