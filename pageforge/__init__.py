"""
pageforge - Page-object generation from live web pages.

Scans a page (or a whole site, breadth-first) through Selenium and emits
page-object classes with waiting accessors for every interactive element.
"""

__version__ = "0.1.0"

from pageforge.core.page_parser import PageParser
from pageforge.core.config import GeneratorConfig

__all__ = [
    "PageParser",
    "GeneratorConfig",
    "__version__",
]
