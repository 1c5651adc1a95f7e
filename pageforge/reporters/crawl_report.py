"""
Crawl Report - JSON summary of a crawl.

Records which URLs were visited, which paths were discovered, which
modules were written and which pages failed, next to the generated code.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional, TYPE_CHECKING
import json
import logging
import os

if TYPE_CHECKING:
    from pageforge.layers.crawl.site_crawler import CrawlResult

logger = logging.getLogger(__name__)

REPORT_FILE_NAME = "crawl_report.json"


@dataclass
class GeneratedPage:
    """One page object produced by the crawl."""
    path: str
    class_name: str
    package: str
    source_url: str
    element_count: int
    file_path: Optional[str] = None


@dataclass
class CrawlReport:
    """
    Summary of one crawl.

    Example:
        >>> report = CrawlReport.from_result(result, max_depth=2)
        >>> report.add_file("/", "out/pages/com/example/home_page.py")
        >>> report.write("out")
        'out/crawl_report.json'
    """
    base_url: str
    max_depth: int
    visited_urls: List[str] = field(default_factory=list)
    discovered_paths: List[str] = field(default_factory=list)
    pages: List[GeneratedPage] = field(default_factory=list)
    errors: Dict[str, str] = field(default_factory=dict)
    start_time: str = field(default_factory=lambda: datetime.now().isoformat())
    end_time: Optional[str] = None

    @classmethod
    def from_result(cls, result: "CrawlResult", max_depth: int) -> "CrawlReport":
        """Create from a CrawlResult."""
        state = result.state
        report = cls(
            base_url=result.base_url,
            max_depth=max_depth,
            visited_urls=list(state.processed_urls),
            discovered_paths=sorted(state.discovered_paths),
            errors=dict(state.errors),
            start_time=state.started_at,
            end_time=state.finished_at,
        )
        for path, artifact in result.items():
            report.pages.append(GeneratedPage(
                path=path,
                class_name=artifact.class_name,
                package=artifact.package,
                source_url=artifact.source_url,
                element_count=len(artifact.elements),
            ))
        return report

    def add_file(self, path: str, file_path: str) -> None:
        """Record the module written for the page at ``path``."""
        for page in self.pages:
            if page.path == path:
                page.file_path = file_path
                return
        logger.warning(f"[CrawlReport] No generated page for path {path}")

    @property
    def undiscovered_pages(self) -> List[str]:
        """Paths seen as links but not generated (beyond depth or failed)."""
        generated = {page.path for page in self.pages}
        return [path for path in self.discovered_paths if path not in generated]

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "metadata": {
                "base_url": self.base_url,
                "max_depth": self.max_depth,
                "start_time": self.start_time,
                "end_time": self.end_time,
            },
            "visited_urls": self.visited_urls,
            "discovered_paths": self.discovered_paths,
            "not_generated": self.undiscovered_pages,
            "pages": [
                {
                    "path": page.path,
                    "class_name": page.class_name,
                    "package": page.package,
                    "source_url": page.source_url,
                    "element_count": page.element_count,
                    "file_path": page.file_path,
                }
                for page in self.pages
            ],
            "errors": self.errors,
        }

    def write(self, output_dir: str) -> str:
        """
        Write the report as JSON.

        Args:
            output_dir: Directory to write ``crawl_report.json`` into

        Returns:
            Path to the report
        """
        if self.end_time is None:
            self.end_time = datetime.now().isoformat()
        os.makedirs(output_dir, exist_ok=True)
        report_path = os.path.join(output_dir, REPORT_FILE_NAME)
        with open(report_path, "w", encoding="utf-8") as f:
            json.dump(self.to_dict(), f, indent=2)
        logger.info(f"[CrawlReport] Report written to {report_path}")
        return report_path
