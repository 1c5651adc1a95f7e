"""
Site Crawler - Breadth-first page-object generation.

Visits same-origin links breadth-first up to a depth bound and emits a
page-object artifact for every page it reaches.
"""

from collections import deque
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime
from typing import Deque, Dict, Iterator, List, Optional, Set, Tuple, TYPE_CHECKING
from urllib.parse import urldefrag, urljoin, urlparse
import logging

from selenium.common.exceptions import TimeoutException, WebDriverException
from selenium.webdriver.common.by import By
from selenium.webdriver.support.ui import WebDriverWait

from pageforge.core.errors import NavigationError, PageForgeError, WaitTimeoutError
from pageforge.layers.crawl.path_analyzer import url_path
from pageforge.layers.generate.emitter import PageArtifact, PageObjectEmitter
from pageforge.layers.sense.element_collector import TRANSIENT_ERRORS, ElementCollector

if TYPE_CHECKING:
    from selenium.webdriver.remote.webdriver import WebDriver

logger = logging.getLogger(__name__)


@dataclass
class CrawlState:
    """
    Mutable state of one crawl.

    Created per ``crawl`` call and threaded through the loop; no URL is
    enqueued twice because membership in ``visited_urls`` is checked first.
    """
    visited_urls: Set[str] = field(default_factory=set)
    discovered_paths: Set[str] = field(default_factory=set)
    frontier: Deque[Tuple[str, int]] = field(default_factory=deque)
    processed_urls: List[str] = field(default_factory=list)
    errors: Dict[str, str] = field(default_factory=dict)  # url -> message
    started_at: str = field(default_factory=lambda: datetime.now().isoformat())
    finished_at: Optional[str] = None

    def enqueue(self, url: str, depth: int) -> bool:
        """Add ``url`` to the frontier unless it was already seen."""
        if url in self.visited_urls:
            return False
        self.visited_urls.add(url)
        self.frontier.append((url, depth))
        return True


class CrawlResult(Mapping):
    """
    Read-only mapping of path to generated PageArtifact.

    Also exposes the final ``state`` so callers can compare the generated
    pages with every path the crawl discovered.
    """

    def __init__(self, base_url: str, artifacts: Dict[str, PageArtifact], state: CrawlState):
        self.base_url = base_url
        self._artifacts = dict(artifacts)
        self.state = state

    def __getitem__(self, path: str) -> PageArtifact:
        return self._artifacts[path]

    def __iter__(self) -> Iterator[str]:
        return iter(self._artifacts)

    def __len__(self) -> int:
        return len(self._artifacts)

    @property
    def by_class_name(self) -> Dict[str, PageArtifact]:
        """Artifacts keyed by class name (for ArtifactPage navigation)."""
        return {artifact.class_name: artifact for artifact in self._artifacts.values()}

    def __repr__(self) -> str:
        return f"CrawlResult({self.base_url!r}, pages={len(self)}, discovered={len(self.state.discovered_paths)})"


def normalize_url(url: str) -> str:
    """Drop the fragment; ``a#x`` and ``a#y`` are the same document."""
    return urldefrag(url).url


def is_crawlable(href: Optional[str]) -> bool:
    """Non-empty, not ``javascript:`` and not a fragment-only link."""
    if not href or not href.strip():
        return False
    href = href.strip()
    return not (href.lower().startswith("javascript:") or href.startswith("#"))


def same_origin(url: str, base_url: str) -> bool:
    first, second = urlparse(url), urlparse(base_url)
    return (first.scheme, first.netloc) == (second.scheme, second.netloc)


class SiteCrawler:
    """
    Breadth-first crawler generating one artifact per page.

    Example:
        >>> crawler = SiteCrawler(timeout=10)
        >>> result = crawler.crawl(driver, "https://example.com", max_depth=2)
        >>> sorted(result)
        ['/', '/about', '/contact']
        >>> sorted(result.state.discovered_paths)
        ['/', '/about', '/blog/first-post', '/contact']
    """

    def __init__(
        self,
        collector: Optional[ElementCollector] = None,
        emitter: Optional[PageObjectEmitter] = None,
        timeout: float = 10.0,
    ):
        """
        Initialize the crawler.

        Args:
            collector: Element collector (default chain if omitted)
            emitter: Page-object emitter
            timeout: Seconds to wait for each document to finish loading
        """
        self.collector = collector or ElementCollector()
        self.emitter = emitter or PageObjectEmitter()
        self.timeout = timeout

    def crawl(self, driver: "WebDriver", base_url: str, max_depth: int) -> CrawlResult:
        """
        Crawl ``base_url`` breadth-first.

        Nodes are processed while ``depth < max_depth``; a node is only
        enqueued at ``depth + 1 < max_depth``. Every same-origin path seen
        is recorded in ``state.discovered_paths`` even past the cutoff.
        Per-page failures are logged, recorded in ``state.errors`` and
        skipped.

        Args:
            driver: Selenium WebDriver
            base_url: Start URL; also defines the origin to stay on
            max_depth: Depth bound (0 visits nothing)

        Returns:
            CrawlResult mapping path to PageArtifact
        """
        if max_depth < 0:
            raise ValueError(f"max_depth must be >= 0, got {max_depth}")

        logger.info(f"[SiteCrawler] Crawling {base_url} with max depth {max_depth}")
        state = CrawlState()
        artifacts: Dict[str, PageArtifact] = {}

        start = normalize_url(base_url)
        state.enqueue(start, 0)
        state.discovered_paths.add(url_path(start))

        while state.frontier:
            url, depth = state.frontier.popleft()
            if depth >= max_depth:
                continue

            try:
                artifact = self._visit(driver, url)
                links = self._links(driver, url)
            except PageForgeError as e:
                logger.warning(f"[SiteCrawler] Skipping {url}: {e}")
                state.errors[url] = str(e)
                continue

            state.processed_urls.append(url)
            artifacts[url_path(url)] = artifact

            for link in links:
                if not same_origin(link, base_url):
                    continue
                state.discovered_paths.add(url_path(link))
                if depth + 1 < max_depth and state.enqueue(link, depth + 1):
                    logger.debug(f"[SiteCrawler] Enqueued {link} at depth {depth + 1}")

        state.finished_at = datetime.now().isoformat()
        logger.info(
            f"[SiteCrawler] Generated {len(artifacts)} page objects, "
            f"discovered {len(state.discovered_paths)} paths"
        )
        return CrawlResult(base_url, artifacts, state)

    def _visit(self, driver: "WebDriver", url: str) -> PageArtifact:
        """Navigate to ``url``, wait for it to load and emit its artifact."""
        try:
            driver.get(url)
        except WebDriverException as e:
            raise NavigationError(f"Failed to navigate to {url}: {e}", url=url) from e

        try:
            WebDriverWait(driver, self.timeout).until(
                lambda d: d.execute_script("return document.readyState") == "complete"
            )
        except TimeoutException as e:
            raise WaitTimeoutError(
                f"Document at {url} not complete after {self.timeout}s",
                condition="document ready",
                timeout=self.timeout,
                url=url,
            ) from e
        except WebDriverException as e:
            raise NavigationError(f"Failed waiting for {url} to load: {e}", url=url) from e

        elements = self.collector.collect(driver)
        try:
            title = driver.title
        except WebDriverException as e:
            raise NavigationError(f"Failed to read title of {url}: {e}", url=url) from e
        return self.emitter.emit(title, url, elements)

    def _links(self, driver: "WebDriver", url: str) -> List[str]:
        """Absolute, fragment-free hrefs of every crawlable anchor on the page."""
        try:
            anchors = driver.find_elements(By.TAG_NAME, "a")
        except WebDriverException as e:
            raise NavigationError(f"Failed to list links on {url}: {e}", url=url) from e

        links = []
        for anchor in anchors:
            try:
                href = anchor.get_attribute("href")
            except TRANSIENT_ERRORS:
                logger.debug("[SiteCrawler] Stale link skipped")
                continue
            if is_crawlable(href):
                links.append(normalize_url(urljoin(url, href.strip())))
        return links
