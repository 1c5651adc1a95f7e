"""
Page Parser - The entry point for page-object generation.

Binds the collector, emitter, renderer, crawler and cookie store to one
WebDriver session.
"""

from threading import Lock
from types import MappingProxyType
from typing import Dict, List, Mapping, Optional, TYPE_CHECKING
import dataclasses
import logging
import os

from selenium.common.exceptions import WebDriverException

from pageforge.core.config import GeneratorConfig
from pageforge.core.errors import POMGenerationError
from pageforge.layers.crawl import CrawlResult, SiteCrawler, package_name
from pageforge.layers.generate import NameAllocator, PageArtifact, PageObjectEmitter, render_python
from pageforge.layers.generate.name_allocator import format_element_name
from pageforge.layers.generate.renderer import module_file_name
from pageforge.layers.sense import CollectedElement, ElementCollector, PopupCollector
from pageforge.layers.session import CookieLoadResult, CookieStore
from pageforge.reporters import CrawlReport

if TYPE_CHECKING:
    from selenium.webdriver.remote.webdriver import WebDriver

logger = logging.getLogger(__name__)


class PageParser:
    """
    Generates page objects from a live browser session.

    One parser serves one WebDriver. The session itself is not safe for
    concurrent navigation; the parser only guarantees that its element
    map is never corrupted when called from several threads.

    Example:
        >>> parser = PageParser(driver)
        >>> driver.get("https://example.com/login")
        >>> parser.parse_page()
        7
        >>> print(parser.render_pom())
        >>> parser.save_all_to_files("./generated", "https://example.com", max_depth=2)
    """

    def __init__(self, driver: "WebDriver", config: Optional[GeneratorConfig] = None):
        """
        Initialize the parser.

        Args:
            driver: Selenium WebDriver instance
            config: Generator configuration (defaults if omitted)
        """
        self.driver = driver
        self.config = config or GeneratorConfig()

        self.collector = ElementCollector()
        self.emitter = PageObjectEmitter(base_package=self.config.base_package)
        self.crawler = SiteCrawler(self.collector, self.emitter, timeout=self.config.timeout)
        self.popups = PopupCollector(timeout=self.config.timeout)
        self.cookies = CookieStore()

        self._elements: Dict[str, CollectedElement] = {}
        self._lock = Lock()

    def _current_url(self) -> str:
        try:
            return self.driver.current_url
        except WebDriverException:
            return "<unknown>"

    # Single page

    def parse_page(self) -> int:
        """
        Collect the elements of the current page, replacing the previous map.

        Returns:
            Number of elements collected

        Raises:
            PageParsingError: If the page cannot be scanned
        """
        elements = self.collector.collect(self.driver)
        with self._lock:
            self._elements = dict(elements)
        return len(elements)

    @property
    def elements_map(self) -> Mapping[str, CollectedElement]:
        """Read-only snapshot of the last parse."""
        with self._lock:
            return MappingProxyType(dict(self._elements))

    def generate_pom(self) -> PageArtifact:
        """
        Emit the page-object artifact for the current page.

        Parses the page first when nothing has been parsed yet.

        Raises:
            PageParsingError: If the page cannot be scanned
            POMGenerationError: If the page title or URL cannot be read
        """
        if not self.elements_map:
            self.parse_page()

        url = self._current_url()
        try:
            title = self.driver.title
            source_url = self.driver.current_url
        except WebDriverException as e:
            raise POMGenerationError(f"Failed to generate page object for {url}: {e}", url=url) from e

        return self.emitter.emit(title, source_url, self.elements_map)

    def render_pom(self) -> str:
        """Python source of the current page's page object."""
        return render_python(self.generate_pom())

    def handle_popup(self, popup_id: str) -> PageArtifact:
        """
        Emit a page object for a popup container on the current page.

        The class is named ``Popup<Id>`` and lives in a ``popups``
        sub-package of the page's package.

        Args:
            popup_id: id attribute of the popup container

        Raises:
            WaitTimeoutError: If the popup never becomes visible
            POMGenerationError: If the page URL cannot be read
        """
        elements = self.popups.collect(self.driver, popup_id)
        url = self._current_url()
        try:
            title = self.driver.title
        except WebDriverException as e:
            raise POMGenerationError(f"Failed to generate popup '{popup_id}' on {url}: {e}", url=url) from e

        name = format_element_name(popup_id)
        page_package = package_name(url, base=self.config.base_package)
        return self.emitter.emit(
            title,
            url,
            elements,
            class_name="Popup" + name[:1].upper() + name[1:],
            package=f"{page_package}.popups",
        )

    # Whole site

    def generate_pom_for_all_paths(self, base_url: str, max_depth: Optional[int] = None) -> CrawlResult:
        """
        Crawl from ``base_url`` and emit an artifact per reachable page.

        Args:
            base_url: Start URL
            max_depth: Depth bound (config value if omitted)
        """
        depth = self.config.max_depth if max_depth is None else max_depth
        return self.crawler.crawl(self.driver, base_url, depth)

    def write_artifact(self, artifact: PageArtifact, base_directory: str) -> str:
        """
        Write one artifact as a module under its package directory.

        Every directory on the package path gets an ``__init__.py``.

        Returns:
            Path of the written module

        Raises:
            POMGenerationError: If the file cannot be written
        """
        package_dir = os.path.join(base_directory, *artifact.package.split("."))
        file_path = os.path.join(package_dir, module_file_name(artifact.class_name))
        try:
            os.makedirs(package_dir, exist_ok=True)
            current = base_directory
            for part in artifact.package.split("."):
                current = os.path.join(current, part)
                init_path = os.path.join(current, "__init__.py")
                if not os.path.exists(init_path):
                    with open(init_path, "w", encoding="utf-8"):
                        pass
            with open(file_path, "w", encoding="utf-8") as f:
                f.write(render_python(artifact))
        except OSError as e:
            raise POMGenerationError(
                f"Failed to write {artifact.class_name} for {artifact.source_url}: {e}",
                url=artifact.source_url,
            ) from e

        logger.info(f"[PageParser] Saved {artifact.class_name} to {file_path}")
        return file_path

    def save_all_to_files(
        self,
        base_directory: Optional[str] = None,
        base_url: Optional[str] = None,
        max_depth: Optional[int] = None,
    ) -> List[str]:
        """
        Crawl the site and write every page object plus ``crawl_report.json``.

        Class names repeated within one package are suffixed (``ListPage2``).

        Args:
            base_directory: Output root (config ``output_dir`` if omitted)
            base_url: Start URL (the current page if omitted)
            max_depth: Depth bound (config value if omitted)

        Returns:
            Paths of the written modules
        """
        base_directory = base_directory or self.config.output_dir
        base_url = base_url or self._current_url()
        depth = self.config.max_depth if max_depth is None else max_depth

        result = self.generate_pom_for_all_paths(base_url, depth)
        report = CrawlReport.from_result(result, max_depth=depth)

        class_names: Dict[str, NameAllocator] = {}
        written = []
        for path, artifact in result.items():
            names = class_names.setdefault(artifact.package, NameAllocator())
            class_name = names.reserve(artifact.class_name)
            if class_name != artifact.class_name:
                logger.warning(f"[PageParser] {artifact.class_name} already used in {artifact.package}; renamed to {class_name}")
                artifact = dataclasses.replace(artifact, class_name=class_name)
            file_path = self.write_artifact(artifact, base_directory)
            report.add_file(path, file_path)
            written.append(file_path)

        try:
            report.write(base_directory)
        except OSError as e:
            raise POMGenerationError(f"Failed to write crawl report for {base_url}: {e}", url=base_url) from e

        logger.info(f"[PageParser] Wrote {len(written)} page objects to {base_directory}")
        return written

    # Cookies

    def save_cookies(self, path: str) -> int:
        """Save the session's cookies to ``path``."""
        return self.cookies.save(self.driver, path)

    def load_cookies(self, path: str) -> CookieLoadResult:
        """Add the cookies saved in ``path`` to the session."""
        return self.cookies.load(self.driver, path)
