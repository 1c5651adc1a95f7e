"""
Element Collector - Keyed element discovery.

Runs an ordered chain of collection strategies (id > name > class >
tag-position) over the main document and then over every iframe,
producing one stable key per interactive element.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, replace
from typing import Any, Dict, List, Optional, Sequence, Set, TYPE_CHECKING
import logging

from selenium.common.exceptions import (
    NoSuchElementException,
    StaleElementReferenceException,
    TimeoutException,
    WebDriverException,
)
from selenium.webdriver.common.by import By
from selenium.webdriver.support import expected_conditions as EC
from selenium.webdriver.support.ui import WebDriverWait

from pageforge.core.errors import PageParsingError, WaitTimeoutError
from pageforge.core.frames import frame_context
from pageforge.layers.sense.locator_inference import KeyTier, NAME_PREFIX

if TYPE_CHECKING:
    from selenium.webdriver.remote.webdriver import WebDriver
    from selenium.webdriver.remote.webelement import WebElement

logger = logging.getLogger(__name__)

# A single element disappearing mid-collection is skipped, not fatal
TRANSIENT_ERRORS = (StaleElementReferenceException, NoSuchElementException)


@dataclass(frozen=True)
class CollectedElement:
    """
    An element handle paired with its collection key.

    Tag name, input type and href are read once during collection; the
    handle itself goes stale as soon as the page navigates.
    """
    key: str
    element: Any  # WebElement, only valid in its own document/frame
    tier: KeyTier
    tag_name: str
    input_type: Optional[str] = None
    href: Optional[str] = None
    frame_index: Optional[int] = None


def snapshot(element: "WebElement", key: str, tier: KeyTier) -> CollectedElement:
    """Read the metadata emission needs from a live element."""
    tag_name = (element.tag_name or "").lower()
    input_type = element.get_attribute("type") if tag_name == "input" else None
    href = element.get_attribute("href") if tag_name == "a" else None
    return CollectedElement(
        key=key,
        element=element,
        tier=tier,
        tag_name=tag_name,
        input_type=input_type,
        href=href,
    )


def _attribute(element: "WebElement", name: str) -> str:
    return (element.get_attribute(name) or "").strip()


class CollectionStrategy(ABC):
    """Stateless rule deriving element keys from one kind of attribute."""

    tier: KeyTier

    @abstractmethod
    def collect(self, driver: "WebDriver") -> List[CollectedElement]:
        """
        Collect elements from the current document/frame.

        Args:
            driver: Selenium WebDriver positioned in the document to scan

        Returns:
            Collected elements in document order
        """


class IdStrategy(CollectionStrategy):
    """Key = the element's id."""

    tier = KeyTier.ID

    def collect(self, driver: "WebDriver") -> List[CollectedElement]:
        collected = []
        for element in driver.find_elements(By.XPATH, "//*[@id]"):
            try:
                element_id = _attribute(element, "id")
                if element_id:
                    collected.append(snapshot(element, element_id, self.tier))
            except TRANSIENT_ERRORS:
                logger.debug("[IdStrategy] Stale element skipped")
        logger.info(f"[ElementCollector] Collected {len(collected)} elements by id")
        return collected


class NameStrategy(CollectionStrategy):
    """Key = ``name_`` + the element's name attribute."""

    tier = KeyTier.NAME

    def collect(self, driver: "WebDriver") -> List[CollectedElement]:
        collected = []
        for element in driver.find_elements(By.XPATH, "//*[@name]"):
            try:
                name = _attribute(element, "name")
                if name:
                    collected.append(snapshot(element, NAME_PREFIX + name, self.tier))
            except TRANSIENT_ERRORS:
                logger.debug("[NameStrategy] Stale element skipped")
        logger.info(f"[ElementCollector] Collected {len(collected)} elements by name")
        return collected


class ClassStrategy(CollectionStrategy):
    """Key = first class token + ``_`` + tag name."""

    tier = KeyTier.CLASS

    def collect(self, driver: "WebDriver") -> List[CollectedElement]:
        collected = []
        for element in driver.find_elements(By.XPATH, "//*[@class]"):
            try:
                tokens = _attribute(element, "class").split()
                if tokens:
                    key = f"{tokens[0]}_{(element.tag_name or '').lower()}"
                    collected.append(snapshot(element, key, self.tier))
            except TRANSIENT_ERRORS:
                logger.debug("[ClassStrategy] Stale element skipped")
        logger.info(f"[ElementCollector] Collected {len(collected)} elements by class")
        return collected


class TagPositionStrategy(CollectionStrategy):
    """
    Key = tag + position, for interactive elements without id or class.

    The position is the element's index among all elements of that tag in
    document order, so ``(//tag)[position + 1]`` finds it again.
    """

    tier = KeyTier.TAG
    INTERESTING_TAGS = ["a", "button", "input", "select", "textarea", "form"]

    def collect(self, driver: "WebDriver") -> List[CollectedElement]:
        collected = []
        for tag in self.INTERESTING_TAGS:
            count = 0
            for position, element in enumerate(driver.find_elements(By.TAG_NAME, tag)):
                try:
                    if not _attribute(element, "id") and not _attribute(element, "class"):
                        collected.append(snapshot(element, f"{tag}_{position}", self.tier))
                        count += 1
                except TRANSIENT_ERRORS:
                    logger.debug("[TagPositionStrategy] Stale element skipped")
            logger.debug(f"[ElementCollector] Collected {count} elements with tag {tag}")
        logger.info(f"[ElementCollector] Collected {len(collected)} elements by tag position")
        return collected


def default_strategies() -> List[CollectionStrategy]:
    """The strategy chain in order of specificity."""
    return [IdStrategy(), NameStrategy(), ClassStrategy(), TagPositionStrategy()]


def _current_url(driver: "WebDriver") -> str:
    try:
        return driver.current_url
    except WebDriverException:
        return "<unknown>"


class ElementCollector:
    """
    Collects every keyed element of the current page.

    Each element is keyed by the first strategy that applies to it;
    lower tiers never re-key an element a higher tier already claimed.
    If two elements derive the same key, the later one wins.

    Example:
        >>> collector = ElementCollector()
        >>> elements = collector.collect(driver)
        >>> for key, item in elements.items():
        ...     print(key, item.tag_name)
    """

    def __init__(self, strategies: Optional[Sequence[CollectionStrategy]] = None):
        """
        Initialize the collector.

        Args:
            strategies: Ordered strategy chain (defaults to id, name, class, tag)
        """
        self.strategies: List[CollectionStrategy] = list(strategies or default_strategies())
        logger.info(f"[ElementCollector] Initialized with {len(self.strategies)} strategies")

    def collect(self, driver: "WebDriver") -> Dict[str, CollectedElement]:
        """
        Collect elements from the main document and all iframes.

        Args:
            driver: Selenium WebDriver on the page to scan

        Returns:
            Mapping of element key to CollectedElement, in collection order

        Raises:
            PageParsingError: If the main document cannot be scanned
        """
        url = _current_url(driver)
        logger.info(f"[ElementCollector] Collecting elements from page: {url}")

        try:
            driver.switch_to.default_content()
            elements = self._collect_document(driver)
        except WebDriverException as e:
            raise PageParsingError(f"Failed to collect elements from {url}: {e}", url=url) from e

        self._collect_iframes(driver, elements)

        logger.info(f"[ElementCollector] Collected {len(elements)} elements from page")
        return elements

    def _collect_document(self, driver: "WebDriver") -> Dict[str, CollectedElement]:
        """Run the strategy chain over the current document or frame."""
        elements: Dict[str, CollectedElement] = {}
        claimed: Set[Any] = set()

        for strategy in self.strategies:
            for item in strategy.collect(driver):
                handle_id = item.element.id
                if handle_id in claimed:
                    continue
                claimed.add(handle_id)
                if item.key in elements:
                    logger.debug(f"[ElementCollector] Key collision on '{item.key}', keeping the later element")
                elements[item.key] = item

        return elements

    def _collect_iframes(self, driver: "WebDriver", elements: Dict[str, CollectedElement]) -> None:
        """Collect from each iframe, prefixing keys with ``iframe<index>_``."""
        try:
            iframes = driver.find_elements(By.TAG_NAME, "iframe")
        except WebDriverException as e:
            logger.error(f"[ElementCollector] Error listing iframes: {e}")
            return

        logger.info(f"[ElementCollector] Found {len(iframes)} iframes on page")

        for index, iframe in enumerate(iframes):
            try:
                with frame_context(driver, iframe):
                    frame_elements = self._collect_document(driver)
            except WebDriverException as e:
                logger.warning(f"[ElementCollector] Error collecting elements from iframe {index}: {e}")
                continue

            for item in frame_elements.values():
                key = f"iframe{index}_{item.key}"
                elements[key] = replace(item, key=key, frame_index=index)


class PopupCollector:
    """
    Collects the elements inside a popup container.

    Descendants are keyed by id, else by first class token + tag.

    Example:
        >>> elements = PopupCollector(timeout=5).collect(driver, "login-modal")
    """

    def __init__(self, timeout: float = 10.0):
        self.timeout = timeout

    def collect(self, driver: "WebDriver", popup_id: str) -> Dict[str, CollectedElement]:
        """
        Wait for the popup to be visible and collect its descendants.

        Args:
            driver: Selenium WebDriver
            popup_id: id attribute of the popup container

        Returns:
            Mapping of element key to CollectedElement

        Raises:
            WaitTimeoutError: If the popup never becomes visible
            PageParsingError: If the popup cannot be scanned
        """
        url = _current_url(driver)
        logger.info(f"[PopupCollector] Parsing popup with id: {popup_id}")

        try:
            container = WebDriverWait(driver, self.timeout).until(
                EC.visibility_of_element_located((By.ID, popup_id))
            )
        except TimeoutException as e:
            raise WaitTimeoutError(
                f"Popup '{popup_id}' not visible after {self.timeout}s on {url}",
                locator=f"id={popup_id}",
                condition="visible",
                timeout=self.timeout,
                url=url,
            ) from e

        elements: Dict[str, CollectedElement] = {}
        try:
            descendants = container.find_elements(By.XPATH, ".//*")
        except WebDriverException as e:
            raise PageParsingError(f"Failed to parse popup '{popup_id}' on {url}: {e}", url=url) from e

        for element in descendants:
            try:
                element_id = _attribute(element, "id")
                tokens = _attribute(element, "class").split()
                if element_id:
                    elements[element_id] = snapshot(element, element_id, KeyTier.ID)
                elif tokens:
                    key = f"{tokens[0]}_{(element.tag_name or '').lower()}"
                    elements[key] = snapshot(element, key, KeyTier.CLASS)
            except TRANSIENT_ERRORS:
                logger.debug("[PopupCollector] Stale element skipped")

        logger.info(f"[PopupCollector] Collected {len(elements)} elements from popup")
        return elements
