"""
Page Object Runtime - Waiting accessors for generated page objects.

Generated page-object classes subclass ``BasePage``; ``ArtifactPage``
binds a ``PageArtifact`` to a live driver without generating code.
Reads first wait until their element is visible and actions until it
is clickable; either raises ``WaitTimeoutError`` if it never gets there.
"""

from contextlib import contextmanager
from typing import Any, Callable, Dict, Iterator, Mapping, Optional, Type, TYPE_CHECKING
import logging

from selenium.common.exceptions import (
    InvalidSelectorException,
    StaleElementReferenceException,
    TimeoutException,
    WebDriverException,
)
from selenium.webdriver.common.by import By
from selenium.webdriver.support.select import Select
from selenium.webdriver.support.ui import WebDriverWait

from pageforge.core.errors import ElementNotFoundError, PageIdentityError, WaitTimeoutError
from pageforge.core.frames import frame_context
from pageforge.layers.generate.emitter import OperationKind, PageArtifact, WaitCondition
from pageforge.layers.sense.locator_inference import LocatorSpec

if TYPE_CHECKING:
    from selenium.webdriver.remote.webdriver import WebDriver
    from selenium.webdriver.remote.webelement import WebElement

logger = logging.getLogger(__name__)


class BasePage:
    """
    Base class for page objects.

    Subclasses set ``PAGE_TITLE`` to have the constructor verify that the
    live page title contains it. Subclasses are registered by class name
    so navigation methods can open the next page with ``open_page``.

    Example:
        >>> class LoginPage(BasePage):
        ...     PAGE_TITLE = "Sign in"
        ...     USER = LocatorSpec(LocatorKind.ID, "user")
        ...     def enter_user(self, text):
        ...         return self.set_value(self.USER, text)
        >>> LoginPage(driver).enter_user("admin")
    """

    PAGE_TITLE: Optional[str] = None
    SOURCE_URL: Optional[str] = None
    DEFAULT_TIMEOUT = 10.0

    _registry: Dict[str, Type["BasePage"]] = {}

    def __init_subclass__(cls, register: bool = True, **kwargs: Any):
        super().__init_subclass__(**kwargs)
        if register:
            if cls.__name__ in BasePage._registry:
                logger.debug(f"[BasePage] Re-registering page class {cls.__name__}")
            BasePage._registry[cls.__name__] = cls

    def __init__(self, driver: "WebDriver", timeout: float = DEFAULT_TIMEOUT):
        """
        Bind the page object to a driver.

        Args:
            driver: Selenium WebDriver on the page
            timeout: Seconds to wait for elements before each action

        Raises:
            PageIdentityError: If PAGE_TITLE is set and the live title lacks it
        """
        self.driver = driver
        self.timeout = timeout
        self.verify_identity()

    def verify_identity(self) -> None:
        """Fail fast when the driver is not on this page."""
        expected = self.PAGE_TITLE
        if not expected:
            return
        actual = self.driver.title or ""
        if expected not in actual:
            url = self.driver.current_url
            raise PageIdentityError(
                f"This is not the {type(self).__name__} page (expected title containing "
                f"'{expected}', got '{actual}'). Current page is: {url}",
                expected_title=expected,
                actual_title=actual,
                url=url,
            )

    # Element resolution

    def _wait_for(self, locator: LocatorSpec, condition: WaitCondition) -> "WebElement":
        """Wait until the element reaches ``condition`` and return it."""
        by, value = locator.to_by()
        position = locator.index or 0

        def ready(driver: "WebDriver"):
            try:
                found = driver.find_elements(by, value)
                if position >= len(found):
                    return False
                element = found[position]
                if not element.is_displayed():
                    return False
                if condition == WaitCondition.CLICKABLE and not element.is_enabled():
                    return False
                return element
            except StaleElementReferenceException:
                return False

        try:
            return WebDriverWait(self.driver, self.timeout).until(ready)
        except TimeoutException as e:
            url = self.driver.current_url
            raise WaitTimeoutError(
                f"Element {locator} not {condition.value} after {self.timeout}s on {url}",
                locator=locator,
                condition=condition.value,
                timeout=self.timeout,
                url=url,
            ) from e
        except InvalidSelectorException as e:
            raise ElementNotFoundError(
                f"Locator {locator} is not a valid selector on {self.driver.current_url}: {e.msg}"
            ) from e

    @contextmanager
    def _located(self, locator: LocatorSpec, condition: WaitCondition) -> Iterator["WebElement"]:
        """Yield the element, entering its iframe first when it lives in one."""
        if locator.frame_index is None:
            yield self._wait_for(locator, condition)
            return

        self.driver.switch_to.default_content()
        frames = self.driver.find_elements(By.TAG_NAME, "iframe")
        if locator.frame_index >= len(frames):
            raise ElementNotFoundError(
                f"Iframe {locator.frame_index} for {locator} not found on {self.driver.current_url}"
            )
        with frame_context(self.driver, frames[locator.frame_index]):
            yield self._wait_for(locator.in_frame(), condition)

    def _scroll_into_view(self, element: "WebElement") -> None:
        """Scroll an element into the viewport."""
        try:
            self.driver.execute_script(
                "arguments[0].scrollIntoView({block: 'center', inline: 'nearest'});",
                element,
            )
        except WebDriverException as e:
            logger.debug(f"[BasePage] scrollIntoView failed: {e}")

    # Text fields

    def set_value(self, locator: LocatorSpec, text: str) -> "BasePage":
        """Clear the field and type ``text`` into it."""
        with self._located(locator, WaitCondition.CLICKABLE) as element:
            element.clear()
            element.send_keys(text)
        return self

    def get_value(self, locator: LocatorSpec) -> Optional[str]:
        with self._located(locator, WaitCondition.VISIBLE) as element:
            return element.get_attribute("value")

    # Checkboxes and radios

    def check(self, locator: LocatorSpec) -> "BasePage":
        """Select the element unless it is already selected."""
        with self._located(locator, WaitCondition.CLICKABLE) as element:
            if not element.is_selected():
                element.click()
        return self

    def uncheck(self, locator: LocatorSpec) -> "BasePage":
        """Deselect the element if it is selected."""
        with self._located(locator, WaitCondition.CLICKABLE) as element:
            if element.is_selected():
                element.click()
        return self

    def is_checked(self, locator: LocatorSpec) -> bool:
        with self._located(locator, WaitCondition.VISIBLE) as element:
            return element.is_selected()

    # Buttons, links and generic elements

    def click(self, locator: LocatorSpec) -> "BasePage":
        with self._located(locator, WaitCondition.CLICKABLE) as element:
            self._scroll_into_view(element)
            element.click()
        return self

    def is_enabled(self, locator: LocatorSpec) -> bool:
        with self._located(locator, WaitCondition.VISIBLE) as element:
            return element.is_enabled()

    def get_href(self, locator: LocatorSpec) -> Optional[str]:
        with self._located(locator, WaitCondition.VISIBLE) as element:
            return element.get_attribute("href")

    def get_text(self, locator: LocatorSpec) -> str:
        with self._located(locator, WaitCondition.VISIBLE) as element:
            return element.text

    # Dropdowns

    def select_by_text(self, locator: LocatorSpec, text: str) -> "BasePage":
        with self._located(locator, WaitCondition.CLICKABLE) as element:
            Select(element).select_by_visible_text(text)
        return self

    def select_by_value(self, locator: LocatorSpec, value: str) -> "BasePage":
        with self._located(locator, WaitCondition.CLICKABLE) as element:
            Select(element).select_by_value(value)
        return self

    def get_selected_text(self, locator: LocatorSpec) -> str:
        with self._located(locator, WaitCondition.VISIBLE) as element:
            return Select(element).first_selected_option.text

    # Navigation

    def open_page(self, class_name: str) -> Optional["BasePage"]:
        """
        Instantiate the page object the browser just navigated to.

        Args:
            class_name: Name of a loaded BasePage subclass

        Returns:
            The page object, or None if no such class has been loaded
        """
        page_class = BasePage._registry.get(class_name)
        if page_class is None:
            logger.warning(f"[BasePage] Page class {class_name} is not loaded; import its module first")
            return None
        return page_class(self.driver, timeout=self.timeout)

    def navigate(self, locator: LocatorSpec, class_name: str) -> Optional["BasePage"]:
        """Click a link and open the page object for its target."""
        self.click(locator)
        return self.open_page(class_name)


_DISPATCH: Dict[OperationKind, Callable[..., Any]] = {
    OperationKind.SET_VALUE: BasePage.set_value,
    OperationKind.GET_VALUE: BasePage.get_value,
    OperationKind.CHECK: BasePage.check,
    OperationKind.UNCHECK: BasePage.uncheck,
    OperationKind.IS_CHECKED: BasePage.is_checked,
    OperationKind.CLICK: BasePage.click,
    OperationKind.IS_ENABLED: BasePage.is_enabled,
    OperationKind.GET_HREF: BasePage.get_href,
    OperationKind.SELECT_BY_TEXT: BasePage.select_by_text,
    OperationKind.SELECT_BY_VALUE: BasePage.select_by_value,
    OperationKind.GET_SELECTED_TEXT: BasePage.get_selected_text,
    OperationKind.GET_TEXT: BasePage.get_text,
}


class ArtifactPage(BasePage, register=False):
    """
    A PageArtifact bound to a live driver.

    Example:
        >>> page = ArtifactPage(driver, artifact)
        >>> page.perform("q", "setValue", "selenium")
        >>> page.perform("goBtn", OperationKind.CLICK)
    """

    def __init__(
        self,
        driver: "WebDriver",
        artifact: PageArtifact,
        pages: Optional[Mapping[str, PageArtifact]] = None,
        timeout: float = BasePage.DEFAULT_TIMEOUT,
    ):
        """
        Args:
            driver: Selenium WebDriver on the artifact's page
            artifact: Artifact to bind
            pages: Artifacts by class name, used to open navigation targets
            timeout: Seconds to wait for elements before each action
        """
        self.artifact = artifact
        self.pages: Dict[str, PageArtifact] = dict(pages or {})
        self.PAGE_TITLE = artifact.page_title
        self.SOURCE_URL = artifact.source_url
        super().__init__(driver, timeout=timeout)

    def perform(self, field_name: str, kind: Any, *args: Any) -> Any:
        """
        Run one of a field's operations.

        Args:
            field_name: Field name in the artifact
            kind: OperationKind (or its value, e.g. ``"setValue"``)
            *args: Operation argument (text or value) where required

        Returns:
            The operation's result; navigation returns the next ArtifactPage
        """
        spec = self.artifact.element(field_name)
        kind = OperationKind(kind)
        operation = spec.operation(kind)
        if operation is None:
            raise ValueError(f"{field_name} ({spec.role.value}) has no {kind.value} operation")

        logger.debug(f"[ArtifactPage] {operation.method_name} on {spec.locator}")
        if kind == OperationKind.NAVIGATE:
            return self.navigate(spec.locator, operation.target_page)
        return _DISPATCH[kind](self, spec.locator, *args)

    def open_page(self, class_name: str) -> Optional[BasePage]:
        target = self.pages.get(class_name)
        if target is not None:
            return ArtifactPage(self.driver, target, self.pages, timeout=self.timeout)
        return super().open_page(class_name)
