"""
Driver Factory - WebDriver creation for page parsing.

Provides a single interface to create a Chrome WebDriver with the
stability options page parsing needs, and a context manager that quits
it afterwards.
"""

from contextlib import contextmanager
from typing import Iterator, Optional
import logging

from selenium import webdriver
from selenium.webdriver.chrome.options import Options as ChromeOptions

logger = logging.getLogger(__name__)

WebDriverType = webdriver.Chrome


def build_options(
    headless: bool = True,
    profile_path: Optional[str] = None,
    window_size: str = "1920,1080",
) -> ChromeOptions:
    """Chrome options used for every parsing session."""
    options = ChromeOptions()

    if headless:
        options.add_argument("--headless=new")

    if profile_path:
        options.add_argument(f"--user-data-dir={profile_path}")

    # Common stability options
    options.add_argument("--disable-extensions")
    options.add_argument("--no-sandbox")
    options.add_argument("--disable-dev-shm-usage")
    options.add_argument("--disable-gpu")
    options.add_argument(f"--window-size={window_size}")
    options.add_experimental_option("excludeSwitches", ["enable-automation"])

    return options


def create_driver(
    headless: bool = True,
    profile_path: Optional[str] = None,
    window_size: str = "1920,1080",
) -> WebDriverType:
    """
    Create a Chrome WebDriver.

    Args:
        headless: Run browser in headless mode
        profile_path: Path to browser profile for session persistence
        window_size: ``width,height``; layout affects which elements are visible

    Returns:
        WebDriver instance

    Example:
        >>> driver = create_driver(headless=True)
        >>> driver.get("https://example.com")
    """
    logger.debug(f"[DriverFactory] Starting Chrome (headless={headless}, window={window_size})")
    return webdriver.Chrome(options=build_options(headless, profile_path, window_size))


@contextmanager
def browser_session(
    headless: bool = True,
    profile_path: Optional[str] = None,
    window_size: str = "1920,1080",
) -> Iterator[WebDriverType]:
    """
    Create a driver and quit it when the block exits.

    Example:
        >>> with browser_session() as driver:
        ...     PageParser(driver).generate_pom()
    """
    driver = create_driver(headless=headless, profile_path=profile_path, window_size=window_size)
    try:
        yield driver
    finally:
        driver.quit()
        logger.debug("[DriverFactory] Browser closed")
