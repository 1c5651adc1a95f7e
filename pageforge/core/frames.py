"""Scoped iframe switching."""

from contextlib import contextmanager
from typing import Any, Iterator, TYPE_CHECKING
import logging

if TYPE_CHECKING:
    from selenium.webdriver.remote.webdriver import WebDriver

logger = logging.getLogger(__name__)


@contextmanager
def frame_context(driver: "WebDriver", frame: Any) -> Iterator[Any]:
    """
    Enter an iframe for the duration of a ``with`` block.

    The session is switched to the top-level document before entering the
    frame and back to it on every exit path, including exceptions raised
    while switching or inside the block.

    Example:
        >>> with frame_context(driver, iframe_element):
        ...     driver.find_elements("xpath", "//*[@id]")
    """
    driver.switch_to.default_content()
    try:
        driver.switch_to.frame(frame)
        yield frame
    finally:
        driver.switch_to.default_content()
        logger.debug("[frame_context] Restored default content")
