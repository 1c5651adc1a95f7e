"""
Errors - Exception taxonomy for page-object generation.

Every error carries the context (URL, element key, locator, operation)
needed to act on it from a log line.
"""

from typing import Any, Optional


class PageForgeError(Exception):
    """Base class for all pageforge errors."""


class ElementNotFoundError(PageForgeError):
    """An element is missing or its handle went stale."""

    def __init__(self, message: str, key: Optional[str] = None):
        super().__init__(message)
        self.key = key


class WaitTimeoutError(PageForgeError):
    """An element or document never reached the required state in time."""

    def __init__(
        self,
        message: str,
        locator: Any = None,
        condition: Optional[str] = None,
        timeout: Optional[float] = None,
        url: Optional[str] = None,
    ):
        super().__init__(message)
        self.locator = locator
        self.condition = condition
        self.timeout = timeout
        self.url = url


class PageParsingError(PageForgeError):
    """Collecting elements from a page failed as a whole."""

    def __init__(self, message: str, url: Optional[str] = None):
        super().__init__(message)
        self.url = url


class POMGenerationError(PageForgeError):
    """Emitting or writing page objects failed."""

    def __init__(self, message: str, url: Optional[str] = None):
        super().__init__(message)
        self.url = url


class NavigationError(PageForgeError):
    """Navigating to a crawl node failed."""

    def __init__(self, message: str, url: Optional[str] = None):
        super().__init__(message)
        self.url = url


class CookieFormatError(PageForgeError):
    """A persisted cookie record is malformed."""

    def __init__(self, message: str, line_number: Optional[int] = None, line: Optional[str] = None):
        super().__init__(message)
        self.line_number = line_number
        self.line = line


class CookieOperationError(PageForgeError):
    """Reading, writing or applying cookies failed."""


class PageIdentityError(PageForgeError):
    """The live page is not the page a page object was generated for."""

    def __init__(self, message: str, expected_title: str = "", actual_title: str = "", url: Optional[str] = None):
        super().__init__(message)
        self.expected_title = expected_title
        self.actual_title = actual_title
        self.url = url
