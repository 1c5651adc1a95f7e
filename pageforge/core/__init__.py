"""Core module - Configuration, errors, driver management and the parser."""

from pageforge.core.config import GeneratorConfig
from pageforge.core.driver_factory import browser_session, create_driver
from pageforge.core.errors import (
    CookieFormatError,
    CookieOperationError,
    ElementNotFoundError,
    NavigationError,
    PageForgeError,
    PageIdentityError,
    PageParsingError,
    POMGenerationError,
    WaitTimeoutError,
)

__all__ = [
    "GeneratorConfig",
    "browser_session",
    "create_driver",
    "CookieFormatError",
    "CookieOperationError",
    "ElementNotFoundError",
    "NavigationError",
    "PageForgeError",
    "PageIdentityError",
    "PageParsingError",
    "POMGenerationError",
    "WaitTimeoutError",
]
