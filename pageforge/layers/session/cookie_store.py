"""
Cookie Store - Persist and restore browser cookies.

Saves the session's cookies to a plain-text file so a later run can skip
the login flow. One cookie per line:

    name;value;domain;path;expiry|null;true|false
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, TYPE_CHECKING
import logging

from selenium.common.exceptions import WebDriverException

from pageforge.core.errors import CookieFormatError, CookieOperationError

if TYPE_CHECKING:
    from selenium.webdriver.remote.webdriver import WebDriver

logger = logging.getLogger(__name__)

FIELD_SEPARATOR = ";"
FIELD_COUNT = 6
NULL_EXPIRY = "null"


@dataclass(frozen=True)
class CookieRecord:
    """One persisted cookie."""
    name: str
    value: str
    domain: str
    path: str
    expiry: Optional[int] = None  # Epoch seconds, None for session cookies
    secure: bool = False

    @classmethod
    def from_selenium(cls, cookie: Dict[str, Any]) -> "CookieRecord":
        """Create from a ``driver.get_cookies()`` entry."""
        expiry = cookie.get("expiry")
        return cls(
            name=cookie.get("name", ""),
            value=cookie.get("value", ""),
            domain=cookie.get("domain", ""),
            path=cookie.get("path", "/"),
            expiry=int(expiry) if expiry is not None else None,
            secure=bool(cookie.get("secure", False)),
        )

    def to_selenium(self) -> Dict[str, Any]:
        """Dictionary accepted by ``driver.add_cookie``."""
        cookie: Dict[str, Any] = {
            "name": self.name,
            "value": self.value,
            "path": self.path,
            "secure": self.secure,
        }
        if self.domain:
            cookie["domain"] = self.domain
        if self.expiry is not None:
            cookie["expiry"] = self.expiry
        return cookie

    def to_line(self) -> str:
        """Serialize to one line of the cookie file."""
        values = [self.name, self.value, self.domain, self.path]
        for value in values:
            if FIELD_SEPARATOR in value or "\n" in value or "\r" in value:
                raise CookieFormatError(
                    f"Cookie '{self.name}' cannot be saved: field {value!r} contains "
                    f"'{FIELD_SEPARATOR}' or a line break"
                )
        expiry = NULL_EXPIRY if self.expiry is None else str(self.expiry)
        return FIELD_SEPARATOR.join(values + [expiry, "true" if self.secure else "false"])

    @classmethod
    def from_line(cls, line: str, line_number: Optional[int] = None) -> "CookieRecord":
        """
        Parse one line of the cookie file.

        Raises:
            CookieFormatError: Wrong field count, non-integer expiry or a
                secure flag other than ``true``/``false``
        """
        parts = line.split(FIELD_SEPARATOR)
        if len(parts) != FIELD_COUNT:
            raise CookieFormatError(
                f"Line {line_number}: expected {FIELD_COUNT} fields, got {len(parts)}",
                line_number=line_number,
                line=line,
            )

        name, value, domain, path, expiry_text, secure_text = parts
        if not name:
            raise CookieFormatError(f"Line {line_number}: empty cookie name", line_number=line_number, line=line)

        if expiry_text == NULL_EXPIRY:
            expiry = None
        else:
            try:
                expiry = int(expiry_text)
            except ValueError as e:
                raise CookieFormatError(
                    f"Line {line_number}: invalid expiry {expiry_text!r}",
                    line_number=line_number,
                    line=line,
                ) from e

        secure_text = secure_text.lower()
        if secure_text not in ("true", "false"):
            raise CookieFormatError(
                f"Line {line_number}: invalid secure flag {secure_text!r}",
                line_number=line_number,
                line=line,
            )

        return cls(name, value, domain, path or "/", expiry, secure_text == "true")


@dataclass
class CookieLoadResult:
    """Outcome of loading a cookie file."""
    loaded: int = 0
    errors: List[Exception] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors


class CookieStore:
    """
    Save browser cookies to a file and add them back to a session.

    Example:
        >>> store = CookieStore()
        >>> # After logging in...
        >>> store.save(driver, "cookies.txt")
        3
        >>> # In a new session, on the same domain...
        >>> store.load(driver, "cookies.txt").loaded
        3
    """

    def save(self, driver: "WebDriver", destination: str) -> int:
        """
        Write every cookie of the current session to ``destination``.

        Args:
            driver: Selenium WebDriver
            destination: File path, overwritten

        Returns:
            Number of cookies written

        Raises:
            CookieFormatError: A cookie field cannot be represented
            CookieOperationError: Reading cookies or writing the file failed
        """
        try:
            cookies = driver.get_cookies()
        except WebDriverException as e:
            raise CookieOperationError(f"Failed to read cookies from the browser: {e}") from e

        # Serialize first so a bad cookie leaves any existing file intact
        lines = [CookieRecord.from_selenium(cookie).to_line() for cookie in cookies]

        try:
            with open(destination, "w", encoding="utf-8") as f:
                for line in lines:
                    f.write(line + "\n")
        except OSError as e:
            raise CookieOperationError(f"Failed to write cookies to {destination}: {e}") from e

        logger.info(f"[CookieStore] Saved {len(lines)} cookies to {destination}")
        return len(lines)

    def load(self, driver: "WebDriver", source: str) -> CookieLoadResult:
        """
        Add the cookies stored in ``source`` to the session.

        The driver must already be on a page of the cookies' domain.
        Malformed lines and cookies the browser rejects are recorded in
        the result and skipped; the remaining lines are still loaded.

        Args:
            driver: Selenium WebDriver
            source: File written by ``save``

        Returns:
            CookieLoadResult with the count of cookies added and per-line errors

        Raises:
            CookieOperationError: The file cannot be read
        """
        try:
            with open(source, "r", encoding="utf-8") as f:
                lines = f.read().splitlines()
        except OSError as e:
            raise CookieOperationError(f"Failed to read cookies from {source}: {e}") from e

        result = CookieLoadResult()
        for line_number, line in enumerate(lines, start=1):
            if not line.strip():
                continue
            try:
                record = CookieRecord.from_line(line, line_number)
            except CookieFormatError as e:
                logger.warning(f"[CookieStore] Skipping malformed cookie: {e}")
                result.errors.append(e)
                continue

            try:
                driver.add_cookie(record.to_selenium())
            except WebDriverException as e:
                logger.warning(f"[CookieStore] Browser rejected cookie '{record.name}': {e}")
                result.errors.append(CookieOperationError(
                    f"Line {line_number}: browser rejected cookie '{record.name}': {e}"
                ))
                continue
            result.loaded += 1

        logger.info(f"[CookieStore] Loaded {result.loaded} cookies from {source} ({len(result.errors)} errors)")
        return result
