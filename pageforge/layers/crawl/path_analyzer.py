"""
Path Analyzer - URL to class/package names.

Pure functions deriving page-object class names and package names from
URLs, shared by the emitter, the crawler and the file writer.
"""

from urllib.parse import urlparse
import keyword
import logging
import re

logger = logging.getLogger(__name__)

_NON_ALNUM = re.compile(r"[^a-zA-Z0-9]")
_EXTENSION = re.compile(r"\.[^.]*$")

# Only the first path segments go into package names
MAX_PACKAGE_SEGMENTS = 2


def url_path(url: str) -> str:
    """Path component of ``url``, ``/`` when empty."""
    return urlparse(url).path or "/"


def _class_name_from_path(path: str) -> str:
    path = path.strip("/")
    if not path:
        return "HomePage"

    segments = path.split("/")
    last_segment = _EXTENSION.sub("", segments[-1])

    name = "".join(part[:1].upper() + part[1:] for part in _NON_ALNUM.split(last_segment) if part)
    if not name:
        name = f"Page{len(segments)}"
    if name[0].isdigit():
        name = "Page" + name
    return name + "Page"


def page_class_name(url: str, fallback: str = "DefaultPage") -> str:
    """
    Derive a page-object class name from a URL.

    ``https://shop.example.com/catalog/item-list.html`` becomes
    ``ItemListPage``; an empty path becomes ``HomePage``.

    Args:
        url: Absolute or relative URL
        fallback: Name returned when the URL cannot be parsed

    Returns:
        Class name ending in ``Page``
    """
    try:
        return _class_name_from_path(urlparse(url).path)
    except ValueError as e:
        logger.warning(f"[PathAnalyzer] Could not derive class name from {url}: {e}")
        return fallback


def target_class_name(href: str) -> str:
    """Class name for the page a link navigates to (``NextPage`` on failure)."""
    return page_class_name(href, fallback="NextPage")


def _package_segment(part: str) -> str:
    segment = _NON_ALNUM.sub("", part).lower()
    if segment[:1].isdigit():
        segment = "n" + segment
    if keyword.iskeyword(segment):
        segment += "_"
    return segment


def package_name(url: str, base: str = "pages") -> str:
    """
    Derive a package name from the host (reversed) and first path segments.

    ``https://shop.example.com/catalog/items/42`` becomes
    ``pages.com.example.shop.catalog.items``.

    Args:
        url: Absolute URL
        base: Root package

    Returns:
        Dotted package name
    """
    try:
        parsed = urlparse(url)
        host = parsed.hostname or ""
        path = parsed.path.strip("/")
    except ValueError as e:
        logger.warning(f"[PathAnalyzer] Could not derive package name from {url}: {e}")
        return f"{base}.default"

    parts = [base]
    for label in reversed(host.split(".")):
        segment = _package_segment(label)
        if segment:
            parts.append(segment)

    if path:
        for part in path.split("/")[:MAX_PACKAGE_SEGMENTS]:
            segment = _package_segment(part)
            if segment:
                parts.append(segment)

    return ".".join(parts)
