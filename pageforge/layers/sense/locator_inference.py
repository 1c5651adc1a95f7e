"""
Locator Inference - Element keys to locators and roles.

An element key encodes how the collector found the element (id, name,
class token, tag position, iframe). This module turns a key back into a
locator that re-finds the element, and turns tag/type metadata into the
semantic role that decides which page-object operations are generated.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple
import re

from selenium.webdriver.common.by import By


NAME_PREFIX = "name_"
IFRAME_KEY_PATTERN = re.compile(r"^iframe(\d+)_(.+)$")
TAG_POSITION_PATTERN = re.compile(r"^([a-z]+)_(\d+)$")


class KeyTier(str, Enum):
    """Which collection rule derived an element key."""
    ID = "id"
    NAME = "name"
    CLASS = "class"
    TAG = "tag"


class LocatorKind(str, Enum):
    """Ways of re-finding an element in a live document."""
    ID = "id"
    NAME = "name"
    CLASS = "class"
    TAG = "tag"
    XPATH = "xpath"


class ElementRole(str, Enum):
    """Semantic interaction category of an element."""
    TEXT_INPUT = "textInput"
    PASSWORD = "password"
    TEXT_AREA = "textArea"
    CHECKBOX = "checkbox"
    RADIO = "radio"
    BUTTON = "button"
    LINK = "link"
    SELECT = "select"
    GENERIC = "generic"


_BY_KIND = {
    LocatorKind.ID: By.ID,
    LocatorKind.NAME: By.NAME,
    LocatorKind.TAG: By.TAG_NAME,
    LocatorKind.XPATH: By.XPATH,
}

TEXT_INPUT_TYPES = frozenset({"text", "email", "search", "tel", "url"})
BUTTON_INPUT_TYPES = frozenset({"submit", "button"})


@dataclass(frozen=True)
class LocatorSpec:
    """
    A rule for re-finding an element.

    ``index`` selects the n-th match (tag-position locators). Class
    locators carry the element's ``tag`` and resolve through an XPath
    token match, since class tokens such as ``md:flex`` or ``w-1/2`` are
    not valid CSS class selectors.
    ``frame_index``/``frame_xpath`` are set for elements inside an
    iframe: the runtime enters the frame and evaluates ``frame_xpath``
    there, while ``value`` holds the full path for display.
    """
    kind: LocatorKind
    value: str
    index: Optional[int] = None
    frame_index: Optional[int] = None
    frame_xpath: Optional[str] = None
    tag: Optional[str] = None

    def to_by(self) -> Tuple[str, str]:
        """Selenium ``(by, value)`` pair for this locator."""
        if self.kind == LocatorKind.CLASS:
            return By.XPATH, to_xpath(self)
        return _BY_KIND[self.kind], self.value

    def in_frame(self) -> "LocatorSpec":
        """The locator to evaluate once inside the element's iframe."""
        if self.frame_xpath is None:
            return self
        return LocatorSpec(LocatorKind.XPATH, self.frame_xpath)

    def __str__(self) -> str:
        suffix = f"[{self.index}]" if self.index is not None else ""
        return f"{self.kind.value}={self.value}{suffix}"


def xpath_literal(value: str) -> str:
    """Quote a string for use inside an XPath expression."""
    if "'" not in value:
        return f"'{value}'"
    if '"' not in value:
        return f'"{value}"'
    parts = value.split("'")
    return "concat(" + ", \"'\", ".join(f"'{p}'" for p in parts) + ")"


def to_xpath(locator: LocatorSpec) -> str:
    """Express a main-document locator as an absolute XPath."""
    if locator.kind == LocatorKind.ID:
        return f"//*[@id={xpath_literal(locator.value)}]"
    if locator.kind == LocatorKind.NAME:
        return f"//*[@name={xpath_literal(locator.value)}]"
    if locator.kind == LocatorKind.CLASS:
        token = xpath_literal(f" {locator.value} ")
        return f"//{locator.tag or '*'}[contains(concat(' ', normalize-space(@class), ' '), {token})]"
    if locator.kind == LocatorKind.TAG:
        position = (locator.index or 0) + 1
        return f"/descendant::{locator.value}[{position}]"
    return locator.value


def _class_locator(key: str) -> LocatorSpec:
    token, _, tag = key.rpartition("_")
    if not token:
        return LocatorSpec(LocatorKind.CLASS, key)
    return LocatorSpec(LocatorKind.CLASS, token, tag=tag.lower() or None)


def _locator_for_tier(key: str, tier: KeyTier) -> LocatorSpec:
    if tier == KeyTier.NAME:
        return LocatorSpec(LocatorKind.NAME, key[len(NAME_PREFIX):] if key.startswith(NAME_PREFIX) else key)
    if tier == KeyTier.CLASS:
        return _class_locator(key)
    if tier == KeyTier.TAG:
        match = TAG_POSITION_PATTERN.match(key)
        if match:
            return LocatorSpec(LocatorKind.TAG, match.group(1), index=int(match.group(2)))
        return LocatorSpec(LocatorKind.TAG, key)
    return LocatorSpec(LocatorKind.ID, key)


def _locator_from_shape(key: str) -> LocatorSpec:
    # 1. name tier
    if key.startswith(NAME_PREFIX):
        return LocatorSpec(LocatorKind.NAME, key[len(NAME_PREFIX):])

    # 2. iframe-qualified key
    match = IFRAME_KEY_PATTERN.match(key)
    if match:
        return _frame_locator(int(match.group(1)), _locator_from_shape(match.group(2)))

    # 3. tag position; checked before the class rule because class keys
    # always end in a tag name, never in digits
    match = TAG_POSITION_PATTERN.match(key)
    if match:
        return LocatorSpec(LocatorKind.TAG, match.group(1), index=int(match.group(2)))

    # 4. class token + tag
    if "_" in key and not key.startswith("iframe"):
        return _class_locator(key)

    # 5. plain id
    return LocatorSpec(LocatorKind.ID, key)


def _frame_locator(frame_index: int, inner: LocatorSpec) -> LocatorSpec:
    inner_xpath = to_xpath(inner)
    return LocatorSpec(
        LocatorKind.XPATH,
        f"(//iframe)[{frame_index + 1}]{inner_xpath}",
        frame_index=frame_index,
        frame_xpath=inner_xpath,
    )


def infer_locator(
    key: str,
    tier: Optional[KeyTier] = None,
    frame_index: Optional[int] = None,
) -> LocatorSpec:
    """
    Infer the locator for an element key.

    Without hints the key shape decides (first match wins): ``name_``
    prefix, ``iframe<N>_`` prefix, ``<tag>_<int>``, ``<class>_<tag>``,
    else id. The collector knows which tier produced a key, and passing
    it avoids misreading ids such as ``user_name`` as class keys.

    Args:
        key: Element key from the collector
        tier: Collection tier that produced the key (optional)
        frame_index: Iframe index for keys collected inside a frame

    Returns:
        LocatorSpec that re-finds the element
    """
    if tier is None:
        return _locator_from_shape(key)

    if frame_index is not None:
        prefix = f"iframe{frame_index}_"
        inner_key = key[len(prefix):] if key.startswith(prefix) else key
        return _frame_locator(frame_index, _locator_for_tier(inner_key, tier))

    return _locator_for_tier(key, tier)


def infer_role(tag_name: str, input_type: Optional[str] = None) -> ElementRole:
    """
    Infer the semantic role of an element.

    Args:
        tag_name: Element tag name (any case)
        input_type: ``type`` attribute for ``input`` elements

    Returns:
        ElementRole deciding which operations are generated
    """
    tag = (tag_name or "").lower()

    if tag == "input":
        kind = (input_type or "text").lower()
        if kind in TEXT_INPUT_TYPES:
            return ElementRole.TEXT_INPUT
        if kind == "password":
            return ElementRole.PASSWORD
        if kind == "checkbox":
            return ElementRole.CHECKBOX
        if kind == "radio":
            return ElementRole.RADIO
        if kind in BUTTON_INPUT_TYPES:
            return ElementRole.BUTTON
        return ElementRole.GENERIC

    return {
        "button": ElementRole.BUTTON,
        "a": ElementRole.LINK,
        "select": ElementRole.SELECT,
        "textarea": ElementRole.TEXT_AREA,
    }.get(tag, ElementRole.GENERIC)
