"""
Page Object Emitter - Collected elements to page-object artifacts.

Turns the keyed elements of one page into a language-neutral
``PageArtifact``: named, located, role-tagged fields plus the operations
each role supports. Rendering to source code is a separate step.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Mapping, Optional, Tuple
from urllib.parse import urldefrag, urljoin
import logging

from pageforge.layers.crawl.path_analyzer import package_name, page_class_name, target_class_name
from pageforge.layers.generate.name_allocator import NameAllocator
from pageforge.layers.sense.element_collector import CollectedElement
from pageforge.layers.sense.locator_inference import (
    ElementRole,
    LocatorSpec,
    infer_locator,
    infer_role,
)

logger = logging.getLogger(__name__)


class OperationKind(str, Enum):
    """Actions and reads a page object offers for an element."""
    SET_VALUE = "setValue"
    GET_VALUE = "getValue"
    CHECK = "check"
    UNCHECK = "uncheck"
    IS_CHECKED = "isChecked"
    CLICK = "click"
    IS_ENABLED = "isEnabled"
    GET_HREF = "getHref"
    NAVIGATE = "navigate"
    SELECT_BY_TEXT = "selectByText"
    SELECT_BY_VALUE = "selectByValue"
    GET_SELECTED_TEXT = "getSelectedText"
    GET_TEXT = "getText"


class WaitCondition(str, Enum):
    """State an element must reach before an operation runs."""
    VISIBLE = "visible"
    CLICKABLE = "clickable"


# Operation kinds that take one string argument, and its name
ARGUMENT_NAMES = {
    OperationKind.SET_VALUE: "text",
    OperationKind.SELECT_BY_TEXT: "text",
    OperationKind.SELECT_BY_VALUE: "value",
}

# (kind, method name template, wait) per role; {F} is the capitalised field name
_ROLE_OPERATIONS = {
    ElementRole.TEXT_INPUT: [
        (OperationKind.SET_VALUE, "enter{F}", WaitCondition.CLICKABLE),
        (OperationKind.GET_VALUE, "get{F}Value", WaitCondition.VISIBLE),
    ],
    ElementRole.CHECKBOX: [
        (OperationKind.CHECK, "check{F}", WaitCondition.CLICKABLE),
        (OperationKind.UNCHECK, "uncheck{F}", WaitCondition.CLICKABLE),
        (OperationKind.IS_CHECKED, "is{F}Checked", WaitCondition.VISIBLE),
    ],
    ElementRole.BUTTON: [
        (OperationKind.CLICK, "click{F}", WaitCondition.CLICKABLE),
        (OperationKind.IS_ENABLED, "is{F}Enabled", WaitCondition.VISIBLE),
    ],
    ElementRole.LINK: [
        (OperationKind.CLICK, "click{F}Link", WaitCondition.CLICKABLE),
        (OperationKind.GET_HREF, "get{F}Href", WaitCondition.VISIBLE),
    ],
    ElementRole.SELECT: [
        (OperationKind.SELECT_BY_TEXT, "select{F}ByText", WaitCondition.CLICKABLE),
        (OperationKind.SELECT_BY_VALUE, "select{F}ByValue", WaitCondition.CLICKABLE),
        (OperationKind.GET_SELECTED_TEXT, "getSelected{F}Text", WaitCondition.VISIBLE),
    ],
    ElementRole.GENERIC: [
        (OperationKind.CLICK, "click{F}", WaitCondition.CLICKABLE),
        (OperationKind.GET_TEXT, "get{F}Text", WaitCondition.VISIBLE),
    ],
}
# Passwords and textareas take text like inputs; radios behave like checkboxes
_ROLE_OPERATIONS[ElementRole.PASSWORD] = _ROLE_OPERATIONS[ElementRole.TEXT_INPUT]
_ROLE_OPERATIONS[ElementRole.TEXT_AREA] = _ROLE_OPERATIONS[ElementRole.TEXT_INPUT]
_ROLE_OPERATIONS[ElementRole.RADIO] = _ROLE_OPERATIONS[ElementRole.CHECKBOX]


@dataclass(frozen=True)
class Operation:
    """One generated accessor or action."""
    kind: OperationKind
    method_name: str  # camelCase, unique within the artifact
    wait: WaitCondition
    target_page: Optional[str] = None  # Class name for NAVIGATE

    @property
    def argument(self) -> Optional[str]:
        """Name of the string argument the operation takes, if any."""
        return ARGUMENT_NAMES.get(self.kind)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "kind": self.kind.value,
            "method_name": self.method_name,
            "wait": self.wait.value,
            "target_page": self.target_page,
        }


@dataclass(frozen=True)
class ElementSpec:
    """A named, located, role-tagged field of a page object."""
    field_name: str
    key: str
    locator: LocatorSpec
    role: ElementRole
    operations: Tuple[Operation, ...]
    href: Optional[str] = None

    def operation(self, kind: OperationKind) -> Optional[Operation]:
        """First operation of the given kind, if the field has one."""
        for op in self.operations:
            if op.kind == kind:
                return op
        return None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "field_name": self.field_name,
            "key": self.key,
            "locator": {
                "kind": self.locator.kind.value,
                "value": self.locator.value,
                "index": self.locator.index,
                "tag": self.locator.tag,
            },
            "role": self.role.value,
            "operations": [op.to_dict() for op in self.operations],
            "href": self.href,
        }


@dataclass(frozen=True)
class PageArtifact:
    """
    Generated representation of one page object.

    ``page_title`` is the page-identity check: when set, a consumer
    must refuse to bind the artifact to a page whose title does not
    contain it.
    """
    class_name: str
    package: str
    elements: Tuple[ElementSpec, ...]
    source_url: str
    page_title: Optional[str] = None

    def element(self, field_name: str) -> ElementSpec:
        """Look up a field by name."""
        for spec in self.elements:
            if spec.field_name == field_name:
                return spec
        raise KeyError(f"{self.class_name} has no field '{field_name}'")

    @property
    def field_names(self) -> Tuple[str, ...]:
        return tuple(spec.field_name for spec in self.elements)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "class_name": self.class_name,
            "package": self.package,
            "source_url": self.source_url,
            "page_title": self.page_title,
            "elements": [spec.to_dict() for spec in self.elements],
        }


def is_navigable(href: Optional[str], source_url: str = "") -> bool:
    """
    Whether a link leads to another document.

    Empty hrefs, ``javascript:`` pseudo-URLs and anchors into the same
    document do not. Selenium reports ``href`` resolved against the page,
    so an empty or fragment-only href arrives as the page's own URL;
    any target equal to ``source_url`` once fragments are dropped counts
    as the same document.
    """
    if not href or not href.strip():
        return False
    href = href.strip()
    if href.lower().startswith("javascript:") or href.startswith("#"):
        return False
    if source_url:
        try:
            target = urldefrag(urljoin(source_url, href)).url
            return target != urldefrag(source_url).url
        except ValueError:
            return True
    return True


def _capitalize(name: str) -> str:
    return name[:1].upper() + name[1:]


class PageObjectEmitter:
    """
    Builds a PageArtifact from the elements of one page.

    Example:
        >>> emitter = PageObjectEmitter()
        >>> artifact = emitter.emit("Shop", "https://example.com/cart", elements)
        >>> [spec.field_name for spec in artifact.elements]
        ['checkoutButton', 'couponCode']
    """

    def __init__(self, base_package: str = "pages"):
        self.base_package = base_package

    def emit(
        self,
        page_title: Optional[str],
        source_url: str,
        elements: Mapping[str, CollectedElement],
        class_name: Optional[str] = None,
        package: Optional[str] = None,
    ) -> PageArtifact:
        """
        Emit the page-object artifact for a page.

        Args:
            page_title: Live page title; recorded as the identity check when non-empty
            source_url: URL the elements were collected from
            elements: Keyed elements from the collector, in collection order
            class_name: Override for the derived class name
            package: Override for the derived package name

        Returns:
            Immutable PageArtifact
        """
        class_name = class_name or page_class_name(source_url)
        package = package or package_name(source_url, base=self.base_package)
        logger.info(f"[PageObjectEmitter] Generating {class_name} in package {package}")

        # Scoped to this emission only
        field_names = NameAllocator()
        method_names = NameAllocator()

        specs = []
        for key, item in elements.items():
            field_name = field_names.allocate(key)
            locator = infer_locator(key, item.tier, item.frame_index)
            role = infer_role(item.tag_name, item.input_type)
            operations = self._operations_for(field_name, role, item.href, source_url, method_names)
            specs.append(ElementSpec(
                field_name=field_name,
                key=key,
                locator=locator,
                role=role,
                operations=operations,
                href=item.href,
            ))

        artifact = PageArtifact(
            class_name=class_name,
            package=package,
            elements=tuple(specs),
            source_url=source_url,
            page_title=page_title or None,
        )
        logger.info(f"[PageObjectEmitter] Generated {class_name} with {len(specs)} elements")
        return artifact

    def _operations_for(
        self,
        field_name: str,
        role: ElementRole,
        href: Optional[str],
        source_url: str,
        method_names: NameAllocator,
    ) -> Tuple[Operation, ...]:
        """Operations for one field, keyed by its role."""
        capitalized = _capitalize(field_name)
        operations = [
            Operation(kind, method_names.reserve(template.format(F=capitalized)), wait)
            for kind, template, wait in _ROLE_OPERATIONS[role]
        ]

        if role == ElementRole.LINK and is_navigable(href, source_url):
            target = target_class_name(href)
            operations.append(Operation(
                OperationKind.NAVIGATE,
                method_names.reserve(f"navigateTo{target}"),
                WaitCondition.CLICKABLE,
                target_page=target,
            ))
        elif role == ElementRole.LINK:
            logger.debug(f"[PageObjectEmitter] No navigation for {field_name} (href={href!r})")

        return tuple(operations)
