"""
Renderer - PageArtifact to Python source.

Produces one module per artifact containing a ``BasePage`` subclass with
a locator constant per field and a method per operation.
"""

from typing import List
import re

from pageforge.layers.generate.emitter import ElementSpec, Operation, OperationKind, PageArtifact
from pageforge.layers.generate.name_allocator import NameAllocator
from pageforge.layers.sense.locator_inference import LocatorSpec

_WORD_BOUNDARY_1 = re.compile(r"(.)([A-Z][a-z]+)")
_WORD_BOUNDARY_2 = re.compile(r"([a-z0-9])([A-Z])")

# BasePage attributes generated names must not shadow
RESERVED_NAMES = (
    "driver", "timeout", "verify_identity", "set_value", "get_value", "check", "uncheck",
    "is_checked", "click", "is_enabled", "get_href", "get_text", "select_by_text",
    "select_by_value", "get_selected_text", "open_page", "navigate",
    "PAGE_TITLE", "SOURCE_URL", "DEFAULT_TIMEOUT",
)

_HELPERS = {
    OperationKind.SET_VALUE: "set_value",
    OperationKind.GET_VALUE: "get_value",
    OperationKind.CHECK: "check",
    OperationKind.UNCHECK: "uncheck",
    OperationKind.IS_CHECKED: "is_checked",
    OperationKind.CLICK: "click",
    OperationKind.IS_ENABLED: "is_enabled",
    OperationKind.GET_HREF: "get_href",
    OperationKind.SELECT_BY_TEXT: "select_by_text",
    OperationKind.SELECT_BY_VALUE: "select_by_value",
    OperationKind.GET_SELECTED_TEXT: "get_selected_text",
    OperationKind.GET_TEXT: "get_text",
}

_DOCSTRINGS = {
    OperationKind.SET_VALUE: "Clear {field} and type ``text`` into it.",
    OperationKind.GET_VALUE: "Current value of {field}.",
    OperationKind.CHECK: "Select {field} unless it is already selected.",
    OperationKind.UNCHECK: "Deselect {field} if it is selected.",
    OperationKind.IS_CHECKED: "Whether {field} is selected.",
    OperationKind.CLICK: "Click {field}.",
    OperationKind.IS_ENABLED: "Whether {field} is enabled.",
    OperationKind.GET_HREF: "href of {field}.",
    OperationKind.SELECT_BY_TEXT: "Select the {field} option with visible text ``text``.",
    OperationKind.SELECT_BY_VALUE: "Select the {field} option with value ``value``.",
    OperationKind.GET_SELECTED_TEXT: "Text of the selected {field} option.",
    OperationKind.GET_TEXT: "Visible text of {field}.",
}


def snake_case(name: str) -> str:
    """``getSelectedGoBtnText`` -> ``get_selected_go_btn_text``."""
    name = _WORD_BOUNDARY_1.sub(r"\1_\2", name)
    return _WORD_BOUNDARY_2.sub(r"\1_\2", name).lower()


def _doc_text(text: str) -> str:
    return text.replace("\\", "/").replace('"', "'")


def module_file_name(class_name: str) -> str:
    """File name for the module holding ``class_name``."""
    return f"{snake_case(class_name)}.py"


def _render_locator(locator: LocatorSpec) -> str:
    args = [f"LocatorKind.{locator.kind.name}", repr(locator.value)]
    if locator.index is not None:
        args.append(f"index={locator.index}")
    if locator.tag is not None:
        args.append(f"tag={locator.tag!r}")
    if locator.frame_index is not None:
        args.append(f"frame_index={locator.frame_index}")
        args.append(f"frame_xpath={locator.frame_xpath!r}")
    return f"LocatorSpec({', '.join(args)})"


def _render_method(method: str, constant: str, spec: ElementSpec, operation: Operation) -> List[str]:
    field = f"``{spec.field_name}``"
    argument = operation.argument

    if operation.kind == OperationKind.NAVIGATE:
        return [
            f"    def {method}(self):",
            f'        """Click {field} and open {operation.target_page}."""',
            f"        return self.navigate(self.{constant}, {operation.target_page!r})",
            "",
        ]

    signature = f"self, {argument}" if argument else "self"
    call_args = f"self.{constant}, {argument}" if argument else f"self.{constant}"
    return [
        f"    def {method}({signature}):",
        f'        """{_DOCSTRINGS[operation.kind].format(field=field)}"""',
        f"        return self.{_HELPERS[operation.kind]}({call_args})",
        "",
    ]


def render_python(artifact: PageArtifact) -> str:
    """
    Render an artifact as a Python page-object module.

    Args:
        artifact: Artifact from PageObjectEmitter

    Returns:
        Module source code
    """
    names = NameAllocator()
    for reserved in RESERVED_NAMES:
        names.reserve(reserved)

    lines = [
        f'"""Page object for {_doc_text(artifact.source_url)} (generated by pageforge)."""',
        "",
        "from pageforge.layers.action import BasePage",
        "from pageforge.layers.sense import LocatorKind, LocatorSpec",
        "",
        "",
        f"class {artifact.class_name}(BasePage):",
        f'    """Page object for ``{artifact.class_name}``."""',
        "",
        f"    PAGE_TITLE = {artifact.page_title!r}",
        f"    SOURCE_URL = {artifact.source_url!r}",
        "",
    ]

    constants = {}
    for spec in artifact.elements:
        constant = names.reserve(snake_case(spec.field_name).upper())
        constants[spec.field_name] = constant
        lines.append(f"    {constant} = {_render_locator(spec.locator)}")
    if artifact.elements:
        lines.append("")

    for spec in artifact.elements:
        for operation in spec.operations:
            method = names.reserve(snake_case(operation.method_name))
            lines.extend(_render_method(method, constants[spec.field_name], spec, operation))

    while lines and lines[-1] == "":
        lines.pop()
    return "\n".join(lines) + "\n"
