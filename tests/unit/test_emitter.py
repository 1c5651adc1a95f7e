import dataclasses

import pytest

from pageforge.layers.generate.emitter import (
    OperationKind,
    PageObjectEmitter,
    WaitCondition,
    is_navigable,
)
from pageforge.layers.sense.element_collector import CollectedElement, ElementCollector
from pageforge.layers.sense.locator_inference import ElementRole, KeyTier, LocatorKind, LocatorSpec


def _item(key, tag, tier=KeyTier.ID, input_type=None, href=None, frame_index=None):
    return CollectedElement(key, None, tier, tag, input_type=input_type, href=href, frame_index=frame_index)


@pytest.fixture
def artifact(driver):
    elements = ElementCollector().collect(driver)
    return PageObjectEmitter().emit(driver.title, driver.current_url, elements)


def test_artifact_identity(artifact):
    assert artifact.class_name == "LoginPage"
    assert artifact.package == "pages.com.example.login"
    assert artifact.page_title == "Sign in - Example"
    assert artifact.source_url == "https://example.com/login"


def test_fields_follow_collection_order(artifact):
    assert artifact.field_names == ("username", "password", "nameRemember", "nameLang", "btnButton", "a0")


def test_roles_and_locators(artifact):
    assert artifact.element("username").role == ElementRole.TEXT_INPUT
    assert artifact.element("password").role == ElementRole.PASSWORD
    assert artifact.element("nameRemember").role == ElementRole.CHECKBOX
    assert artifact.element("nameLang").locator == LocatorSpec(LocatorKind.NAME, "lang")
    assert artifact.element("btnButton").locator == LocatorSpec(LocatorKind.CLASS, "btn", tag="button")
    assert artifact.element("a0").locator == LocatorSpec(LocatorKind.TAG, "a", index=0)


def test_operations_per_role(artifact):
    methods = {
        spec.field_name: [op.method_name for op in spec.operations]
        for spec in artifact.elements
    }

    assert methods["username"] == ["enterUsername", "getUsernameValue"]
    assert methods["nameRemember"] == ["checkNameRemember", "uncheckNameRemember", "isNameRememberChecked"]
    assert methods["nameLang"] == ["selectNameLangByText", "selectNameLangByValue", "getSelectedNameLangText"]
    assert methods["btnButton"] == ["clickBtnButton", "isBtnButtonEnabled"]
    assert methods["a0"] == ["clickA0Link", "getA0Href", "navigateToForgotPage"]


def test_wait_conditions(artifact):
    checkbox = artifact.element("nameRemember")

    assert checkbox.operation(OperationKind.CHECK).wait == WaitCondition.CLICKABLE
    assert checkbox.operation(OperationKind.IS_CHECKED).wait == WaitCondition.VISIBLE
    assert artifact.element("username").operation(OperationKind.SET_VALUE).wait == WaitCondition.CLICKABLE
    assert artifact.element("username").operation(OperationKind.GET_VALUE).wait == WaitCondition.VISIBLE
    assert artifact.element("btnButton").operation(OperationKind.IS_ENABLED).wait == WaitCondition.VISIBLE


def test_navigation_target(artifact):
    navigate = artifact.element("a0").operation(OperationKind.NAVIGATE)

    assert navigate.target_page == "ForgotPage"
    assert navigate.argument is None


def test_method_names_unique_within_artifact():
    elements = {
        "save": _item("save", "button"),
        "save_button": _item("save_button", "button", tier=KeyTier.CLASS),
        "Save": _item("Save", "div"),
    }
    artifact = PageObjectEmitter().emit("Editor", "https://example.com/editor", elements)
    methods = [op.method_name for spec in artifact.elements for op in spec.operations]

    assert len(methods) == len(set(methods))
    assert "clickSave2" in methods


def test_colliding_keys_get_distinct_fields():
    elements = {
        "my-button": _item("my-button", "button"),
        "my_button": _item("my_button", "button"),
    }
    artifact = PageObjectEmitter().emit("T", "https://example.com/", elements)

    assert artifact.field_names == ("myButton", "myButton2")
    assert artifact.element("myButton2").locator == LocatorSpec(LocatorKind.ID, "my_button")


def test_iframe_element_locator():
    elements = {"iframe0_q": _item("iframe0_q", "input", input_type="search", frame_index=0)}
    artifact = PageObjectEmitter().emit("T", "https://example.com/", elements)
    spec = artifact.element("iframe0Q")

    assert spec.locator.frame_index == 0
    assert spec.locator.frame_xpath == "//*[@id='q']"
    assert spec.role == ElementRole.TEXT_INPUT


def test_links_without_target_have_no_navigation():
    elements = {
        "top": _item("top", "a", href="#top"),
        "js": _item("js", "a", href="javascript:void(0)"),
        "blank": _item("blank", "a", href=None),
    }
    artifact = PageObjectEmitter().emit("T", "https://example.com/", elements)

    for spec in artifact.elements:
        assert spec.operation(OperationKind.NAVIGATE) is None
        assert spec.operation(OperationKind.GET_HREF) is not None


def test_links_resolved_to_the_same_document_have_no_navigation():
    page_url = "https://example.com/login"
    elements = {
        "empty": _item("empty", "a", href=page_url),
        "anchor": _item("anchor", "a", href=page_url + "#top"),
        "next": _item("next", "a", href="https://example.com/signup"),
    }

    artifact = PageObjectEmitter().emit("Sign in", page_url, elements)

    assert artifact.element("empty").operation(OperationKind.NAVIGATE) is None
    assert artifact.element("anchor").operation(OperationKind.NAVIGATE) is None
    assert artifact.element("next").operation(OperationKind.NAVIGATE).target_page == "SignupPage"


def test_empty_title_is_not_an_identity_check():
    artifact = PageObjectEmitter().emit("", "https://example.com/", {})

    assert artifact.page_title is None
    assert artifact.elements == ()


def test_overrides_and_base_package():
    artifact = PageObjectEmitter(base_package="generated").emit(
        "T", "https://example.com/x", {}, class_name="CustomPage")

    assert artifact.class_name == "CustomPage"
    assert artifact.package == "generated.com.example.x"


def test_artifact_is_immutable(artifact):
    with pytest.raises(dataclasses.FrozenInstanceError):
        artifact.class_name = "Other"


def test_unknown_field_raises_key_error(artifact):
    with pytest.raises(KeyError):
        artifact.element("missing")


def test_to_dict(artifact):
    data = artifact.to_dict()

    assert data["class_name"] == "LoginPage"
    assert data["elements"][0]["operations"][0] == {
        "kind": "setValue",
        "method_name": "enterUsername",
        "wait": "clickable",
        "target_page": None,
    }


@pytest.mark.parametrize("href,navigable", [
    ("https://example.com/next", True),
    ("/relative", True),
    ("other#section", True),
    ("#top", False),
    ("javascript:void(0)", False),
    ("", False),
    (None, False),
    ("https://example.com/page#section", False),
    ("https://example.com/page", False),
])
def test_is_navigable(href, navigable):
    assert is_navigable(href, "https://example.com/page") is navigable
