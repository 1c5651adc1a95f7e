from unittest.mock import MagicMock, patch

import pytest
from selenium.common.exceptions import InvalidSelectorException

from pageforge.core.errors import ElementNotFoundError, PageIdentityError, WaitTimeoutError
from pageforge.layers.action.page_object import ArtifactPage, BasePage
from pageforge.layers.generate.emitter import OperationKind, PageObjectEmitter
from pageforge.layers.sense.element_collector import ElementCollector
from pageforge.layers.sense.locator_inference import LocatorKind, LocatorSpec, infer_locator

from fakes import FakeDriver, FakeElement, FakePage


class SignInPage(BasePage):
    PAGE_TITLE = "Sign in"
    USERNAME = LocatorSpec(LocatorKind.ID, "username")
    REMEMBER = LocatorSpec(LocatorKind.NAME, "remember")

    def enter_username(self, text):
        return self.set_value(self.USERNAME, text)


class ForgotPage(BasePage):
    PAGE_TITLE = "Sign in"


@pytest.fixture
def artifact(driver):
    elements = ElementCollector().collect(driver)
    return PageObjectEmitter().emit(driver.title, driver.current_url, elements)


def test_identity_check_passes_on_matching_title(driver):
    page = SignInPage(driver)

    assert page.driver is driver


def test_identity_check_fails_on_wrong_page(driver):
    driver.pages[driver.current_url].title = "Dashboard"

    with pytest.raises(PageIdentityError) as exc_info:
        SignInPage(driver)

    assert exc_info.value.expected_title == "Sign in"
    assert exc_info.value.actual_title == "Dashboard"
    assert "https://example.com/login" in str(exc_info.value)


def test_set_and_get_value(driver):
    page = SignInPage(driver)
    page.enter_username("admin")

    assert page.get_value(SignInPage.USERNAME) == "admin"


def test_set_value_replaces_existing_text(driver, login_page):
    login_page.elements[0].attrs["value"] = "old"
    SignInPage(driver).enter_username("new")

    assert login_page.elements[0].attrs["value"] == "new"


def test_check_is_idempotent(driver):
    page = SignInPage(driver)

    page.check(SignInPage.REMEMBER)
    page.check(SignInPage.REMEMBER)
    assert page.is_checked(SignInPage.REMEMBER) is True

    page.uncheck(SignInPage.REMEMBER)
    assert page.is_checked(SignInPage.REMEMBER) is False


def test_hidden_element_times_out(driver, login_page):
    login_page.elements[0].displayed = False
    page = SignInPage(driver, timeout=0.01)

    with pytest.raises(WaitTimeoutError) as exc_info:
        page.get_value(SignInPage.USERNAME)

    assert exc_info.value.condition == "visible"
    assert exc_info.value.url == "https://example.com/login"


def test_disabled_element_is_visible_but_not_clickable(driver, login_page):
    button = login_page.elements[3]
    button.enabled = False
    page = SignInPage(driver, timeout=0.01)
    locator = LocatorSpec(LocatorKind.CLASS, "btn", tag="button")

    assert page.is_enabled(locator) is False
    with pytest.raises(WaitTimeoutError):
        page.click(locator)
    assert button.clicks == 0


def test_state_reads_wait_for_visibility(driver, login_page):
    remember = login_page.elements[2]
    remember.selected = True
    remember.displayed = False
    page = SignInPage(driver, timeout=0.01)

    with pytest.raises(WaitTimeoutError) as exc_info:
        page.is_checked(SignInPage.REMEMBER)

    assert exc_info.value.condition == "visible"


def test_class_token_with_css_special_characters(driver, login_page):
    login_page.elements.append(FakeElement("div", {"class": "md:flex w-1/2"}, text="Banner"))
    page = SignInPage(driver)

    assert page.get_text(LocatorSpec(LocatorKind.CLASS, "md:flex", tag="div")) == "Banner"
    assert page.get_text(LocatorSpec(LocatorKind.CLASS, "w-1/2", tag="div")) == "Banner"


def test_invalid_selector_raises_element_not_found(driver):
    page = SignInPage(driver)

    def invalid(by, value):
        raise InvalidSelectorException("invalid selector")

    driver.find_elements = invalid

    with pytest.raises(ElementNotFoundError, match="not a valid selector"):
        page.get_value(LocatorSpec(LocatorKind.XPATH, "//*["))


def test_tag_position_uses_index(driver, login_page):
    page = SignInPage(driver)
    page.click(LocatorSpec(LocatorKind.TAG, "input", index=2))

    assert login_page.elements[2].selected is True


def test_iframe_element_is_resolved_inside_frame():
    field = FakeElement("input", {"id": "q"})
    frame = FakeElement("iframe", {}, children=[field])
    driver = FakeDriver({"https://example.com/": FakePage("Search", [frame])})
    page = BasePage(driver)

    page.set_value(infer_locator("iframe0_q"), "selenium")

    assert field.attrs["value"] == "selenium"
    assert driver.frame is None


def test_missing_iframe_raises():
    driver = FakeDriver({"https://example.com/": FakePage("Empty")})

    with pytest.raises(ElementNotFoundError):
        BasePage(driver).click(infer_locator("iframe3_q"))


def test_select_helpers_use_select_wrapper(driver):
    page = SignInPage(driver)
    locator = LocatorSpec(LocatorKind.NAME, "lang")

    with patch("pageforge.layers.action.page_object.Select") as select_cls:
        select_cls.return_value.first_selected_option.text = "English"
        page.select_by_value(locator, "en")
        text = page.get_selected_text(locator)

    select_cls.return_value.select_by_value.assert_called_once_with("en")
    assert text == "English"


def test_open_page_uses_registry(driver):
    page = SignInPage(driver)

    assert isinstance(page.open_page("ForgotPage"), ForgotPage)
    assert page.open_page("NeverGeneratedPage") is None


def test_artifact_page_performs_operations(driver, artifact, login_page):
    page = ArtifactPage(driver, artifact)

    page.perform("username", "setValue", "admin")
    page.perform("nameRemember", OperationKind.CHECK)

    assert login_page.elements[0].attrs["value"] == "admin"
    assert page.perform("nameRemember", OperationKind.IS_CHECKED) is True
    assert page.perform("a0", OperationKind.GET_HREF) == "https://example.com/forgot"


def test_artifact_page_rejects_unsupported_operation(driver, artifact):
    page = ArtifactPage(driver, artifact)

    with pytest.raises(ValueError):
        page.perform("username", OperationKind.CHECK)
    with pytest.raises(KeyError):
        page.perform("missing", OperationKind.CLICK)


def test_artifact_page_navigates_to_next_artifact(driver, artifact):
    target = PageObjectEmitter().emit("Sign in", "https://example.com/forgot", {})
    page = ArtifactPage(driver, artifact, pages={"ForgotPage": target})

    next_page = page.perform("a0", OperationKind.NAVIGATE)

    assert isinstance(next_page, ArtifactPage)
    assert next_page.artifact is target


def test_artifact_page_checks_identity(driver, artifact):
    driver.pages[driver.current_url].title = "Something else"

    with pytest.raises(PageIdentityError):
        ArtifactPage(driver, artifact)


def test_click_scrolls_into_view():
    driver = MagicMock()
    driver.title = ""
    element = MagicMock()
    driver.find_elements.return_value = [element]

    BasePage(driver).click(LocatorSpec(LocatorKind.ID, "go"))

    element.click.assert_called_once()
    assert "scrollIntoView" in driver.execute_script.call_args[0][0]
