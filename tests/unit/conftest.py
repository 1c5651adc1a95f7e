import pytest

from fakes import FakeDriver, FakeElement, FakePage


@pytest.fixture
def login_page():
    """A login form with every collection tier represented."""
    return FakePage(
        title="Sign in - Example",
        elements=[
            FakeElement("input", {"id": "username", "type": "text"}),
            FakeElement("input", {"id": "password", "type": "password", "name": "pwd"}),
            FakeElement("input", {"name": "remember", "type": "checkbox"}),
            FakeElement("button", {"class": "btn primary", "type": "submit"}, text="Sign in"),
            FakeElement("a", {"href": "https://example.com/forgot"}, text="Forgot password?"),
            FakeElement("select", {"name": "lang"}),
        ],
    )


@pytest.fixture
def driver(login_page):
    return FakeDriver({"https://example.com/login": login_page}, current_url="https://example.com/login")
