import json
from contextlib import contextmanager

import pytest
from click.testing import CliRunner
from selenium.common.exceptions import WebDriverException

from pageforge import __version__
from pageforge.cli import main as cli_main

from fakes import FakeDriver, FakeElement, FakePage


@pytest.fixture
def fake_browser(monkeypatch, login_page):
    """Replace the real browser with an in-memory site."""
    driver = FakeDriver({
        "https://example.com/login": login_page,
        "https://example.com/forgot": FakePage("Forgot", [FakeElement("input", {"id": "email"})]),
    })
    opened = []

    @contextmanager
    def session(**kwargs):
        opened.append(kwargs)
        yield driver

    monkeypatch.setattr(cli_main, "browser_session", session)
    driver.opened = opened
    return driver


def test_version():
    result = CliRunner().invoke(cli_main.cli, ["version"])

    assert result.exit_code == 0
    assert __version__ in result.output


def test_doctor_starts_a_browser(fake_browser):
    fake_browser.capabilities = {
        "browserName": "chrome",
        "browserVersion": "126.0.6478.126",
        "chrome": {"chromedriverVersion": "126.0.6478.126 (d36ace6)"},
    }

    result = CliRunner().invoke(cli_main.cli, ["doctor"])

    assert result.exit_code == 0, result.output
    assert "126.0.6478.126" in result.output
    assert fake_browser.visits == ["about:blank"]
    assert fake_browser.opened[0]["headless"] is True


def test_doctor_fails_without_a_browser(monkeypatch):
    @contextmanager
    def no_chrome(**kwargs):
        raise WebDriverException("cannot find Chrome binary")
        yield

    monkeypatch.setattr(cli_main, "browser_session", no_chrome)

    result = CliRunner().invoke(cli_main.cli, ["doctor"])

    assert result.exit_code == 1
    assert "cannot find Chrome binary" in result.output


def test_profile_from_config_reaches_the_browser(fake_browser, tmp_path):
    config = tmp_path / "pageforge.json"
    config.write_text(json.dumps({"profile_path": str(tmp_path / "profile")}), encoding="utf-8")

    result = CliRunner().invoke(cli_main.cli, [
        "--config", str(config), "generate", "https://example.com/login", "--print",
    ])

    assert result.exit_code == 0, result.output
    assert fake_browser.opened[0]["profile_path"] == str(tmp_path / "profile")


def test_generate_prints_source(fake_browser):
    result = CliRunner().invoke(cli_main.cli, ["generate", "https://example.com/login", "--print"])

    assert result.exit_code == 0, result.output
    assert "LoginPage" in result.output


def test_generate_writes_module(fake_browser, tmp_path):
    result = CliRunner().invoke(cli_main.cli, [
        "generate", "https://example.com/login", "--output-dir", str(tmp_path), "--headed",
    ])

    assert result.exit_code == 0, result.output
    assert (tmp_path / "pages" / "com" / "example" / "login" / "login_page.py").is_file()
    assert fake_browser.opened[0]["headless"] is False


def test_crawl_uses_config_file(fake_browser, tmp_path):
    config = tmp_path / "pageforge.json"
    config.write_text(json.dumps({"max_depth": 1, "output_dir": str(tmp_path / "out")}), encoding="utf-8")

    result = CliRunner().invoke(cli_main.cli, ["--config", str(config), "crawl", "https://example.com/login"])

    assert result.exit_code == 0, result.output
    assert (tmp_path / "out" / "crawl_report.json").is_file()
    assert fake_browser.visits == ["https://example.com/login"]


def test_bad_config_value_is_a_usage_error(fake_browser):
    result = CliRunner().invoke(cli_main.cli, ["crawl", "https://example.com/login", "--max-depth", "-1"])

    assert result.exit_code == 2


def test_generation_error_exits_non_zero(fake_browser):
    def lost(by, value):
        raise WebDriverException("session lost")

    fake_browser.find_elements = lost

    result = CliRunner().invoke(cli_main.cli, ["generate", "https://example.com/login", "--print"])

    assert result.exit_code == 1
    assert "Error" in result.output


def test_failed_crawl_page_is_not_fatal(fake_browser, tmp_path):
    fake_browser.pages["https://example.com/broken"] = FakePage(fail=True)

    result = CliRunner().invoke(cli_main.cli, [
        "crawl", "https://example.com/broken", "--max-depth", "1", "--output-dir", str(tmp_path),
    ])

    assert result.exit_code == 0, result.output
    report = json.loads((tmp_path / "crawl_report.json").read_text(encoding="utf-8"))
    assert "https://example.com/broken" in report["errors"]
