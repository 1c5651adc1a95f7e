"""
Integration tests against a real Chrome.

Pages are served from local files so the tests need no network.
Run with PAGEFORGE_LIVE=1.
"""

import os

import pytest

# Skip if dependencies not available
pytest.importorskip("selenium")

pytestmark = pytest.mark.skipif(
    os.environ.get("PAGEFORGE_LIVE") != "1",
    reason="set PAGEFORGE_LIVE=1 to run browser tests",
)

INDEX = """<!DOCTYPE html>
<html><head><title>Shop Home</title></head>
<body>
  <form>
    <input id="search" type="search">
    <input name="remember" type="checkbox">
    <select name="sort"><option value="asc">Ascending</option><option value="desc">Descending</option></select>
    <button class="btn primary" type="button">Go</button>
  </form>
  <a href="about.html">About</a>
  <iframe srcdoc="&lt;input id='coupon' type='text'&gt;"></iframe>
</body></html>
"""

ABOUT = """<!DOCTYPE html>
<html><head><title>About us</title></head>
<body><a href="index.html">Home</a><a href="team.html">Team</a></body></html>
"""


@pytest.fixture(scope="module")
def driver():
    from pageforge.core.driver_factory import create_driver

    driver = create_driver(headless=True)
    yield driver
    driver.quit()


@pytest.fixture
def site(tmp_path):
    (tmp_path / "index.html").write_text(INDEX, encoding="utf-8")
    (tmp_path / "about.html").write_text(ABOUT, encoding="utf-8")
    return (tmp_path / "index.html").as_uri()


class TestLiveGeneration:
    """End-to-end generation on a real browser."""

    def test_generate_and_drive_page(self, driver, site):
        from pageforge import PageParser
        from pageforge.layers.action import ArtifactPage

        driver.get(site)
        parser = PageParser(driver)
        artifact = parser.generate_pom()

        assert artifact.page_title == "Shop Home"
        assert "search" in artifact.field_names
        assert "iframe0Coupon" in artifact.field_names

        page = ArtifactPage(driver, artifact)
        page.perform("search", "setValue", "shoes")
        page.perform("nameRemember", "check")
        page.perform("nameSort", "selectByValue", "desc")
        page.perform("iframe0Coupon", "setValue", "SAVE10")

        assert page.perform("search", "getValue") == "shoes"
        assert page.perform("nameRemember", "isChecked") is True
        assert page.perform("nameSort", "getSelectedText") == "Descending"
        assert page.perform("iframe0Coupon", "getValue") == "SAVE10"

    def test_generated_module_runs(self, driver, site, tmp_path):
        import importlib.util

        from pageforge import PageParser
        from pageforge.layers.generate import render_python

        driver.get(site)
        source = render_python(PageParser(driver).generate_pom())
        module_path = tmp_path / "generated_page.py"
        module_path.write_text(source, encoding="utf-8")

        spec = importlib.util.spec_from_file_location("generated_page", module_path)
        module = importlib.util.module_from_spec(spec)
        spec.loader.exec_module(module)

        page = module.IndexPage(driver)
        page.enter_search("hats")
        assert page.get_search_value() == "hats"

    def test_crawl(self, driver, site, tmp_path):
        from pageforge import PageParser

        files = PageParser(driver).save_all_to_files(str(tmp_path / "out"), site, max_depth=2)

        assert len(files) == 2
        assert (tmp_path / "out" / "crawl_report.json").is_file()
