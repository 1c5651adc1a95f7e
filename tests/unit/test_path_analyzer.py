import pytest

from pageforge.layers.crawl.path_analyzer import package_name, page_class_name, target_class_name, url_path


@pytest.mark.parametrize("url,expected", [
    ("https://example.com", "HomePage"),
    ("https://example.com/", "HomePage"),
    ("https://example.com/login", "LoginPage"),
    ("https://shop.example.com/catalog/item-list.html", "ItemListPage"),
    ("https://example.com/blog/2024", "Page2024Page"),
    ("https://example.com/a/---", "Page2Page"),
    ("/relative/contact-us", "ContactUsPage"),
])
def test_page_class_name(url, expected):
    assert page_class_name(url) == expected


def test_unparseable_url_falls_back():
    assert page_class_name("http://[::1", fallback="DefaultPage") == "DefaultPage"
    assert target_class_name("http://[::1") == "NextPage"


@pytest.mark.parametrize("url,expected", [
    ("https://example.com", "pages.com.example"),
    ("https://shop.example.com/catalog/items/42", "pages.com.example.shop.catalog.items"),
    ("https://example.com/2024/class/list", "pages.com.example.n2024.class_"),
    ("https://my-site.example.com/User-Profile", "pages.com.example.mysite.userprofile"),
])
def test_package_name(url, expected):
    assert package_name(url) == expected


def test_package_name_custom_base_and_fallback():
    assert package_name("https://example.com/docs", base="generated") == "generated.com.example.docs"
    assert package_name("http://[::1", base="generated") == "generated.default"


def test_url_path():
    assert url_path("https://example.com") == "/"
    assert url_path("https://example.com/a/b?x=1#top") == "/a/b"
