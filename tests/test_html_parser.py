"""
Testy odczytu kolejki skryptów z HTML.

Sprawdza:
- handle z id="<handle>-js" i z nazwy pliku
- wersję z parametru ver, adresy względne
- położenie (head / stopka) i strategię ładowania
- pomijanie skryptów inline i nie-JavaScript
- pobieranie strony przez requests (zamockowane)
"""

import pytest
import requests

from data_model import LoadStrategy
from html_parser import parser
from html_parser.parser import fetch_script_queue, parse_scripts


# ============================================================================
# FIXTURES
# ============================================================================

PAGE = """
<html>
<head>
  <script id="jquery-core-js" src="/wp-includes/js/jquery/jquery.min.js?ver=3.7.1"></script>
  <script type="application/ld+json" src="/schema.json"></script>
  <script>var inline = 1;</script>
</head>
<body>
  <script src="https://cdn.example.net/libs/Swiper_Bundle.min.js" defer></script>
  <script src="js/app.js?ver=1.2&amp;lang=pl" async></script>
  <script id="wc-cart-js" src="/wp-content/plugins/wc/cart.js" data-wp-strategy="defer"></script>
  <script src="/other/app.js"></script>
</body>
</html>
"""


@pytest.fixture
def page_queue():
    return parse_scripts(PAGE, "https://example.com/shop/")


class FakeResponse:
    def __init__(self, text, url, status=200):
        self.text = text
        self.url = url
        self.status_code = status
        self.encoding = None
        self.apparent_encoding = "utf-8"

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Error")


# ============================================================================
# PARSOWANIE
# ============================================================================

class TestParseScripts:

    def test_queue_order_and_filtering(self, page_queue):
        assert page_queue.queued() == ["jquery-core", "swiper-bundle-min", "app", "wc-cart", "app-2"]

    def test_handle_from_id_and_version(self, page_queue):
        s = page_queue.registered("jquery-core")
        assert s.src == "https://example.com/wp-includes/js/jquery/jquery.min.js"
        assert s.version == "3.7.1"
        assert s.in_footer is False

    def test_relative_src_and_other_params_kept(self, page_queue):
        s = page_queue.registered("app")
        assert s.src == "https://example.com/shop/js/app.js?lang=pl"
        assert s.version == "1.2"
        assert s.strategy == LoadStrategy.ASYNC

    def test_footer_and_strategy(self, page_queue):
        swiper = page_queue.registered("swiper-bundle-min")
        assert swiper.in_footer is True
        assert swiper.version is None
        assert swiper.strategy == LoadStrategy.DEFER
        assert page_queue.registered("wc-cart").strategy == LoadStrategy.DEFER

    def test_duplicate_handle_suffixed(self, page_queue):
        assert page_queue.registered("app-2").src == "https://example.com/other/app.js"

    def test_ver_removed_other_params_verbatim(self):
        queue = parse_scripts(
            '<script src="/a.js?ver=2&amp;q=a%20b&amp;flag&amp;x=1+2"></script>',
            "https://example.com/",
        )
        script = queue.registered("a")
        assert script.src == "https://example.com/a.js?q=a%20b&flag&x=1+2"
        assert script.version == "2"

    def test_empty_page(self):
        assert len(parse_scripts("<html></html>", "https://example.com/")) == 0


# ============================================================================
# POBIERANIE
# ============================================================================

class TestFetch:

    def test_fetch_uses_final_url(self, monkeypatch):
        calls = {}

        def fake_get(url, timeout, headers):
            calls.update(url=url, timeout=timeout, headers=headers)
            return FakeResponse('<script src="a.js"></script>', "https://example.com/blog/")

        monkeypatch.setattr(parser.requests, "get", fake_get)
        queue = fetch_script_queue("https://example.com/blog")

        assert calls["timeout"] == 30
        assert "Mozilla" in calls["headers"]["User-Agent"]
        assert queue.registered("a").src == "https://example.com/blog/a.js"

    def test_fetch_http_error(self, monkeypatch):
        monkeypatch.setattr(parser.requests, "get",
                            lambda url, timeout, headers: FakeResponse("", url, status=503))
        with pytest.raises(requests.HTTPError):
            fetch_script_queue("https://example.com/")
