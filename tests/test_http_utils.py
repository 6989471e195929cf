import unittest
from unittest.mock import Mock, patch

import requests

from errors import FetchError
from http_utils import ACCEPT_HTML, ACCEPT_XML, HttpFetcher


def _response(status, text=""):
    r = Mock()
    r.status_code = status
    r.text = text
    r.content = text.encode("utf-8")
    return r


class TestHttpFetcher(unittest.TestCase):
    def setUp(self):
        self.fetcher = HttpFetcher("top5-test/1.0", timeout=5)

    @patch("http_utils.requests.get")
    def test_sends_user_agent_and_accept(self, get):
        get.return_value = _response(200, "<urlset/>")
        self.assertEqual(self.fetcher.fetch_text("https://site.test/news.xml"), "<urlset/>")
        _, kwargs = get.call_args
        self.assertEqual(kwargs["headers"]["User-Agent"], "top5-test/1.0")
        self.assertEqual(kwargs["headers"]["Accept"], ACCEPT_XML)
        self.assertEqual(kwargs["timeout"], 5)

    @patch("http_utils.requests.get")
    def test_html_accept(self, get):
        get.return_value = _response(204)
        self.fetcher.fetch_html("https://site.test/")
        self.assertEqual(get.call_args[1]["headers"]["Accept"], ACCEPT_HTML)

    @patch("http_utils.requests.get")
    def test_non_2xx_raises_with_status_and_url(self, get):
        get.return_value = _response(403, "blocked")
        with self.assertRaises(FetchError) as ctx:
            self.fetcher.fetch_text("https://site.test/news.xml")
        self.assertEqual(ctx.exception.status, 403)
        self.assertEqual(ctx.exception.url, "https://site.test/news.xml")

    @patch("http_utils.requests.get")
    def test_redirect_status_is_not_success(self, get):
        get.return_value = _response(304)
        with self.assertRaises(FetchError):
            self.fetcher.fetch_text("https://site.test/news.xml")

    @patch("http_utils.requests.get")
    def test_transport_error_becomes_fetch_error(self, get):
        get.side_effect = requests.Timeout("read timed out")
        with self.assertRaises(FetchError) as ctx:
            self.fetcher.fetch_text("https://site.test/news.xml")
        self.assertIsNone(ctx.exception.status)
        self.assertIn("read timed out", str(ctx.exception))


if __name__ == "__main__":
    unittest.main()
