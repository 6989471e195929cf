import logging

import requests

from errors import FetchError

logger = logging.getLogger(__name__)

ACCEPT_XML = "application/xml,text/xml;q=0.9,*/*;q=0.8"
ACCEPT_HTML = "text/html,application/xhtml+xml;q=0.9,*/*;q=0.8"


class HttpFetcher:
    """GET simples com User-Agent fixo; sem retry (quem chama decide o fallback)."""

    def __init__(self, user_agent: str, timeout: float = 20.0):
        self.user_agent = user_agent
        self.timeout = timeout

    def fetch_text(self, url: str, accept: str = ACCEPT_XML) -> str:
        headers = {
            "User-Agent": self.user_agent,
            "Accept": accept,
        }
        try:
            r = requests.get(url, headers=headers, timeout=self.timeout)
        except requests.RequestException as e:
            raise FetchError(url, reason=str(e)) from e

        if not 200 <= r.status_code < 300:
            raise FetchError(url, status=r.status_code)

        logger.debug("GET %s -> %s (%d bytes)", url, r.status_code, len(r.content))
        return r.text

    def fetch_html(self, url: str) -> str:
        return self.fetch_text(url, accept=ACCEPT_HTML)


__all__ = ["HttpFetcher", "ACCEPT_XML", "ACCEPT_HTML"]
