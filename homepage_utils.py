"""Varredura da home: links com cara de matéria viram candidatos."""

from __future__ import annotations

import logging
import re
from typing import List, Sequence
from urllib.parse import urldefrag, urljoin, urlparse

from errors import SourceError
from http_utils import HttpFetcher
from markup import collapse_ws, parse_html
from models import RawCandidate

logger = logging.getLogger(__name__)

DATE_PATH_RE = r"/(?:19|20)\d{2}/\d{1,2}/\d{1,2}/[^/?#]+"


def story_pattern(categories: Sequence[str] = ()) -> re.Pattern:
    """Regex do path de uma matéria: /AAAA/MM/DD/slug ou /<categoria>/slug."""
    parts = [DATE_PATH_RE]
    cats = [re.escape(c.strip("/")) for c in categories if c.strip("/")]
    if cats:
        parts.append(r"/(?:%s)/[^?#]*[a-z0-9][^?#]*" % "|".join(cats))
    return re.compile(r"^(?:%s)" % "|".join(parts), re.IGNORECASE)


def _same_site(url: str, site_url: str) -> bool:
    host = (urlparse(url).hostname or "").lower()
    site = (urlparse(site_url).hostname or "").lower()
    if host.startswith("www."):
        host = host[4:]
    if site.startswith("www."):
        site = site[4:]
    return bool(host) and host == site


def read_homepage(
    soup,
    site_url: str,
    pattern: re.Pattern,
    min_title_length: int = 8,
) -> List[RawCandidate]:
    out: List[RawCandidate] = []
    seen = set()

    for a in soup.find_all("a", href=True):
        href = a["href"].strip()
        if not href or href.startswith(("#", "javascript:", "mailto:")):
            continue

        url = urldefrag(urljoin(site_url, href))[0]
        parsed = urlparse(url)
        if parsed.scheme not in ("http", "https") or not _same_site(url, site_url):
            continue
        if not pattern.match(parsed.path):
            continue
        if url in seen:
            continue

        title = collapse_ws(a.get_text(" "))
        if len(title) < min_title_length:
            # âncora de imagem ou "Leia mais"; outra âncora pode ter o título
            continue

        seen.add(url)
        out.append(RawCandidate(url=url, title=title, element=a))

    return out


def homepage_candidates(
    fetcher: HttpFetcher,
    url: str,
    site_url: str,
    categories: Sequence[str] = (),
    min_title_length: int = 8,
) -> List[RawCandidate]:
    soup = parse_html(fetcher.fetch_html(url))
    out = read_homepage(soup, site_url, story_pattern(categories), min_title_length)
    if not out:
        raise SourceError(f"No story links found on {url}")
    logger.info("Homepage %s: %d candidates", url, len(out))
    return out


__all__ = ["story_pattern", "read_homepage", "homepage_candidates", "DATE_PATH_RE"]
