"""Leitura de sitemaps: índice, news sitemap e image sitemap."""

from __future__ import annotations

import logging
from typing import List, Optional, Sequence

from errors import SourceError
from http_utils import HttpFetcher
from markup import parse_xml, text_of
from models import ImageIndex, RawCandidate, SitemapEntry

logger = logging.getLogger(__name__)


# ============================================================
# 1. ÍNDICE DE SITEMAPS
# ============================================================


def is_sitemap_index(soup) -> bool:
    return soup.find("sitemapindex") is not None


def read_sitemap_index(soup) -> List[SitemapEntry]:
    """Pares {loc, lastmod} do índice, em ordem de documento."""
    entries = []
    for node in soup.find_all("sitemap"):
        loc = text_of(node.find("loc", recursive=False))
        if not loc or not loc.startswith("http"):
            continue
        entries.append(SitemapEntry(loc=loc, lastmod=text_of(node.find("lastmod", recursive=False))))
    return entries


def newest_sitemaps(entries: Sequence[SitemapEntry], count: int) -> List[SitemapEntry]:
    """Mais recentes primeiro (comparação de string funciona para ISO-8601).

    Entradas sem lastmod ficam no fim; empates mantêm a ordem original
    (o sort do Python é estável).
    """
    dated = sorted((e for e in entries if e.lastmod), key=lambda e: e.lastmod, reverse=True)
    undated = [e for e in entries if not e.lastmod]
    return (dated + undated)[: max(0, count)]


def resolve_sitemap_urls(fetcher: HttpFetcher, url: str, count: int) -> List[str]:
    """Lê o índice em `url` e devolve os `count` sitemaps mais recentes."""
    soup = parse_xml(fetcher.fetch_text(url))
    entries = read_sitemap_index(soup)
    if not entries:
        raise SourceError(f"No sitemaps found in sitemap index {url}")
    chosen = newest_sitemaps(entries, count)
    logger.info("Sitemap index %s: using %s", url, ", ".join(e.loc for e in chosen))
    return [e.loc for e in chosen]


# ============================================================
# 2. NEWS SITEMAP
# ============================================================


def _first_image_loc(url_node) -> Optional[str]:
    image = url_node.find("image:image")
    if image is None:
        return None
    return text_of(image.find("image:loc"))


def read_news_sitemap(soup) -> List[RawCandidate]:
    """Candidatos do news sitemap; exige `loc` e `news:title`."""
    out = []
    for u in soup.find_all("url"):
        loc = text_of(u.find("loc", recursive=False))
        news = u.find("news:news")
        title = text_of(news.find("news:title")) if news is not None else None
        if not loc or not title:
            continue
        pub_date = text_of(news.find("news:publication_date"))
        out.append(
            RawCandidate(
                url=loc,
                title=title,
                image_url=_first_image_loc(u),
                publish_date=pub_date,
            )
        )
    return out


def news_candidates(fetcher: HttpFetcher, url: str, sitemap_count: int = 1) -> List[RawCandidate]:
    """Candidatos de um news sitemap; se `url` for um índice, segue os mais recentes."""
    soup = parse_xml(fetcher.fetch_text(url))
    if is_sitemap_index(soup):
        entries = read_sitemap_index(soup)
        if not entries:
            raise SourceError(f"No sitemaps found in sitemap index {url}")
        out = []
        for entry in newest_sitemaps(entries, sitemap_count):
            out.extend(read_news_sitemap(parse_xml(fetcher.fetch_text(entry.loc))))
    else:
        out = read_news_sitemap(soup)

    if not out:
        raise SourceError(f"No news entries with title found in {url}")
    logger.info("News sitemap %s: %d candidates", url, len(out))
    return out


# ============================================================
# 3. IMAGE SITEMAP
# ============================================================


def read_image_sitemap(soup, index: Optional[ImageIndex] = None) -> ImageIndex:
    """Acrescenta ao índice url -> imagem; a primeira imagem vista fica."""
    if index is None:
        index = {}
    for u in soup.find_all("url"):
        page_url = text_of(u.find("loc", recursive=False))
        if not page_url or page_url in index:
            continue
        image_loc = _first_image_loc(u)
        if image_loc:
            index[page_url] = image_loc
    return index


def build_image_index(fetcher: HttpFetcher, index_url: str, sitemap_count: int = 2) -> ImageIndex:
    index: ImageIndex = {}
    for sitemap_url in resolve_sitemap_urls(fetcher, index_url, sitemap_count):
        read_image_sitemap(parse_xml(fetcher.fetch_text(sitemap_url)), index)
    logger.info("Image index from %s: %d pages with images", index_url, len(index))
    return index


__all__ = [
    "is_sitemap_index",
    "read_sitemap_index",
    "newest_sitemaps",
    "resolve_sitemap_urls",
    "read_news_sitemap",
    "news_candidates",
    "read_image_sitemap",
    "build_image_index",
]
